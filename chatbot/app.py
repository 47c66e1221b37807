import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse

from common.exceptions import UnauthorizedError, format_error_chain
from common.logging_config import setup_logging

from .config import ChatbotConfig
from .models import ChatRequest
from .pipeline import ChatPipeline, build_pipeline

logger = logging.getLogger(__name__)


def create_app(pipeline: Optional[ChatPipeline] = None) -> FastAPI:
    pipeline = pipeline or build_pipeline()
    app = FastAPI(
        title="Customer Service Chatbot",
        version="1.0.0",
        description="Answers customer-service questions from per-tenant document collections.",
    )

    @app.get("/health")
    def health() -> dict:
        check = getattr(pipeline.embedder, "health_check", None)
        if check is None:
            return {"status": "ok"}
        embedder = check()
        return {"status": "ok" if embedder.get("healthy") else "degraded", "embedder": embedder}

    @app.post("/chat", response_class=PlainTextResponse)
    def chat(request: ChatRequest) -> str:
        try:
            return pipeline.answer(request.identity, request.messages)
        except UnauthorizedError as exc:
            raise HTTPException(status_code=403, detail="Forbidden") from exc
        except Exception as exc:
            logger.error(f"Chat turn failed:\n{format_error_chain(exc)}")
            raise HTTPException(status_code=500, detail="Internal Server Error") from exc

    return app


def main() -> None:
    import uvicorn

    setup_logging()
    config = ChatbotConfig.from_env()
    uvicorn.run(create_app(), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
