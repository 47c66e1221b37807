from .config import GenerationConfig
from .http_client import HTTPStatusError, post_json
from .ollama_client import OllamaGenerator, generate
from .postprocess import strip_reasoning
from .prompts import NO_ANSWER, NO_CONTEXT, build_prompt
from .service import AnswerSynthesizer, TextGenerator, build_context

__all__ = [
    "AnswerSynthesizer",
    "GenerationConfig",
    "HTTPStatusError",
    "NO_ANSWER",
    "NO_CONTEXT",
    "OllamaGenerator",
    "TextGenerator",
    "build_context",
    "build_prompt",
    "generate",
    "post_json",
    "strip_reasoning",
]
