from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from common.exceptions import GenerationError
from vector_store.models import RetrievedChunk

from .config import GenerationConfig
from .ollama_client import OllamaGenerator
from .postprocess import strip_reasoning
from .prompts import NO_ANSWER, NO_CONTEXT, build_prompt

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


def build_context(chunks: Sequence[RetrievedChunk]) -> str:
    """Number retrieved chunks in relevance order: ``(1) text`` blocks separated by blank lines."""
    if not chunks:
        return NO_CONTEXT
    return "\n\n".join(f"({i + 1}) {chunk.text}" for i, chunk in enumerate(chunks))


class AnswerSynthesizer:
    """
    Turns retrieved context and a question into the final answer text.

    The prompt constrains the model to the context; the raw output has its
    reasoning segment removed. An empty result becomes "I don't know.".
    """

    def __init__(
        self,
        generator: Optional[TextGenerator] = None,
        config: Optional[GenerationConfig] = None,
    ):
        self.config = config or GenerationConfig.from_env()
        self.generator = generator or OllamaGenerator(self.config)

    def synthesize(self, context: str, question: str) -> str:
        prompt = build_prompt(context or NO_CONTEXT, question)

        try:
            raw = self.generator.generate(prompt)
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"Generation failed: {e}")
            raise GenerationError("Generation request failed", e) from e

        answer = strip_reasoning(
            raw or "",
            self.config.reasoning_start,
            self.config.reasoning_end,
        )
        if not answer:
            logger.info("Empty generation response; falling back to default answer")
            return NO_ANSWER
        return answer

    def answer(self, chunks: Sequence[RetrievedChunk], question: str) -> str:
        return self.synthesize(build_context(chunks), question)
