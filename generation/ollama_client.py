from __future__ import annotations

import logging
from typing import Optional

from common.exceptions import CircuitOpenError, GenerationError
from common.resilience import CircuitBreaker, ResilientCall, RetryPolicy

from .config import GenerationConfig
from .http_client import HTTPStatusError, post_json

logger = logging.getLogger(__name__)


def generate(
    base_url: str,
    model: str,
    prompt: str,
    temperature: float = 0.2,
    timeout: float = 120,
) -> str:
    payload = {
        "model": model,
        "prompt": prompt,
        "stream": False,
        "options": {
            "temperature": temperature,
        },
    }
    url = f"{base_url.rstrip('/')}/api/generate"
    response = post_json(url, payload, timeout=timeout)
    text = response.get("response", "")
    if not isinstance(text, str):
        raise ValueError(f"Malformed generation response: 'response' is {type(text).__name__}")
    return text


class OllamaGenerator:
    """Raw text generation through Ollama, guarded by retry and a circuit breaker."""

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        guard: Optional[ResilientCall] = None,
    ):
        self.config = config or GenerationConfig()
        self._guard = guard or ResilientCall(
            name=f"ollama-generate:{self.config.ollama_model}",
            retry=RetryPolicy(
                max_attempts=self.config.max_attempts,
                initial_delay=self.config.retry_delay,
            ),
            breaker=CircuitBreaker(
                name=f"ollama-generate:{self.config.ollama_model}",
                failure_threshold=self.config.failure_threshold,
                reset_timeout=self.config.reset_timeout,
            ),
        )

    def generate(self, prompt: str) -> str:
        logger.debug(f"Generating with {self.config.ollama_model} ({len(prompt)} prompt chars)")
        try:
            return self._guard.call(
                generate,
                base_url=self.config.ollama_base_url,
                model=self.config.ollama_model,
                prompt=prompt,
                temperature=self.config.temperature,
                timeout=self.config.timeout,
            )
        except CircuitOpenError as e:
            raise GenerationError("Generation service unavailable", e) from e
        except HTTPStatusError as e:
            raise GenerationError(
                f"Ollama generation failed for model '{self.config.ollama_model}'",
                e,
                status_code=e.status_code,
            ) from e
        except (ConnectionError, TimeoutError) as e:
            raise GenerationError(
                f"Cannot reach Ollama at {self.config.ollama_base_url}", e
            ) from e
        except ValueError as e:
            raise GenerationError("Malformed generation response", e) from e
