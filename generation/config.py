from dataclasses import dataclass
import os


@dataclass
class GenerationConfig:
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "deepseek-r1"
    temperature: float = 0.2
    timeout: float = 120.0
    max_attempts: int = 3
    retry_delay: float = 1.0
    failure_threshold: int = 5
    reset_timeout: float = 30.0
    reasoning_start: str = "<think>"
    reasoning_end: str = "</think>"

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _float(name: str, default: float) -> float:
            value = os.environ.get(name)
            return float(value) if value else default

        return cls(
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", cls.ollama_base_url),
            ollama_model=os.environ.get("GENERATION_MODEL", cls.ollama_model),
            temperature=_float("GENERATION_TEMPERATURE", cls.temperature),
            timeout=_float("GENERATION_TIMEOUT", cls.timeout),
            max_attempts=_int("GENERATION_MAX_ATTEMPTS", cls.max_attempts),
            retry_delay=_float("GENERATION_RETRY_DELAY", cls.retry_delay),
            failure_threshold=_int("GENERATION_FAILURE_THRESHOLD", cls.failure_threshold),
            reset_timeout=_float("GENERATION_RESET_TIMEOUT", cls.reset_timeout),
            reasoning_start=os.environ.get("REASONING_START_MARKER", cls.reasoning_start),
            reasoning_end=os.environ.get("REASONING_END_MARKER", cls.reasoning_end),
        )
