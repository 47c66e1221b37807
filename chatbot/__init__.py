from .access import AccessPolicy, StaticAccessPolicy
from .config import ChatbotConfig
from .models import ChatMessage, ChatRequest, LogEntry, TurnResult
from .pipeline import ChatPipeline, build_pipeline, latest_question
from .query_log import QueryLog

__all__ = [
    "AccessPolicy",
    "ChatMessage",
    "ChatPipeline",
    "ChatRequest",
    "ChatbotConfig",
    "LogEntry",
    "QueryLog",
    "StaticAccessPolicy",
    "TurnResult",
    "build_pipeline",
    "latest_question",
]
