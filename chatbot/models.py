"""
Data Models for the Query-Turn Pipeline

Defines:
1. ChatMessage - One conversation message (user or assistant)
2. ChatRequest - Body of the HTTP chat endpoint
3. TurnResult - Outcome of one answered turn
4. LogEntry - One question/answer pair read back from the query log
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from vector_store.models import RetrievedChunk


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"] = Field(..., description="Message author")
    content: str = Field(..., description="Message text")


class ChatRequest(BaseModel):
    identity: str = Field(..., description="Authenticated email of the caller")
    messages: list[ChatMessage] = Field(
        ..., description="Ordered conversation; the latest user message is answered"
    )


class TurnResult(BaseModel):
    question: str
    answer: str
    collection: str
    retrieved: list[RetrievedChunk] = Field(default_factory=list)

    @property
    def grounded(self) -> bool:
        """True when the answer was generated with non-empty retrieved context."""
        return bool(self.retrieved)


class LogEntry(BaseModel):
    timestamp: datetime
    question: str
    answer: str
