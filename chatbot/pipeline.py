"""
Query-turn pipeline.

One turn: authorize identity -> embed latest question -> retrieve top-k chunks
-> synthesize the answer -> log the pair -> return the answer.

Stages run strictly in that order. Authorization, embedding and generation
failures propagate to the caller. A retrieval failure degrades to an empty
context and the model is asked to answer ungrounded. Logging is best effort.

Usage:
    pipeline = build_pipeline()
    answer = pipeline.answer("alice@example.com", [ChatMessage(role="user", content="...")])
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from common.exceptions import VectorIndexError
from generation.config import GenerationConfig
from generation.service import AnswerSynthesizer, build_context
from vector_store.collection_manager import CollectionManager
from vector_store.embedder import OllamaEmbedder
from vector_store.models import RetrievedChunk, StoreConfig
from vector_store.retriever import Retriever

from .access import AccessPolicy, StaticAccessPolicy
from .config import ChatbotConfig
from .models import ChatMessage, TurnResult
from .query_log import QueryLog

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    def embed(self, text: str) -> list[float]: ...


class ChunkRetriever(Protocol):
    def retrieve(
        self, collection_name: str, query_vector: list[float], k: Optional[int] = None
    ) -> list[RetrievedChunk]: ...


class Synthesizer(Protocol):
    def synthesize(self, context: str, question: str) -> str: ...


class TurnLog(Protocol):
    def append(self, question: str, answer: str) -> None: ...


def latest_question(messages: Sequence[ChatMessage]) -> str:
    """Content of the last user message. Raises ValueError if there is none."""
    for message in reversed(messages):
        if message.role == "user":
            return message.content
    raise ValueError("Conversation contains no user message")


class ChatPipeline:
    """Answers the latest user message of a conversation for one identity."""

    def __init__(
        self,
        access_policy: AccessPolicy,
        embedder: Embedder,
        retriever: ChunkRetriever,
        synthesizer: Synthesizer,
        query_log: Optional[TurnLog] = None,
        top_k: int = 10,
    ):
        self.access_policy = access_policy
        self.embedder = embedder
        self.retriever = retriever
        self.synthesizer = synthesizer
        self.query_log = query_log
        self.top_k = top_k

    def run_turn(self, identity: str, messages: Sequence[ChatMessage]) -> TurnResult:
        collection = self.access_policy.resolve(identity)
        question = latest_question(messages)

        vector = self.embedder.embed(question)

        try:
            retrieved = self.retriever.retrieve(collection, vector, self.top_k)
        except VectorIndexError as e:
            logger.error(f"Retrieval failed for {collection}, answering without context: {e}")
            retrieved = []

        logger.info(f"Retrieved {len(retrieved)} chunk(s) from {collection}")
        answer = self.synthesizer.synthesize(build_context(retrieved), question)

        if self.query_log is not None:
            try:
                self.query_log.append(question, answer)
            except Exception as e:
                logger.error(f"Query log write failed, turn still answered: {e}")

        return TurnResult(
            question=question,
            answer=answer,
            collection=collection,
            retrieved=list(retrieved),
        )

    def answer(self, identity: str, messages: Sequence[ChatMessage]) -> str:
        return self.run_turn(identity, messages).answer


def build_pipeline(
    config: Optional[ChatbotConfig] = None,
    store_config: Optional[StoreConfig] = None,
    generation_config: Optional[GenerationConfig] = None,
) -> ChatPipeline:
    """Wire the production pipeline (Ollama, ChromaDB, file-backed access map and log)."""
    config = config or ChatbotConfig.from_env()
    store_config = store_config or StoreConfig.from_env()
    generation_config = generation_config or GenerationConfig.from_env()

    manager = CollectionManager(store_config)
    return ChatPipeline(
        access_policy=StaticAccessPolicy.from_file(config.access_map_path),
        embedder=OllamaEmbedder.from_config(store_config),
        retriever=Retriever(manager, default_k=config.top_k),
        synthesizer=AnswerSynthesizer(config=generation_config),
        query_log=QueryLog(config.query_log_path),
        top_k=config.top_k,
    )
