"""
Identity -> collection authorization.

Every identity is authorized for exactly one collection. The lookup fails
closed: an identity missing from the table raises ``UnauthorizedError``
instead of falling back to a default or shared collection.

The pipeline only depends on the ``AccessPolicy`` protocol, so the static
table can be replaced with a database or directory-backed policy.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Protocol

from common.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class AccessPolicy(Protocol):
    def resolve(self, identity: str) -> str: ...


def normalize_identity(identity: str) -> str:
    return (identity or "").strip().lower()


class StaticAccessPolicy:
    """Static email -> collection table."""

    def __init__(self, mapping: Optional[Mapping[str, str]] = None):
        self._mapping: dict[str, str] = {}
        for identity, collection in (mapping or {}).items():
            key = normalize_identity(identity)
            if not key or not collection:
                raise ValueError(f"Invalid access mapping entry: {identity!r} -> {collection!r}")
            self._mapping[key] = collection

    def resolve(self, identity: str) -> str:
        collection = self._mapping.get(normalize_identity(identity))
        if collection is None:
            logger.warning(f"Access denied for identity: {identity!r}")
            raise UnauthorizedError(identity)
        return collection

    # Name used by the chat route.
    resolve_collection = resolve

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, str) and normalize_identity(identity) in self._mapping

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticAccessPolicy":
        """Load a JSON object ``{"email": "collection", ...}``."""
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Access map must be a JSON object: {path}")
        policy = cls(data)
        logger.info(f"Loaded {len(policy)} access mapping(s) from {path}")
        return policy

    @classmethod
    def from_env(cls) -> "StaticAccessPolicy":
        return cls.from_file(os.environ.get("ACCESS_MAP_PATH", "access_map.json"))
