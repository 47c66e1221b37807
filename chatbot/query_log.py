"""
Append-only audit log of question/answer pairs.

Format, one event per line:
    [2026-01-31T12:00:00.000000+00:00] QUESTION: What is the return policy?
    [2026-01-31T12:00:00.000000+00:00] ANSWER: Returns are accepted within 30 days.

Newlines and backslashes in content are escaped so an event never spans lines.
Writes are best effort: a failing log never fails the turn that produced it.
"""

from __future__ import annotations

import logging
import re
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from .models import LogEntry

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^\[(?P<ts>[^\]]+)\] (?P<label>QUESTION|ANSWER): (?P<content>.*)$")


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\r", "\\r").replace("\n", "\\n")


def _unescape(text: str) -> str:
    return re.sub(
        r"\\(.)",
        lambda m: {"n": "\n", "r": "\r", "\\": "\\"}.get(m.group(1), m.group(0)),
        text,
    )


class QueryLog:
    def __init__(self, path: str | Path = "chat_log.txt"):
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, question: str, answer: str, timestamp: Optional[datetime] = None) -> None:
        ts = (timestamp or datetime.now(timezone.utc)).isoformat()
        lines = (
            f"[{ts}] QUESTION: {_escape(question)}\n"
            f"[{ts}] ANSWER: {_escape(answer)}\n"
        )
        try:
            with self._lock:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8", errors="backslashreplace") as f:
                    f.write(lines)
        except Exception as e:
            logger.error(f"Failed to write query log {self.path}: {e}")

    def read_entries(self) -> list[LogEntry]:
        return list(self.iter_entries())

    def iter_entries(self) -> Iterator[LogEntry]:
        if not self.path.exists():
            return
        pending: Optional[tuple[str, str]] = None
        with self.path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                match = _LINE_RE.match(line.rstrip("\n"))
                if not match:
                    logger.warning(f"Skipping malformed query log line {line_no}")
                    continue
                content = _unescape(match.group("content"))
                if match.group("label") == "QUESTION":
                    pending = (match.group("ts"), content)
                elif pending is not None:
                    yield LogEntry(
                        timestamp=datetime.fromisoformat(pending[0]),
                        question=pending[1],
                        answer=content,
                    )
                    pending = None
