"""
Retry with exponential backoff and a circuit breaker for external services.

The embedding and generation clients wrap their raw network call in a
``ResilientCall``; the pipeline itself never sees retries, only the final
error kind of the component.

Usage:
    guard = ResilientCall(name="ollama-embed")
    payload = guard.call(client.embeddings, model="nomic-embed-text", prompt=text)
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from .exceptions import CircuitOpenError, is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """
    Exponential backoff policy.

    Attributes:
        max_attempts: Total attempts including the first call
        initial_delay: Delay before the first retry (seconds)
        backoff: Multiplier applied to the delay after every retry
        retry_on: Predicate deciding whether an error is transient
        sleep: Sleep function (injectable for tests)
    """

    max_attempts: int = 3
    initial_delay: float = 0.5
    backoff: float = 2.0
    retry_on: Callable[[Exception], bool] = is_retryable
    sleep: Callable[[float], None] = time.sleep

    def run(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        delay = self.initial_delay
        attempts = max(1, self.max_attempts)

        for attempt in range(1, attempts + 1):
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                if attempt >= attempts or not self.retry_on(e):
                    raise
                logger.warning(
                    f"Transient error ({type(e).__name__}: {e}), "
                    f"retry {attempt}/{attempts - 1} in {delay:.2f}s"
                )
                self.sleep(delay)
                delay *= self.backoff

        raise RuntimeError("unreachable")  # pragma: no cover


@dataclass
class CircuitBreaker:
    """
    Consecutive-failure circuit breaker.

    closed -> open after ``failure_threshold`` consecutive failures;
    open -> half-open once ``reset_timeout`` seconds have elapsed;
    half-open -> closed on the next success, open again on failure.
    """

    name: str = "service"
    failure_threshold: int = 5
    reset_timeout: float = 30.0
    clock: Callable[[], float] = time.monotonic
    _failures: int = field(default=0, init=False, repr=False)
    _opened_at: Optional[float] = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def state(self) -> str:
        with self._lock:
            return self._state()

    def _state(self) -> str:
        if self._opened_at is None:
            return "closed"
        if self.clock() - self._opened_at >= self.reset_timeout:
            return "half-open"
        return "open"

    def before_call(self) -> None:
        with self._lock:
            if self._state() == "open":
                remaining = self.reset_timeout - (self.clock() - self._opened_at)
                raise CircuitOpenError(self.name, retry_after=max(0.0, remaining))

    def record_success(self) -> None:
        with self._lock:
            if self._opened_at is not None:
                logger.info(f"Circuit '{self.name}' closed")
            self._failures = 0
            self._opened_at = None

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            half_open = self._state() == "half-open"
            if half_open or self._failures >= self.failure_threshold:
                if self._opened_at is None or half_open:
                    logger.warning(
                        f"Circuit '{self.name}' opened after {self._failures} failure(s)"
                    )
                self._opened_at = self.clock()


class ResilientCall:
    """Runs a callable under a retry policy guarded by a circuit breaker."""

    def __init__(
        self,
        name: str,
        retry: Optional[RetryPolicy] = None,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.name = name
        self.retry = retry or RetryPolicy()
        self.breaker = breaker or CircuitBreaker(name=name)

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        self.breaker.before_call()
        try:
            result = self.retry.run(fn, *args, **kwargs)
        except Exception as e:
            # Only service-side failures count against the breaker.
            if is_retryable(e):
                self.breaker.record_failure()
            raise
        self.breaker.record_success()
        return result
