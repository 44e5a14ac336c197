"""Durable vector store with failover to the in-process store."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from ..core.models import EmbeddingRecord, SimilarityMatch
from .base import VectorStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FAILURE_THRESHOLD = 3


class BreakerState(str, enum.Enum):
    CLOSED = "closed"
    OPEN = "open"


class CircuitBreaker:
    """Counts consecutive durable-backend failures.

    ``closed -> open`` once ``threshold`` failures happen in a row. Open is
    terminal for the life of the instance: there is no half-open probe.
    """

    def __init__(self, threshold: int = DEFAULT_FAILURE_THRESHOLD):
        if threshold < 1:
            raise ValueError("threshold must be >= 1")
        self.threshold = threshold
        self._state = BreakerState.CLOSED
        self._failures = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> BreakerState:
        with self._lock:
            return self._state

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    def allows_request(self) -> bool:
        return self.state is BreakerState.CLOSED

    def record_success(self) -> None:
        with self._lock:
            if self._state is BreakerState.CLOSED:
                self._failures = 0

    def record_failure(self) -> BreakerState:
        with self._lock:
            if self._state is BreakerState.OPEN:
                return self._state
            self._failures += 1
            if self._failures >= self.threshold:
                self._state = BreakerState.OPEN
                logger.warning(
                    f"Durable vector store failed {self._failures} times in a row. "
                    f"Marking it unavailable for this process."
                )
            return self._state


class ResilientVectorStore(VectorStore):
    """Try the durable store first; on failure answer from the fallback.

    Store errors never leave this class. Errors raised by the fallback itself
    (e.g. a dimension mismatch) do propagate, since there is nothing left to
    fail over to.
    """

    name = "resilient"

    def __init__(
        self,
        durable: VectorStore,
        fallback: VectorStore,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.durable = durable
        self.fallback = fallback
        self.breaker = breaker or CircuitBreaker()

    async def _call(
        self,
        operation: str,
        durable_call: Callable[[], Awaitable[T]],
        fallback_call: Callable[[], Awaitable[T]],
    ) -> T:
        if not self.breaker.allows_request():
            logger.debug(f"{self.durable.name} marked unavailable, {operation} goes to {self.fallback.name}")
            return await fallback_call()

        try:
            result = await durable_call()
        except Exception as e:
            state = self.breaker.record_failure()
            logger.error(
                f"{self.durable.name} {operation} failed, falling back to {self.fallback.name} "
                f"(failures={self.breaker.failures}, breaker={state.value}): {e}"
            )
            return await fallback_call()

        self.breaker.record_success()
        return result

    async def upsert(self, records: List[EmbeddingRecord]) -> None:
        await self._call(
            "upsert",
            lambda: self.durable.upsert(records),
            lambda: self.fallback.upsert(records),
        )

    async def delete(self, ids: List[str]) -> int:
        return await self._call(
            "delete",
            lambda: self.durable.delete(ids),
            lambda: self.fallback.delete(ids),
        )

    async def query(
        self,
        query_vector: Sequence[float],
        top_k: int,
        project_id: Optional[object] = None,
    ) -> List[SimilarityMatch]:
        return await self._call(
            "query",
            lambda: self.durable.query(query_vector, top_k, project_id),
            lambda: self.fallback.query(query_vector, top_k, project_id),
        )
