"""Concurrency cap for guarded endpoint calls."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from speakers.resilience.errors import BulkheadFullError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Bulkhead:
    """Allows at most ``max_concurrent`` in-flight executions.

    An excess call is rejected immediately with :class:`BulkheadFullError`;
    nothing is queued.
    """

    def __init__(self, name: str, max_concurrent: int = 10) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.name = name
        self.max_concurrent = max_concurrent
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        if self._in_flight >= self.max_concurrent:
            logger.warning(
                "Bulkhead '%s' full (%d/%d), rejecting call",
                self.name, self._in_flight, self.max_concurrent,
            )
            raise BulkheadFullError(
                f"Bulkhead '{self.name}' is full ({self.max_concurrent} in flight)"
            )

        self._in_flight += 1
        try:
            return await func(*args, **kwargs)
        finally:
            self._in_flight -= 1

    def status(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "in_flight": self._in_flight,
            "max_concurrent": self.max_concurrent,
        }
