"""Composition of fallback, circuit breaker and bulkhead around a call.

Order, outermost first: fallback -> circuit breaker -> bulkhead -> call.
A rejection by the breaker or the bulkhead therefore also triggers the
fallback, and a bulkhead rejection counts as a breaker failure.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from speakers.resilience.bulkhead import Bulkhead
from speakers.resilience.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)


class FaultTolerancePolicy:
    """Named set of guards applied to one operation.

    Args:
        name: Operation name used in logs and status output.
        circuit_breaker: Optional breaker shared by every call of the operation.
        bulkhead: Optional concurrency cap.
        fallback: Optional callable invoked with the call's arguments when
            the guarded call raises. May be sync or async.
    """

    def __init__(
        self,
        name: str,
        circuit_breaker: CircuitBreaker | None = None,
        bulkhead: Bulkhead | None = None,
        fallback: Callable[..., Any] | None = None,
    ) -> None:
        self.name = name
        self.circuit_breaker = circuit_breaker
        self.bulkhead = bulkhead
        self.fallback = fallback

    async def execute(self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        """Await ``func(*args, **kwargs)`` under this policy's guards."""
        try:
            return await self._guarded(func, *args, **kwargs)
        except Exception as exc:
            if self.fallback is None:
                raise
            logger.warning(
                "Operation '%s' failed (%s: %s), using fallback",
                self.name, type(exc).__name__, exc,
            )
            result = self.fallback(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result

    async def _guarded(self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        call = func
        if self.bulkhead is not None:
            bulkhead = self.bulkhead

            async def call(*a: Any, **kw: Any) -> Any:
                return await bulkhead.call(func, *a, **kw)

        if self.circuit_breaker is not None:
            return await self.circuit_breaker.call(call, *args, **kwargs)
        return await call(*args, **kwargs)

    def status(self) -> dict[str, Any]:
        return {
            "circuit_breaker": self.circuit_breaker.status() if self.circuit_breaker else None,
            "bulkhead": self.bulkhead.status() if self.bulkhead else None,
            "fallback": self.fallback is not None,
        }
