"""Circuit breaker for guarded endpoint calls.

States: CLOSED (normal) -> OPEN (failing) -> HALF_OPEN (testing recovery).

While closed, the outcomes of the last ``request_volume_threshold`` calls
form a rolling window. Once the window is full and the share of failures
reaches ``failure_ratio``, the breaker opens and rejects calls for
``delay`` seconds. The first call after the delay moves it to half-open,
where up to ``success_threshold`` trial calls run; that many consecutive
successes close it, any failure opens it again.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from speakers.resilience.errors import CircuitBreakerOpenError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Per-operation circuit breaker for coroutine functions.

    State is only touched between awaits, so a single event loop needs no lock.

    Usage::

        breaker = CircuitBreaker("search", request_volume_threshold=2)
        try:
            result = await breaker.call(service.find, template)
        except CircuitBreakerOpenError:
            ...
    """

    def __init__(
        self,
        name: str,
        request_volume_threshold: int = 20,
        failure_ratio: float = 0.5,
        delay: float = 5.0,
        success_threshold: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if request_volume_threshold < 1:
            raise ValueError("request_volume_threshold must be at least 1")
        if not 0.0 <= failure_ratio <= 1.0:
            raise ValueError("failure_ratio must be between 0 and 1")
        if success_threshold < 1:
            raise ValueError("success_threshold must be at least 1")

        self.name = name
        self.request_volume_threshold = request_volume_threshold
        self.failure_ratio = failure_ratio
        self.delay = delay
        self.success_threshold = success_threshold
        self._clock = clock

        self._state = CircuitState.CLOSED
        # True marks a failed call.
        self._window: deque[bool] = deque(maxlen=request_volume_threshold)
        self._opened_at: float = 0.0
        self._trial_successes = 0
        self._trials_in_flight = 0
        # Bumped on every state change; outcomes of calls admitted under an
        # older generation are discarded.
        self._generation = 0

    @property
    def state(self) -> CircuitState:
        if self._state == CircuitState.OPEN:
            if self._clock() - self._opened_at >= self.delay:
                logger.info("Circuit '%s' -> HALF_OPEN", self.name)
                self._transition(CircuitState.HALF_OPEN)
        return self._state

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Await ``func(*args, **kwargs)`` through the circuit breaker.

        Raises :class:`CircuitBreakerOpenError` if the circuit is open, or
        half-open with every trial slot taken.
        """
        current = self.state

        if current == CircuitState.OPEN:
            remaining = self.delay - (self._clock() - self._opened_at)
            raise CircuitBreakerOpenError(
                f"Circuit '{self.name}' is OPEN (retry in {remaining:.1f}s)"
            )

        trial = current == CircuitState.HALF_OPEN
        if trial:
            if self._trials_in_flight >= self.success_threshold:
                raise CircuitBreakerOpenError(
                    f"Circuit '{self.name}' is HALF_OPEN with all trial calls in flight"
                )
            self._trials_in_flight += 1
        generation = self._generation

        try:
            result = await func(*args, **kwargs)
        except Exception:
            if generation == self._generation:
                self._on_failure()
            raise
        finally:
            if trial and generation == self._generation:
                self._trials_in_flight -= 1

        if generation == self._generation:
            self._on_success()
        return result

    def _on_success(self) -> None:
        if self._state == CircuitState.CLOSED:
            self._window.append(False)
            return
        self._trial_successes += 1
        if self._trial_successes >= self.success_threshold:
            logger.info("Circuit '%s' recovered -> CLOSED", self.name)
            self._transition(CircuitState.CLOSED)

    def _on_failure(self) -> None:
        if self._state == CircuitState.HALF_OPEN:
            self._open("trial call failed")
            return
        self._window.append(True)
        if len(self._window) < self.request_volume_threshold:
            return
        failures = sum(self._window)
        if failures / len(self._window) >= self.failure_ratio:
            self._open(f"failures={failures}/{len(self._window)}")

    def _open(self, reason: str) -> None:
        logger.warning("Circuit '%s' -> OPEN (%s)", self.name, reason)
        self._transition(CircuitState.OPEN)
        self._opened_at = self._clock()

    def _transition(self, state: CircuitState) -> None:
        self._state = state
        self._generation += 1
        self._window.clear()
        self._trial_successes = 0
        self._trials_in_flight = 0

    def status(self) -> dict[str, Any]:
        state = self.state
        return {
            "name": self.name,
            "state": state.value,
            "window_size": len(self._window),
            "window_failures": sum(self._window),
            "request_volume_threshold": self.request_volume_threshold,
            "failure_ratio": self.failure_ratio,
            "delay_s": self.delay,
            "success_threshold": self.success_threshold,
        }
