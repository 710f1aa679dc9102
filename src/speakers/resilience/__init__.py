"""In-process fault tolerance: circuit breaker, bulkhead and fallback."""

from speakers.resilience.bulkhead import Bulkhead
from speakers.resilience.circuit_breaker import CircuitBreaker, CircuitState
from speakers.resilience.errors import (
    BulkheadFullError,
    CircuitBreakerOpenError,
    FaultToleranceError,
)
from speakers.resilience.policy import FaultTolerancePolicy

__all__ = [
    "Bulkhead",
    "BulkheadFullError",
    "CircuitBreaker",
    "CircuitBreakerOpenError",
    "CircuitState",
    "FaultToleranceError",
    "FaultTolerancePolicy",
]
