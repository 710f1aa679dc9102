class FaultToleranceError(Exception):
    """Base class for calls rejected by a fault-tolerance guard."""


class CircuitBreakerOpenError(FaultToleranceError):
    """Raised when the circuit breaker is open."""


class BulkheadFullError(FaultToleranceError):
    """Raised when a bulkhead has no free execution slot."""
