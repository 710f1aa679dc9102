class ServiceFailureError(RuntimeError):
    """Raised by the fault-injection endpoints to simulate a broken service."""
