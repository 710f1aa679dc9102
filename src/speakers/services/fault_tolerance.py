"""Fault-tolerance policies for the speaker endpoint, built from settings."""

from __future__ import annotations

from speakers.config import Settings
from speakers.resilience import Bulkhead, CircuitBreaker, FaultTolerancePolicy
from speakers.schemas.speaker import SpeakerOut

LIST_POLICY = "list"
SEARCH_POLICY = "search"
FAILING_SERVICE_POLICY = "failing_service"


def empty_search_result(*args: object, **kwargs: object) -> list[SpeakerOut]:
    """Search fallback: no matches."""
    return []


def empty_speaker(*args: object, **kwargs: object) -> SpeakerOut:
    """Fallback for the failing retrieve: an empty speaker without links."""
    return SpeakerOut()


def build_policies(settings: Settings) -> dict[str, FaultTolerancePolicy]:
    """Create one policy per guarded operation.

    Policies hold breaker and bulkhead state, so they are built once per
    application and shared by all requests.
    """
    return {
        LIST_POLICY: FaultTolerancePolicy(
            LIST_POLICY,
            bulkhead=Bulkhead(LIST_POLICY, max_concurrent=settings.list_bulkhead_max_concurrent),
        ),
        SEARCH_POLICY: FaultTolerancePolicy(
            SEARCH_POLICY,
            circuit_breaker=CircuitBreaker(
                SEARCH_POLICY,
                request_volume_threshold=settings.search_breaker_request_volume_threshold,
                failure_ratio=settings.search_breaker_failure_ratio,
                delay=settings.search_breaker_delay_ms / 1000,
                success_threshold=settings.search_breaker_success_threshold,
            ),
            fallback=empty_search_result,
        ),
        FAILING_SERVICE_POLICY: FaultTolerancePolicy(
            FAILING_SERVICE_POLICY,
            fallback=empty_speaker,
        ),
    }
