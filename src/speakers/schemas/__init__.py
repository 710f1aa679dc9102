"""Pydantic schemas for API request/response models."""

from speakers.schemas.errors import ErrorObject, ErrorResponse
from speakers.schemas.speaker import SpeakerFields, SpeakerIn, SpeakerOut
from speakers.schemas.system import (
    FaultToleranceStatusResponse,
    HealthCheck,
    HealthResponse,
)

__all__ = [
    "ErrorObject",
    "ErrorResponse",
    "FaultToleranceStatusResponse",
    "HealthCheck",
    "HealthResponse",
    "SpeakerFields",
    "SpeakerIn",
    "SpeakerOut",
]
