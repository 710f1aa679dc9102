"""Shared FastAPI dependencies for database sessions, settings, health state, and policies."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from speakers.config import Settings, is_service_broken
from speakers.resilience import FaultTolerancePolicy
from speakers.services.health_state import HealthState
from speakers.services.speaker_service import SpeakerService


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session from the app-level session factory.

    The session factory is stored on ``request.app.state.session_factory``
    by the application lifespan. The session auto-closes when the request ends.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


async def get_speaker_service(
    db: AsyncSession = Depends(get_db),
) -> SpeakerService:
    """Provide a SpeakerService instance with the current DB session."""
    return SpeakerService(db)


def get_base_uri(request: Request) -> str:
    """Absolute URI of the speaker router, without a trailing slash."""
    settings: Settings = request.app.state.settings
    return str(request.base_url).rstrip("/") + settings.api_prefix.rstrip("/")


def get_health_state(request: Request) -> HealthState:
    """Return the process-wide HealthState stored on app state."""
    return request.app.state.health_state


def get_policies(request: Request) -> dict[str, FaultTolerancePolicy]:
    """Return the fault-tolerance policies stored on app state."""
    return request.app.state.policies


def get_service_broken() -> bool:
    """Read the breaking-service flag; evaluated on every request."""
    return is_service_broken()
