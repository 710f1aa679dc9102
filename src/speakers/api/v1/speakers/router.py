"""Speaker endpoints: CRUD, search, readiness probe and fault injection.

Every returned speaker is decorated with hypermedia links. Calls guarded by
a fault-tolerance policy go through ``FaultTolerancePolicy.execute``; the
``failingServiceWithoutAnnotation`` endpoint deliberately has no guard.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import PlainTextResponse

from speakers.api.deps import (
    get_base_uri,
    get_health_state,
    get_policies,
    get_service_broken,
    get_speaker_service,
)
from speakers.errors import ServiceFailureError
from speakers.hypermedia import add_hypermedia
from speakers.models.speaker import Speaker
from speakers.resilience import FaultTolerancePolicy
from speakers.schemas.speaker import SpeakerIn, SpeakerOut
from speakers.services.fault_tolerance import (
    FAILING_SERVICE_POLICY,
    LIST_POLICY,
    SEARCH_POLICY,
)
from speakers.services.health_state import HealthState
from speakers.services.speaker_service import (
    DuplicateSpeakerError,
    SpeakerNotFoundError,
    SpeakerService,
)

router = APIRouter()


def _speaker_out(speaker: Speaker, base_uri: str) -> SpeakerOut:
    """Build a decorated response model from a Speaker record."""
    return add_hypermedia(SpeakerOut.model_validate(speaker), base_uri)


@router.get("/")
async def list_speakers(
    service: SpeakerService = Depends(get_speaker_service),
    policies: dict[str, FaultTolerancePolicy] = Depends(get_policies),
    base_uri: str = Depends(get_base_uri),
) -> list[SpeakerOut]:
    """Return every speaker. At most a few calls run concurrently."""
    speakers = await policies[LIST_POLICY].execute(service.list_speakers)
    return [_speaker_out(s, base_uri) for s in speakers]


@router.get("/nessProbe", response_class=PlainTextResponse)
async def readiness_probe() -> str:
    """Readiness probe; never touches the database."""
    now = datetime.now().astimezone()
    return f"speaker ready at {now.strftime('%a %b %d %H:%M:%S %Z %Y')}"


@router.post("/add")
async def add_speaker(
    body: SpeakerIn,
    service: SpeakerService = Depends(get_speaker_service),
    base_uri: str = Depends(get_base_uri),
) -> SpeakerOut:
    """Persist a new speaker; an id is assigned when none is given."""
    try:
        speaker = await service.insert(body)
    except DuplicateSpeakerError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _speaker_out(speaker, base_uri)


@router.delete("/remove/{speaker_id}", status_code=204)
async def remove_speaker(
    speaker_id: str,
    service: SpeakerService = Depends(get_speaker_service),
) -> None:
    """Delete a speaker. Removing an unknown id is a no-op."""
    await service.delete(speaker_id)


@router.put("/update")
async def update_speaker(
    body: SpeakerIn,
    service: SpeakerService = Depends(get_speaker_service),
    base_uri: str = Depends(get_base_uri),
) -> SpeakerOut:
    """Replace all fields of the speaker identified by ``body.id``."""
    try:
        speaker = await service.update(body)
    except SpeakerNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _speaker_out(speaker, base_uri)


@router.get("/retrieve/{speaker_id}")
async def retrieve_speaker(
    speaker_id: str,
    service: SpeakerService = Depends(get_speaker_service),
    base_uri: str = Depends(get_base_uri),
) -> SpeakerOut:
    """Get a speaker by id.

    An unknown id yields an empty speaker (``id`` null) rather than a 404,
    so callers must check ``id`` on the result.
    """
    speaker = await service.get_speaker(speaker_id)
    if speaker is None:
        return add_hypermedia(SpeakerOut(), base_uri)
    return _speaker_out(speaker, base_uri)


@router.get("/failingService")
async def retrieve_failing_service(
    policies: dict[str, FaultTolerancePolicy] = Depends(get_policies),
) -> SpeakerOut:
    """Always fails; the fallback answers with an empty speaker."""

    async def fail() -> SpeakerOut:
        raise ServiceFailureError("Retrieve service failed!")

    return await policies[FAILING_SERVICE_POLICY].execute(fail)


@router.get("/failingServiceWithoutAnnotation")
async def retrieve_failing_service_without_fallback() -> SpeakerOut:
    """Always fails, with nothing to catch it."""
    raise ServiceFailureError("Service Failed!")


@router.put("/search")
async def search_speakers(
    body: SpeakerIn,
    service: SpeakerService = Depends(get_speaker_service),
    policies: dict[str, FaultTolerancePolicy] = Depends(get_policies),
    broken: bool = Depends(get_service_broken),
    base_uri: str = Depends(get_base_uri),
) -> list[SpeakerOut]:
    """Find speakers matching the template.

    Fails while the breaking-service flag is set; the circuit breaker and
    fallback then turn failures into an empty result.
    """

    async def search(template: SpeakerIn) -> list[SpeakerOut]:
        if broken:
            raise ServiceFailureError("Breaking Service failed!")
        matches = await service.find(template)
        return [_speaker_out(s, base_uri) for s in matches]

    return await policies[SEARCH_POLICY].execute(search, body)


@router.post("/updateHealthStatus")
async def update_health_status(
    is_app_down: bool = Query(..., alias="isAppDown"),
    health_state: HealthState = Depends(get_health_state),
) -> Response:
    """Mark the application down or up for the health endpoint."""
    health_state.set_down(is_app_down)
    return Response(status_code=200)
