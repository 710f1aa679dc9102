"""Bootstrap speakers from a JSON file on startup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from speakers.models.speaker import Speaker
from speakers.schemas.speaker import SpeakerIn
from speakers.services.speaker_service import SpeakerService

logger = logging.getLogger(__name__)

_SPEAKER_LIST = TypeAdapter(list[SpeakerIn])


def load_seed_file(path: str | Path) -> list[SpeakerIn]:
    """Parse a JSON array of speaker objects.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the content is not a list of speakers.
    """
    raw = Path(path).read_text(encoding="utf-8")
    return _SPEAKER_LIST.validate_python(json.loads(raw))


async def seed_speakers(
    session_factory: async_sessionmaker[AsyncSession],
    path: str | Path,
) -> int:
    """Insert the speakers from ``path`` if the speakers table is empty.

    Returns:
        Number of speakers inserted (0 when the table already had rows).
    """
    async with session_factory() as session:
        count = await session.scalar(select(func.count()).select_from(Speaker))
        if count:
            logger.info("Skipping speaker seed: %d speakers already present", count)
            return 0

        speakers = load_seed_file(path)
        service = SpeakerService(session)
        for speaker in speakers:
            await service.insert(speaker)

    logger.info("Seeded %d speakers from %s", len(speakers), path)
    return len(speakers)
