"""Speaker persistence service.

Provides list, get, insert, full-replace update, idempotent delete, and
template search over speakers.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from speakers.models.base import new_id
from speakers.models.speaker import Speaker
from speakers.schemas.speaker import SpeakerIn

logger = logging.getLogger(__name__)

# Template fields matched by case-insensitive substring in ``find``.
SEARCHABLE_FIELDS = ("name", "organization", "biography", "twitter_handle")

DESCRIPTIVE_FIELDS = ("name", "organization", "biography", "picture", "twitter_handle")


class SpeakerNotFoundError(ValueError):
    """Raised when an update targets a speaker id that does not exist."""


class DuplicateSpeakerError(ValueError):
    """Raised when an insert carries an id that is already taken."""


class SpeakerService:
    """Service for speaker CRUD and search.

    Args:
        db: Async SQLAlchemy session for database operations.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_speakers(self) -> list[Speaker]:
        """Return every speaker ordered by name, then id."""
        result = await self.db.execute(
            select(Speaker).order_by(Speaker.name.asc(), Speaker.id.asc())
        )
        return list(result.scalars().all())

    async def get_speaker(self, speaker_id: str) -> Speaker | None:
        """Get a speaker by id.

        Returns:
            The Speaker record, or None if not found.
        """
        return await self.db.get(Speaker, speaker_id)

    async def insert(self, data: SpeakerIn) -> Speaker:
        """Persist a new speaker, assigning an id when none is supplied.

        Args:
            data: Speaker attributes; ``data.id`` is kept if present.

        Returns:
            The persisted Speaker record.

        Raises:
            DuplicateSpeakerError: If ``data.id`` already exists.
        """
        if data.id and await self.get_speaker(data.id) is not None:
            raise DuplicateSpeakerError(f"Speaker with id '{data.id}' already exists")

        speaker = Speaker(
            id=data.id or new_id(),
            **{field: getattr(data, field) for field in DESCRIPTIVE_FIELDS},
        )
        self.db.add(speaker)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateSpeakerError(
                f"Speaker with id '{speaker.id}' already exists"
            ) from exc
        await self.db.refresh(speaker)
        logger.info("Added speaker %s", speaker.id)
        return speaker

    async def update(self, data: SpeakerIn) -> Speaker:
        """Replace every descriptive field of an existing speaker.

        Fields absent from ``data`` are cleared.

        Raises:
            ValueError: If ``data.id`` is missing.
            SpeakerNotFoundError: If no speaker has ``data.id``.
        """
        if not data.id:
            raise ValueError("Speaker id is required for update")

        speaker = await self.get_speaker(data.id)
        if speaker is None:
            raise SpeakerNotFoundError(f"Speaker not found: {data.id}")

        for field in DESCRIPTIVE_FIELDS:
            setattr(speaker, field, getattr(data, field))

        await self.db.commit()
        await self.db.refresh(speaker)
        return speaker

    async def delete(self, speaker_id: str) -> bool:
        """Delete a speaker by id.

        Returns:
            True if a speaker was removed, False if the id was unknown.
        """
        speaker = await self.get_speaker(speaker_id)
        if speaker is None:
            logger.debug("Remove of unknown speaker %s ignored", speaker_id)
            return False

        await self.db.delete(speaker)
        await self.db.commit()
        logger.info("Removed speaker %s", speaker_id)
        return True

    async def find(self, template: SpeakerIn) -> list[Speaker]:
        """Find speakers matching any non-empty field of ``template``.

        ``id`` matches exactly; text fields match by case-insensitive
        substring. A template without criteria matches nothing.

        Returns:
            Matching speakers, each at most once.
        """
        criteria = []
        if template.id:
            criteria.append(Speaker.id == template.id)
        for field in SEARCHABLE_FIELDS:
            value = getattr(template, field)
            if value:
                column = getattr(Speaker, field)
                criteria.append(
                    func.lower(column).contains(value.lower(), autoescape=True)
                )

        if not criteria:
            return []

        result = await self.db.execute(
            select(Speaker)
            .where(or_(*criteria))
            .order_by(Speaker.name.asc(), Speaker.id.asc())
        )
        # A single SELECT yields each primary key once.
        return list(result.scalars().unique().all())
