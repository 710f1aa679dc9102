"""Pydantic v2 schemas for the speaker endpoint.

``SpeakerIn`` is the request body for add, update and search (where it acts
as a query template). ``SpeakerOut`` is returned by every speaker endpoint
and carries the derived hypermedia ``links``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SpeakerFields(BaseModel):
    """Descriptive speaker attributes shared by requests and responses."""

    name: str | None = Field(default=None, max_length=200)
    organization: str | None = Field(default=None, max_length=200)
    biography: str | None = None
    picture: str | None = None
    twitter_handle: str | None = Field(default=None, max_length=100)


class SpeakerIn(SpeakerFields):
    """Request body for a speaker.

    Unknown keys, including any client-sent ``links``, are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None


class SpeakerOut(SpeakerFields):
    """Speaker response with relation-name to absolute URI links.

    An instance with ``id=None`` is the empty sentinel returned when a
    lookup finds nothing.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    links: dict[str, str] = Field(default_factory=dict)
