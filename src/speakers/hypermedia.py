"""Hypermedia links for speaker responses.

Links are derived from the base URI of the speaker endpoint and the
speaker's id only, so they are rebuilt on every response and never stored.
"""

from __future__ import annotations

from speakers.schemas.speaker import SpeakerOut


def build_links(base_uri: str, speaker_id: str | None) -> dict[str, str]:
    """Return the relation-name to URI mapping for a speaker.

    A persisted speaker (non-null id) gets ``self``, ``remove`` and
    ``update``; every speaker gets the collection-level ``add`` and
    ``search`` relations.

    Args:
        base_uri: Absolute URI the speaker router is mounted at, without
            a trailing slash.
        speaker_id: Id of the speaker, or None for a transient speaker.
    """
    base = base_uri.rstrip("/")
    links: dict[str, str] = {}
    if speaker_id is not None:
        links["self"] = f"{base}/retrieve/{speaker_id}"
        links["remove"] = f"{base}/remove/{speaker_id}"
        links["update"] = f"{base}/update"
    links["add"] = f"{base}/add"
    links["search"] = f"{base}/search"
    return links


def add_hypermedia(speaker: SpeakerOut | None, base_uri: str) -> SpeakerOut | None:
    """Attach links to ``speaker`` in place and return the same object.

    ``None`` is passed through unchanged.
    """
    if speaker is None:
        return None
    speaker.links.update(build_links(base_uri, speaker.id))
    return speaker
