"""Process-wide application health flag."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class HealthState:
    """Holds the "application is down" flag read by the health endpoint.

    Writes are plain attribute assignment; concurrent writers race with
    last-write-wins semantics.
    """

    def __init__(self, is_app_down: bool = False) -> None:
        self._is_app_down = is_app_down

    @property
    def is_app_down(self) -> bool:
        return self._is_app_down

    def set_down(self, is_app_down: bool) -> None:
        """Mark the application down (True) or up (False)."""
        if is_app_down != self._is_app_down:
            logger.info("Application health set to %s", "DOWN" if is_app_down else "UP")
        self._is_app_down = is_app_down
