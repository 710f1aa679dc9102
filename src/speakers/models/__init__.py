from speakers.models.base import Base, UUIDPrimaryKeyMixin
from speakers.models.speaker import Speaker

__all__ = [
    "Base",
    "UUIDPrimaryKeyMixin",
    "Speaker",
]
