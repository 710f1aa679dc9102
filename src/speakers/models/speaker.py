from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from speakers.models.base import Base, UUIDPrimaryKeyMixin


class Speaker(Base, UUIDPrimaryKeyMixin):
    """A conference speaker.

    Hypermedia links are not stored; they are derived per response.
    """

    __tablename__ = "speakers"

    name: Mapped[str | None] = mapped_column(String(200), nullable=True, index=True)
    organization: Mapped[str | None] = mapped_column(String(200), nullable=True)
    biography: Mapped[str | None] = mapped_column(Text, nullable=True)
    picture: Mapped[str | None] = mapped_column(Text, nullable=True)
    twitter_handle: Mapped[str | None] = mapped_column(String(100), nullable=True)
