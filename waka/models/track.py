from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from waka.database import Base

if TYPE_CHECKING:
    from waka.models.user import User


class Track(Base):
    """An uploaded track with its stored audio and optional cover art."""

    __tablename__ = "tracks"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Metadata supplied by the uploader
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    artist: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    album: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    release_date: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    language: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    genre: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    explicit: Mapped[bool] = mapped_column(Boolean, default=False)
    bpm: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Blob store keys
    file: Mapped[str] = mapped_column(String(500))  # audio, always present
    cover: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Engagement
    plays: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    top_monday: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="0", index=True
    )

    uploaded_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    # Relationships
    owner: Mapped[Optional["User"]] = relationship(back_populates="tracks")

    def __repr__(self) -> str:
        return f"<Track {self.title} by {self.artist}>"
