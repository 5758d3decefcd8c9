from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from waka.database import Base

if TYPE_CHECKING:
    from waka.models.track import Track


class User(Base):
    """
    User account.

    Registration and login live outside the catalog; the catalog only
    reads profiles and uses `id` as the owner of uploaded tracks.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Profile
    bio: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    # Relationships
    tracks: Mapped[list["Track"]] = relationship(back_populates="owner")

    def __repr__(self) -> str:
        return f"<User {self.username}>"
