"""Read-side views over the track catalog, plus play recording."""

import logging
from typing import Optional

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from waka.database import fits_integer_column
from waka.models.track import Track
from waka.models.user import User
from waka.schemas.track import ArtistResponse

logger = logging.getLogger(__name__)


class CatalogService:
    """Queries over the `tracks` table. Each query sees the current committed state."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_tracks(self) -> list[Track]:
        """All tracks, newest first (ids are assigned monotonically)."""
        result = await self.db.execute(select(Track).order_by(Track.id.desc()))
        return list(result.scalars().all())

    async def artist_roster(self, default_cover: str) -> list[ArtistResponse]:
        """
        Group tracks by exact artist name.

        The cover of each group is MAX(cover) over its tracks: an arbitrary
        but deterministic pick, not a "best" cover. Groups with no cover at
        all get `default_cover`. Sorted by track count, descending; ties
        keep the alphabetical order of the grouped query.
        """
        result = await self.db.execute(
            select(
                Track.artist,
                func.count(Track.id).label("track_count"),
                func.max(Track.cover).label("cover"),
            )
            .group_by(Track.artist)
            .order_by(Track.artist)
        )

        artists = [
            ArtistResponse(
                name=row.artist,
                track_count=row.track_count,
                cover=row.cover or default_cover,
            )
            for row in result.all()
        ]
        # sorted() is stable, so equal counts keep their query order
        return sorted(artists, key=lambda a: a.track_count, reverse=True)

    async def user_portfolio(self, user_id: int) -> tuple[Optional[User], list[Track]]:
        """
        A user and their tracks, newest first.

        Returns `(None, [])` for an unknown id rather than raising.
        """
        # An id no INTEGER column can hold cannot name a user
        if not fits_integer_column(user_id):
            return None, []

        user = await self.db.get(User, user_id)
        if user is None:
            return None, []

        result = await self.db.execute(
            select(Track)
            .where(Track.uploaded_by == user_id)
            .order_by(Track.id.desc())
        )
        return user, list(result.scalars().all())

    async def spotlight_chart(self, limit: int = 20) -> list[Track]:
        """Spotlight-flagged tracks, most played first, at most `limit`."""
        result = await self.db.execute(
            select(Track)
            .where(Track.top_monday.is_(True))
            .order_by(Track.plays.desc(), Track.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def record_play(self, track_id: int) -> Optional[int]:
        """
        Increment a track's play count in one UPDATE.

        Returns the new count, or None if the track does not exist.
        """
        if not fits_integer_column(track_id):
            return None

        result = await self.db.execute(
            update(Track)
            .where(Track.id == track_id)
            .values(plays=Track.plays + 1)
            .returning(Track.plays)
        )
        plays = result.scalar_one_or_none()
        if plays is not None:
            await self.db.commit()
            logger.info(f"[CatalogService] Track {track_id} now has {plays} plays")
        return plays
