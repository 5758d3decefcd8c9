"""Chart endpoints: the local spotlight and the external Last.fm feeds."""

from fastapi import APIRouter

from waka.core.exceptions import UpstreamException
from waka.dependencies import AppSettings, Charts, DbSession
from waka.schemas.chart import ChartEntry
from waka.schemas.track import TrackResponse
from waka.services.catalog_service import CatalogService
from waka.services.chart_service import ChartFetchError, ChartKind, ChartService

router = APIRouter()


async def fetch_chart(charts: ChartService, kind: ChartKind) -> list[ChartEntry]:
    """Fetch one external chart; a failure only affects this endpoint."""
    try:
        return await charts.fetch(kind)
    except ChartFetchError as e:
        raise UpstreamException(f"Failed to fetch {e.kind.value} chart")


@router.get(
    "/top-monday",
    response_model=list[TrackResponse],
    summary="Get the weekly spotlight chart",
)
async def get_top_monday(db: DbSession, settings: AppSettings):
    """
    Spotlight-flagged tracks ranked by play count.

    Built from local data only, capped at the spotlight limit.
    """
    return await CatalogService(db).spotlight_chart(settings.spotlight_limit)


@router.get(
    "/top-songs",
    response_model=list[ChartEntry],
    summary="Get global top songs",
)
async def get_top_songs(charts: Charts):
    return await fetch_chart(charts, ChartKind.SONGS)


@router.get(
    "/top-albums",
    response_model=list[ChartEntry],
    summary="Get top albums",
)
async def get_top_albums(charts: Charts):
    return await fetch_chart(charts, ChartKind.ALBUMS)


@router.get(
    "/top-malawi",
    response_model=list[ChartEntry],
    summary="Get regional top songs",
)
async def get_top_regional(charts: Charts):
    """Top tracks for the configured region (Malawi by default)."""
    return await fetch_chart(charts, ChartKind.REGION)
