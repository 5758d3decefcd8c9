"""Artist roster derived from uploaded tracks."""

from fastapi import APIRouter

from waka.dependencies import AppSettings, DbSession
from waka.schemas.track import ArtistResponse
from waka.services.catalog_service import CatalogService

router = APIRouter()


@router.get(
    "/artists",
    response_model=list[ArtistResponse],
    summary="List artists with track counts",
)
async def list_artists(db: DbSession, settings: AppSettings):
    """
    Artists grouped by exact name, most tracks first.

    Each entry carries the track count and one representative cover.
    """
    return await CatalogService(db).artist_roster(settings.default_cover)
