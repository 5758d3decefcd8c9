from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from pydantic import ValidationError

from waka.core.exceptions import BadRequestException, NotFoundException
from waka.dependencies import AppSettings, Blobs, DbSession
from waka.schemas.track import PlayResponse, TrackMetadata, TrackResponse, UploadResponse
from waka.services.catalog_service import CatalogService
from waka.services.ingestion_service import IncomingFile, IngestionService

router = APIRouter()


def describe_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload a track",
)
async def upload_track(
    db: DbSession,
    blobs: Blobs,
    settings: AppSettings,
    audio: Optional[UploadFile] = File(None),
    cover: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    album: Optional[str] = Form(None),
    release_date: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    country: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    explicit: Optional[str] = Form(None),
    bpm: Optional[str] = Form(None),
    top_monday: Optional[str] = Form(None),
    uploaded_by: Optional[str] = Form(None),
):
    """
    Upload an audio file with optional cover art and metadata.

    - `audio` is required (one file); `cover` is optional (one image)
    - Text fields are stored as given
    - `bpm` and `uploaded_by` must be integers, `explicit` and
      `top_monday` booleans; `uploaded_by` must name an existing user
    - Audio is written first, then the cover, then the track row
    """
    try:
        metadata = TrackMetadata(
            title=title,
            artist=artist,
            album=album,
            release_date=release_date,
            language=language,
            country=country,
            genre=genre,
            explicit=explicit,
            bpm=bpm,
            top_monday=top_monday,
            uploaded_by=uploaded_by,
        )
    except ValidationError as e:
        raise BadRequestException(f"Invalid metadata: {describe_errors(e)}")

    service = IngestionService(db, blobs, settings)
    track = await service.ingest(
        await IncomingFile.from_upload(audio),
        await IncomingFile.from_upload(cover),
        metadata,
    )

    return UploadResponse(
        message="Track uploaded successfully!",
        track_id=track.id,
        file=track.file,
        cover=track.cover,
    )


@router.get(
    "/tracks",
    response_model=list[TrackResponse],
    summary="List all tracks",
)
async def list_tracks(db: DbSession):
    """Every track in the catalog, newest first."""
    return await CatalogService(db).list_tracks()


@router.post(
    "/tracks/{track_id}/play",
    response_model=PlayResponse,
    summary="Record a play",
)
async def record_play(track_id: int, db: DbSession):
    """Increment the play count of a track by one."""
    plays = await CatalogService(db).record_play(track_id)
    if plays is None:
        raise NotFoundException("Track not found")
    return PlayResponse(id=track_id, plays=plays)
