"""Ingestion pipeline: validate an upload, store its blobs, insert the track row."""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from waka.config import Settings
from waka.core.exceptions import BadRequestException, StorageException
from waka.database import fits_integer_column
from waka.models.track import Track
from waka.models.user import User
from waka.schemas.track import TrackMetadata
from waka.services.blob_store import AssetHandle, AssetKind, BlobStore

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    """An uploaded file part, fully read into memory."""
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes

    @classmethod
    async def from_upload(cls, upload: Optional[UploadFile]) -> Optional["IncomingFile"]:
        if upload is None:
            return None
        contents = await upload.read()
        return cls(filename=upload.filename, content_type=upload.content_type, data=contents)


class IngestionService:
    """
    Accepts one audio file, an optional cover and a metadata record.

    Stages run strictly in order: validate, write audio, write cover,
    insert row. A failure at any stage stops the pipeline. Blobs already
    written by the request are deleted before the error is reported, so
    a failed upload leaves no orphaned assets behind (best effort: a
    failed delete is logged, not raised).
    """

    def __init__(self, db: AsyncSession, blob_store: BlobStore, settings: Settings):
        self.db = db
        self.blob_store = blob_store
        self.settings = settings

    def validate_files(self, audio: Optional[IncomingFile], cover: Optional[IncomingFile]) -> None:
        """Reject uploads without audio and files that break the size/type rules."""
        if audio is None or not audio.data:
            raise BadRequestException("Audio file is required")

        if len(audio.data) > self.settings.max_audio_size_bytes:
            raise BadRequestException(
                f"Audio file too large. Maximum size: {self.settings.max_audio_size_mb}MB"
            )

        if cover is None:
            return

        if cover.content_type not in self.settings.allowed_image_types:
            raise BadRequestException(
                f"Invalid cover type. Allowed: {', '.join(self.settings.allowed_image_types)}"
            )
        if len(cover.data) > self.settings.max_cover_size_bytes:
            raise BadRequestException(
                f"Cover image too large. Maximum size: {self.settings.max_cover_size_mb}MB"
            )

    async def validate_owner(self, user_id: Optional[int]) -> None:
        if user_id is None:
            return
        if not fits_integer_column(user_id) or await self.db.get(User, user_id) is None:
            raise BadRequestException(f"Unknown uploader: user {user_id} does not exist")

    async def ingest(
        self,
        audio: Optional[IncomingFile],
        cover: Optional[IncomingFile],
        metadata: TrackMetadata,
    ) -> Track:
        """
        Run the full pipeline and return the committed Track.

        Raises:
            BadRequestException: missing audio, bad file, or unknown uploader.
                Nothing has been written when this is raised.
            StorageException: a blob write or the row insert failed.
        """
        self.validate_files(audio, cover)
        await self.validate_owner(metadata.uploaded_by)

        written: list[AssetHandle] = []

        try:
            audio_handle = await self.blob_store.save(AssetKind.AUDIO, audio.filename, audio.data)
            written.append(audio_handle)

            cover_handle = None
            if cover is not None:
                cover_handle = await self.blob_store.save(AssetKind.COVER, cover.filename, cover.data)
                written.append(cover_handle)
        except OSError as e:
            logger.error(f"[IngestionService] Blob write failed: {type(e).__name__}: {e}")
            await self._discard(written)
            raise StorageException("Upload failed") from e

        track = Track(
            **metadata.model_dump(),
            file=audio_handle.key,
            cover=cover_handle.key if cover_handle else None,
        )

        try:
            self.db.add(track)
            await self.db.commit()
        except Exception as e:
            # Driver errors (OverflowError and friends) are not SQLAlchemyErrors
            logger.error(f"[IngestionService] Track insert failed: {type(e).__name__}: {e}")
            await self.db.rollback()
            await self._discard(written)
            raise StorageException("DB insert failed") from e

        logger.info(
            f"[IngestionService] Track {track.id} stored "
            f"(audio={audio_handle.key}, cover={cover_handle.key if cover_handle else None})"
        )
        return track

    async def _discard(self, handles: list[AssetHandle]) -> None:
        """Compensating cleanup for blobs of a failed request."""
        for handle in reversed(handles):
            try:
                await self.blob_store.delete(handle)
            except OSError as e:
                logger.warning(
                    f"[IngestionService] Could not remove orphaned {handle.kind.value} "
                    f"asset {handle.key}: {e}"
                )
