"""Track schemas for uploads and catalog responses."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from waka.database import MAX_SQL_INTEGER

FLAG_FIELDS = ("explicit", "top_monday")
MAX_BPM = 1000


class TrackMetadata(BaseModel):
    """
    Every form field accepted by the upload endpoint.

    Text fields are stored as given. Typed fields (`explicit`, `bpm`,
    `top_monday`, `uploaded_by`) must parse and stay in range; an empty
    form value counts as "not supplied".
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    release_date: Optional[str] = None
    language: Optional[str] = None
    country: Optional[str] = None
    genre: Optional[str] = None
    explicit: bool = False
    bpm: Optional[int] = Field(None, ge=0, le=MAX_BPM)
    top_monday: bool = False
    uploaded_by: Optional[int] = Field(None, ge=1, le=MAX_SQL_INTEGER)

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return False if info.field_name in FLAG_FIELDS else None
        return value


class TrackResponse(BaseModel):
    """Schema for a track in catalog listings."""
    id: int
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    release_date: Optional[str] = None
    language: Optional[str] = None
    country: Optional[str] = None
    genre: Optional[str] = None
    explicit: bool = False
    bpm: Optional[int] = None
    file: str
    cover: Optional[str] = None
    plays: int = 0
    top_monday: bool = False
    uploaded_by: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UploadResponse(BaseModel):
    """Confirmation returned after a successful upload."""
    message: str
    track_id: int
    file: str
    cover: Optional[str] = None


class PlayResponse(BaseModel):
    """Play count after recording a play."""
    id: int
    plays: int


class ArtistResponse(BaseModel):
    """One row of the artist roster, derived by grouping tracks."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    track_count: int = Field(serialization_alias="trackCount")
    cover: str
