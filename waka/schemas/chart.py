"""Chart schemas shared by the external feed and the local spotlight."""

from pydantic import BaseModel


class ChartEntry(BaseModel):
    """A normalized external chart row."""
    title: str
    artist: str
    cover: str
