"""Service for fetching external music charts from Last.fm."""

import enum
import logging
from typing import Any

import httpx

from waka.config import Settings
from waka.schemas.chart import ChartEntry

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
COVER_SIZE = "extralarge"


class ChartKind(str, enum.Enum):
    SONGS = "songs"
    ALBUMS = "albums"
    REGION = "region"


class ChartFetchError(Exception):
    """Fetching or decoding one chart failed."""

    def __init__(self, kind: ChartKind, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Failed to fetch {kind.value} chart: {reason}")


class ChartService:
    """
    Fetches Last.fm charts and normalizes them to `ChartEntry` rows.

    Nothing is cached and nothing is retried: every call goes to Last.fm,
    and a failure is raised to the caller straight away.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    def _request_params(self, kind: ChartKind) -> tuple[dict[str, Any], str, str]:
        """Query params plus the (container, item) keys holding the entries."""
        params: dict[str, Any] = {
            "api_key": self.settings.lastfm_api_key,
            "format": "json",
            "limit": self.settings.chart_limit,
        }
        if kind is ChartKind.SONGS:
            params["method"] = "chart.gettoptracks"
            return params, "tracks", "track"
        if kind is ChartKind.ALBUMS:
            params["method"] = "tag.gettopalbums"
            params["tag"] = self.settings.chart_albums_tag
            return params, "albums", "album"
        params["method"] = "geo.gettoptracks"
        params["country"] = self.settings.chart_region
        return params, "tracks", "track"

    async def fetch(self, kind: ChartKind) -> list[ChartEntry]:
        """
        Fetch one chart.

        Args:
            kind: Which chart to fetch

        Returns:
            Normalized entries; empty if the payload has no recognizable list

        Raises:
            ChartFetchError: no API key, transport error, non-2xx status,
                invalid JSON, or a Last.fm error object
        """
        if not self.settings.lastfm_api_key:
            raise ChartFetchError(kind, "Last.fm API key not configured")

        params, container, item = self._request_params(kind)
        logger.info(f"[ChartService] Fetching {kind.value} chart ({params['method']})")

        try:
            response = await self.client.get(self.settings.lastfm_api_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"[ChartService] {kind.value} chart request failed: {type(e).__name__}: {e}")
            raise ChartFetchError(kind, type(e).__name__) from e
        except ValueError as e:
            logger.error(f"[ChartService] {kind.value} chart returned invalid JSON: {e}")
            raise ChartFetchError(kind, "invalid JSON") from e

        if isinstance(data, dict) and "error" in data:
            logger.error(f"[ChartService] Last.fm error {data.get('error')}: {data.get('message')}")
            raise ChartFetchError(kind, str(data.get("message") or data.get("error")))

        return self.normalize(data, container, item)

    def normalize(self, data: Any, container: str, item: str) -> list[ChartEntry]:
        """Turn a Last.fm chart payload into entries, tolerating missing pieces."""
        if not isinstance(data, dict):
            return []
        block = data.get(container)
        if not isinstance(block, dict):
            return []
        rows = block.get(item)
        if isinstance(rows, dict):
            # Last.fm collapses single-element lists to an object
            rows = [rows]
        if not isinstance(rows, list):
            return []

        return [self._entry(row) for row in rows if isinstance(row, dict)]

    def _entry(self, row: dict) -> ChartEntry:
        title = row.get("name")
        artist = row.get("artist")
        if isinstance(artist, dict):
            artist = artist.get("name")

        return ChartEntry(
            title=title if isinstance(title, str) and title else UNKNOWN,
            artist=artist if isinstance(artist, str) and artist else UNKNOWN,
            cover=self._cover(row.get("image")),
        )

    def _cover(self, images: Any) -> str:
        if isinstance(images, list):
            for image in images:
                if isinstance(image, dict) and image.get("size") == COVER_SIZE and image.get("#text"):
                    return image["#text"]
        return self.settings.default_chart_cover
