"""Tests for the Last.fm chart adapter and the chart endpoints."""

from unittest.mock import MagicMock

import httpx
import pytest

from waka.config import Settings
from waka.dependencies import get_chart_service
from waka.main import create_app
from waka.services.chart_service import ChartFetchError, ChartKind, ChartService


def lastfm_track(name, artist, image=None):
    images = [
        {"#text": "https://img/small.png", "size": "small"},
        {"#text": image or "", "size": "extralarge"},
    ]
    return {"name": name, "artist": {"name": artist}, "image": images}


TOP_TRACKS = {
    "tracks": {
        "track": [
            lastfm_track("Song A", "Artist A", "https://img/a.png"),
            lastfm_track("Song B", "Artist B"),
            {"artist": {}},
        ]
    }
}

TOP_ALBUMS = {
    "albums": {
        "album": [lastfm_track("Album A", "Artist A", "https://img/album.png")]
    }
}


def chart_service(settings, handler) -> ChartService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ChartService(client, settings)


def json_handler(payload, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)
    return handler


class TestChartService:
    """Test fetching and normalizing charts."""

    @pytest.mark.asyncio
    async def test_normalizes_entries(self, settings):
        service = chart_service(settings, json_handler(TOP_TRACKS))

        entries = await service.fetch(ChartKind.SONGS)

        assert [e.model_dump() for e in entries] == [
            {"title": "Song A", "artist": "Artist A", "cover": "https://img/a.png"},
            {"title": "Song B", "artist": "Artist B", "cover": settings.default_chart_cover},
            {"title": "Unknown", "artist": "Unknown", "cover": settings.default_chart_cover},
        ]

    @pytest.mark.asyncio
    async def test_request_parameters_per_kind(self, settings):
        seen = []
        service = chart_service(settings, json_handler({}, seen=seen))

        for kind in ChartKind:
            await service.fetch(kind)

        params = [dict(r.url.params) for r in seen]
        assert params[0]["method"] == "chart.gettoptracks"
        assert params[1]["method"] == "tag.gettopalbums"
        assert params[1]["tag"] == settings.chart_albums_tag
        assert params[2]["method"] == "geo.gettoptracks"
        assert params[2]["country"] == "Malawi"
        assert all(p["api_key"] == "test-key" and p["format"] == "json" for p in params)

    @pytest.mark.asyncio
    async def test_albums_chart(self, settings):
        service = chart_service(settings, json_handler(TOP_ALBUMS))

        entries = await service.fetch(ChartKind.ALBUMS)

        assert entries[0].title == "Album A"
        assert entries[0].cover == "https://img/album.png"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, [], {"tracks": None}, {"tracks": {"track": "nope"}}])
    async def test_malformed_payload_is_empty(self, settings, payload):
        service = chart_service(settings, json_handler(payload))

        assert await service.fetch(ChartKind.SONGS) == []

    @pytest.mark.asyncio
    async def test_single_entry_object(self, settings):
        payload = {"tracks": {"track": lastfm_track("Solo", "One")}}
        service = chart_service(settings, json_handler(payload))

        entries = await service.fetch(ChartKind.REGION)

        assert [e.title for e in entries] == ["Solo"]

    @pytest.mark.asyncio
    async def test_http_error_status(self, settings):
        service = chart_service(settings, json_handler({}, status_code=503))

        with pytest.raises(ChartFetchError) as exc_info:
            await service.fetch(ChartKind.SONGS)

        assert exc_info.value.kind is ChartKind.SONGS

    @pytest.mark.asyncio
    async def test_timeout_fails_without_retry(self, settings):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        service = chart_service(settings, handler)

        with pytest.raises(ChartFetchError):
            await service.fetch(ChartKind.SONGS)

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_json(self, settings):
        service = chart_service(settings, lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ChartFetchError):
            await service.fetch(ChartKind.ALBUMS)

    @pytest.mark.asyncio
    async def test_lastfm_error_object(self, settings):
        service = chart_service(settings, json_handler({"error": 10, "message": "Invalid API key"}))

        with pytest.raises(ChartFetchError) as exc_info:
            await service.fetch(ChartKind.SONGS)

        assert exc_info.value.reason == "Invalid API key"

    @pytest.mark.asyncio
    async def test_missing_api_key(self, settings):
        settings.lastfm_api_key = None
        service = chart_service(settings, json_handler(TOP_TRACKS))

        with pytest.raises(ChartFetchError):
            await service.fetch(ChartKind.SONGS)


class TestChartEndpoints:
    """Test the proxied chart endpoints."""

    @pytest.mark.asyncio
    async def test_top_songs(self, app, client, settings):
        service = chart_service(settings, json_handler(TOP_TRACKS))
        app.dependency_overrides[get_chart_service] = lambda: service

        response = await client.get("/api/top-songs")

        assert response.status_code == 200
        assert response.json()[0] == {
            "title": "Song A",
            "artist": "Artist A",
            "cover": "https://img/a.png",
        }

    @pytest.mark.asyncio
    async def test_failure_is_isolated_per_chart(self, app, client, settings):
        def handler(request):
            if request.url.params["method"] == "chart.gettoptracks":
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json=TOP_ALBUMS)

        service = chart_service(settings, handler)
        app.dependency_overrides[get_chart_service] = lambda: service

        songs = await client.get("/api/top-songs")
        albums = await client.get("/api/top-albums")
        spotlight = await client.get("/api/top-monday")

        assert songs.status_code == 502
        assert songs.json() == {"error": "Failed to fetch songs chart"}
        assert albums.status_code == 200
        assert albums.json()[0]["title"] == "Album A"
        assert spotlight.status_code == 200

    @pytest.mark.asyncio
    async def test_regional_chart_empty_payload(self, app, client, settings):
        service = chart_service(settings, json_handler({"tracks": {}}))
        app.dependency_overrides[get_chart_service] = lambda: service

        response = await client.get("/api/top-malawi")

        assert response.status_code == 200
        assert response.json() == []


class TestChartClient:
    """Test the per-app outbound HTTP client."""

    @pytest.mark.asyncio
    async def test_each_app_uses_its_own_timeout(self, tmp_path):
        apps = [
            create_app(Settings(
                _env_file=None,
                database_url=f"sqlite+aiosqlite:///{tmp_path / f'{name}.db'}",
                chart_timeout_seconds=timeout,
            ))
            for name, timeout in [("fast", 2.0), ("slow", 20.0)]
        ]
        try:
            fast, slow = (a.state.http_client for a in apps)

            assert fast is not slow
            assert fast.timeout.read == 2.0
            assert fast.timeout.connect == 2.0
            assert slow.timeout.read == 20.0
            assert slow.timeout.connect == 5.0
        finally:
            for a in apps:
                await a.state.http_client.aclose()
                await a.state.engine.dispose()

    @pytest.mark.asyncio
    async def test_chart_service_uses_app_client(self, app):
        service = get_chart_service(MagicMock(app=app), app.state.settings)

        assert service.client is app.state.http_client
