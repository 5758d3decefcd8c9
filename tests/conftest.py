"""Shared fixtures: an isolated app, database and blob store per test."""

import httpx
import pytest

from waka.config import Settings
from waka.main import create_app, prepare_storage
from waka.models.track import Track
from waka.models.user import User


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every store at the test's temp directory."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        covers_dir=str(tmp_path / "covers"),
        assets_dir=str(tmp_path / "image"),
        lastfm_api_key="test-key",
    )


@pytest.fixture
async def app(settings):
    app = create_app(settings)
    await prepare_storage(app)
    yield app
    app.dependency_overrides.clear()
    await app.state.http_client.aclose()
    await app.state.engine.dispose()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def blob_store(app):
    return app.state.blob_store


@pytest.fixture
async def db_session(app):
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def make_user(app):
    """Insert a user and return its id."""
    async def _make(username: str = "ann", bio: str | None = None) -> int:
        async with app.state.session_factory() as session:
            user = User(username=username, email=f"{username}@example.com", bio=bio)
            session.add(user)
            await session.commit()
            return user.id
    return _make


@pytest.fixture
def make_track(app):
    """Insert a track row directly, bypassing the upload pipeline."""
    async def _make(**fields) -> int:
        fields.setdefault("file", "0-song.mp3")
        async with app.state.session_factory() as session:
            track = Track(**fields)
            session.add(track)
            await session.commit()
            return track.id
    return _make


@pytest.fixture
def upload(client):
    """POST /api/upload with an audio part (unless audio=None) and form fields."""
    async def _upload(
        audio=("song.mp3", b"ID3 fake audio", "audio/mpeg"),
        cover=None,
        **fields,
    ) -> httpx.Response:
        files = {}
        if audio is not None:
            files["audio"] = audio
        if cover is not None:
            files["cover"] = cover
        data = {key: str(value) for key, value in fields.items()}
        return await client.post("/api/upload", data=data, files=files or None)
    return _upload
