from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from waka.config import Settings, get_settings
from waka.core.exceptions import register_exception_handlers
from waka.database import build_engine, build_session_factory, init_models
from waka.routers import artists, charts, tracks, users
from waka.services.blob_store import BlobStore
from waka.services.http_client import build_http_client


async def prepare_storage(app: FastAPI) -> None:
    """Create the blob directories and catalog tables if they are missing."""
    app.state.blob_store.ensure_directories()
    await init_models(app.state.engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    """
    settings: Settings = app.state.settings
    # Startup
    print(f"🚀 Starting {settings.app_name}...")
    await prepare_storage(app)
    yield
    # Shutdown
    print(f"👋 Shutting down {settings.app_name}...")
    await app.state.http_client.aclose()
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API with its own engine, session factory, blob store and
    outbound HTTP client.

    Everything stateful hangs off `app.state`, so separate apps (one per
    test, say) never share a database or upload directory.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="API for Waka - upload tracks and browse the catalog",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.blob_store = BlobStore(settings.upload_dir, settings.covers_dir)
    app.state.http_client = build_http_client(settings.chart_timeout_seconds)

    register_exception_handlers(app)

    app.include_router(tracks.router, prefix=settings.api_prefix, tags=["Tracks"])
    app.include_router(artists.router, prefix=settings.api_prefix, tags=["Artists"])
    app.include_router(users.router, prefix=settings.api_prefix, tags=["Users"])
    app.include_router(charts.router, prefix=settings.api_prefix, tags=["Charts"])

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint - API info."""
        return {
            "name": settings.app_name,
            "version": "1.0.0",
            "docs": "/docs",
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    # Stored assets; directories may not exist until startup creates them
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")
    app.mount("/covers", StaticFiles(directory=settings.covers_dir, check_dir=False), name="covers")
    app.mount("/assets", StaticFiles(directory=settings.assets_dir, check_dir=False), name="assets")

    return app


app = create_app()
