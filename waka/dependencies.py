from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from waka.config import Settings
from waka.database import get_db
from waka.services.blob_store import BlobStore
from waka.services.chart_service import ChartService


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_blob_store(request: Request) -> BlobStore:
    """The app's blob store, created once in `create_app`."""
    return request.app.state.blob_store


def get_chart_service(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ChartService:
    """
    Chart service bound to the app's pooled HTTP client.

    Tests override this dependency to point the service at a mock transport.
    """
    return ChartService(request.app.state.http_client, settings)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Blobs = Annotated[BlobStore, Depends(get_blob_store)]
Charts = Annotated[ChartService, Depends(get_chart_service)]
