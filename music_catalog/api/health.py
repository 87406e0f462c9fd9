"""Service root and health endpoints."""
from typing import Dict

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from ..config import Settings
from ..db.store import DocumentStore
from ..logging import get_logger
from .deps import get_settings, get_store

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


class WelcomeResponse(BaseModel):
    message: str
    description: str
    endpoints: Dict[str, str]
    version: str


class HealthResponse(BaseModel):
    status: str
    version: str
    store: str


@router.get("/", response_model=WelcomeResponse)
async def root(settings: Settings = Depends(get_settings)) -> WelcomeResponse:
    """Describe the service and list the collection endpoints."""
    prefix = settings.api_prefix
    return WelcomeResponse(
        message=f"Welcome to the {settings.app_name}",
        description="A REST API for managing artists, albums, songs, and playlists",
        endpoints={
            "artists": f"{prefix}/artists",
            "albums": f"{prefix}/albums",
            "songs": f"{prefix}/songs",
            "playlists": f"{prefix}/playlists",
        },
        version=settings.app_version,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    response: Response,
    settings: Settings = Depends(get_settings),
    store: DocumentStore = Depends(get_store),
) -> HealthResponse:
    """Report liveness and whether the document store answers a ping."""
    try:
        await store.ping()
    except SQLAlchemyError as e:
        logger.warning("health_check_store_unreachable", error=str(e))
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unhealthy", version=settings.app_version, store="unreachable")
    return HealthResponse(status="healthy", version=settings.app_version, store="ok")
