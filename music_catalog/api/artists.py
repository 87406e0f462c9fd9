"""Artist API endpoints."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from pydantic import BaseModel, Field

from ..auth import Principal
from ..logging import get_logger
from ..services import ARTISTS, CollectionService
from .deps import ListParams, collection_service, require_auth
from .schemas import MessageResponse, Pagination

logger = get_logger(__name__)

router = APIRouter(prefix="/artists", tags=["artists"])

get_artist_service = collection_service(ARTISTS)


class ArtistResponse(BaseModel):
    """Artist response model."""

    id: str
    name: str = Field(..., description="Artist or band name")
    genre: str
    country: str
    formed_year: int
    members: List[str]
    biography: Optional[str] = None
    website: Optional[str] = None
    social_media: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class ArtistListResponse(BaseModel):
    artists: List[ArtistResponse]
    pagination: Pagination


class ArtistCreatedResponse(BaseModel):
    message: str
    artist: ArtistResponse


@router.get("", response_model=ArtistListResponse)
async def list_artists(
    genre: Optional[str] = Query(None, description="Filter by genre (case-insensitive substring)"),
    country: Optional[str] = Query(None, description="Filter by country (case-insensitive substring)"),
    list_params: ListParams = Depends(),
    service: CollectionService = Depends(get_artist_service),
) -> ArtistListResponse:
    """List artists with optional filtering, sorting and pagination."""
    artists, pagination = await service.list(list_params.to_params(genre=genre, country=country))
    return ArtistListResponse(
        artists=[ArtistResponse.model_validate(artist) for artist in artists],
        pagination=Pagination(**pagination),
    )


@router.get("/{artist_id}", response_model=ArtistResponse)
async def get_artist(
    artist_id: str,
    service: CollectionService = Depends(get_artist_service),
) -> ArtistResponse:
    """Get an artist by ID."""
    artist = await service.get(artist_id)
    return ArtistResponse.model_validate(artist)


@router.post("", response_model=ArtistCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_artist(
    payload: Dict[str, Any] = Body(...),
    principal: Principal = Depends(require_auth),
    service: CollectionService = Depends(get_artist_service),
) -> ArtistCreatedResponse:
    """Create an artist. Names are unique regardless of case."""
    artist = await service.create(payload)
    logger.info("artist_created", artist_id=artist["id"], name=artist["name"], principal=principal.id)
    return ArtistCreatedResponse(
        message="Artist created successfully",
        artist=ArtistResponse.model_validate(artist),
    )


@router.put("/{artist_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_artist(
    artist_id: str,
    payload: Dict[str, Any] = Body(...),
    principal: Principal = Depends(require_auth),
    service: CollectionService = Depends(get_artist_service),
) -> Response:
    """Replace an artist's fields. Responds with no body."""
    await service.update(artist_id, payload)
    logger.info("artist_updated", artist_id=artist_id, principal=principal.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{artist_id}", response_model=MessageResponse)
async def delete_artist(
    artist_id: str,
    principal: Principal = Depends(require_auth),
    service: CollectionService = Depends(get_artist_service),
) -> MessageResponse:
    """Delete an artist. Refused while any album references the artist."""
    await service.delete(artist_id)
    logger.info("artist_deleted", artist_id=artist_id, principal=principal.id)
    return MessageResponse(message="Artist deleted successfully")
