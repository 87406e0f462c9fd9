"""Album API endpoints."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from pydantic import BaseModel, Field

from ..auth import Principal
from ..logging import get_logger
from ..services import ALBUMS, CollectionService, EntityKind
from .deps import ListParams, collection_service, require_auth
from .schemas import MessageResponse, Pagination

logger = get_logger(__name__)

router = APIRouter(prefix="/albums", tags=["albums"])

get_album_service = collection_service(ALBUMS)


class AlbumResponse(BaseModel):
    """Album response model."""

    id: str
    title: str
    artist_id: str = Field(..., description="Artist ID")
    release_date: str = Field(..., description="Release date (YYYY-MM-DD)")
    genre: str
    track_count: int = Field(..., ge=1)
    duration: int = Field(..., ge=1, description="Album duration in minutes")
    record_label: Optional[str] = None
    cover_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AlbumListResponse(BaseModel):
    albums: List[AlbumResponse]
    pagination: Pagination


class AlbumCreatedResponse(BaseModel):
    message: str
    album: AlbumResponse


@router.get("", response_model=AlbumListResponse)
async def list_albums(
    genre: Optional[str] = Query(None, description="Filter by genre (case-insensitive substring)"),
    artist_id: Optional[str] = Query(None, description="Filter by artist ID; ignored when malformed"),
    year: Optional[str] = Query(None, description="Filter by release year"),
    list_params: ListParams = Depends(),
    service: CollectionService = Depends(get_album_service),
) -> AlbumListResponse:
    """List albums with optional filtering, sorting and pagination."""
    albums, pagination = await service.list(list_params.to_params(genre=genre, artist_id=artist_id, year=year))
    return AlbumListResponse(
        albums=[AlbumResponse.model_validate(album) for album in albums],
        pagination=Pagination(**pagination),
    )


@router.get("/artist/{artist_id}", response_model=List[AlbumResponse])
async def get_albums_by_artist(
    artist_id: str,
    service: CollectionService = Depends(get_album_service),
) -> List[AlbumResponse]:
    """Get every album of an artist. An unknown artist yields an empty list."""
    albums = await service.list_by("artist_id", EntityKind.ARTIST, artist_id)
    return [AlbumResponse.model_validate(album) for album in albums]


@router.get("/{album_id}", response_model=AlbumResponse)
async def get_album(
    album_id: str,
    service: CollectionService = Depends(get_album_service),
) -> AlbumResponse:
    """Get an album by ID."""
    album = await service.get(album_id)
    return AlbumResponse.model_validate(album)


@router.post("", response_model=AlbumCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_album(
    payload: Dict[str, Any] = Body(...),
    principal: Principal = Depends(require_auth),
    service: CollectionService = Depends(get_album_service),
) -> AlbumCreatedResponse:
    """Create an album for an existing artist."""
    album = await service.create(payload)
    logger.info("album_created", album_id=album["id"], artist_id=album["artist_id"], principal=principal.id)
    return AlbumCreatedResponse(
        message="Album created successfully",
        album=AlbumResponse.model_validate(album),
    )


@router.put("/{album_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_album(
    album_id: str,
    payload: Dict[str, Any] = Body(...),
    principal: Principal = Depends(require_auth),
    service: CollectionService = Depends(get_album_service),
) -> Response:
    """Replace an album's fields. Responds with no body."""
    await service.update(album_id, payload)
    logger.info("album_updated", album_id=album_id, principal=principal.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{album_id}", response_model=MessageResponse)
async def delete_album(
    album_id: str,
    principal: Principal = Depends(require_auth),
    service: CollectionService = Depends(get_album_service),
) -> MessageResponse:
    """Delete an album."""
    await service.delete(album_id)
    logger.info("album_deleted", album_id=album_id, principal=principal.id)
    return MessageResponse(message="Album deleted successfully")
