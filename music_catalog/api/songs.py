"""Song API endpoints."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from pydantic import BaseModel, Field

from ..auth import Principal
from ..db.query import ASCENDING
from ..logging import get_logger
from ..services import SONGS, CollectionService, EntityKind
from .deps import ListParams, collection_service, require_auth
from .schemas import MessageResponse, Pagination

logger = get_logger(__name__)

router = APIRouter(prefix="/songs", tags=["songs"])

get_song_service = collection_service(SONGS)

TRACK_ORDER = (("track_number", ASCENDING), ("created_at", ASCENDING), ("id", ASCENDING))


class SongResponse(BaseModel):
    """Song response model."""

    id: str
    title: str
    album_id: str = Field(..., description="Album ID")
    artist_id: str = Field(..., description="Artist ID")
    duration: int = Field(..., ge=1, description="Song duration in seconds")
    track_number: Optional[int] = None
    genre: str
    lyrics: Optional[str] = None
    audio_url: Optional[str] = None
    featured_artists: List[str] = []
    created_at: datetime
    updated_at: datetime


class SongListResponse(BaseModel):
    songs: List[SongResponse]
    pagination: Pagination


class SongCreatedResponse(BaseModel):
    message: str
    song: SongResponse


@router.get("", response_model=SongListResponse)
async def list_songs(
    genre: Optional[str] = Query(None, description="Filter by genre (case-insensitive substring)"),
    artist_id: Optional[str] = Query(None, description="Filter by artist ID; ignored when malformed"),
    album_id: Optional[str] = Query(None, description="Filter by album ID; ignored when malformed"),
    duration_min: Optional[str] = Query(None, description="Minimum duration in seconds (inclusive)"),
    duration_max: Optional[str] = Query(None, description="Maximum duration in seconds (inclusive)"),
    list_params: ListParams = Depends(),
    service: CollectionService = Depends(get_song_service),
) -> SongListResponse:
    """List songs with optional filtering, sorting and pagination."""
    params = list_params.to_params(
        genre=genre,
        artist_id=artist_id,
        album_id=album_id,
        duration_min=duration_min,
        duration_max=duration_max,
    )
    songs, pagination = await service.list(params)
    return SongListResponse(
        songs=[SongResponse.model_validate(song) for song in songs],
        pagination=Pagination(**pagination),
    )


@router.get("/album/{album_id}", response_model=List[SongResponse])
async def get_songs_by_album(
    album_id: str,
    service: CollectionService = Depends(get_song_service),
) -> List[SongResponse]:
    """Get an album's songs ordered by track number; unnumbered songs come last."""
    songs = await service.list_by("album_id", EntityKind.ALBUM, album_id, sort=TRACK_ORDER)
    return [SongResponse.model_validate(song) for song in songs]


@router.get("/artist/{artist_id}", response_model=List[SongResponse])
async def get_songs_by_artist(
    artist_id: str,
    service: CollectionService = Depends(get_song_service),
) -> List[SongResponse]:
    """Get every song of an artist."""
    songs = await service.list_by("artist_id", EntityKind.ARTIST, artist_id)
    return [SongResponse.model_validate(song) for song in songs]


@router.get("/{song_id}", response_model=SongResponse)
async def get_song(
    song_id: str,
    service: CollectionService = Depends(get_song_service),
) -> SongResponse:
    """Get a song by ID."""
    song = await service.get(song_id)
    return SongResponse.model_validate(song)


@router.post("", response_model=SongCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_song(
    payload: Dict[str, Any] = Body(...),
    principal: Principal = Depends(require_auth),
    service: CollectionService = Depends(get_song_service),
) -> SongCreatedResponse:
    """Create a song on an existing album and artist."""
    song = await service.create(payload)
    logger.info("song_created", song_id=song["id"], album_id=song["album_id"], principal=principal.id)
    return SongCreatedResponse(
        message="Song created successfully",
        song=SongResponse.model_validate(song),
    )


@router.put("/{song_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_song(
    song_id: str,
    payload: Dict[str, Any] = Body(...),
    principal: Principal = Depends(require_auth),
    service: CollectionService = Depends(get_song_service),
) -> Response:
    """Replace a song's fields. Responds with no body."""
    await service.update(song_id, payload)
    logger.info("song_updated", song_id=song_id, principal=principal.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{song_id}", response_model=MessageResponse)
async def delete_song(
    song_id: str,
    principal: Principal = Depends(require_auth),
    service: CollectionService = Depends(get_song_service),
) -> MessageResponse:
    """Delete a song. Playlists still listing it skip it when expanded."""
    await service.delete(song_id)
    logger.info("song_deleted", song_id=song_id, principal=principal.id)
    return MessageResponse(message="Song deleted successfully")
