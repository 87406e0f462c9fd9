"""Playlist API endpoints."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from pydantic import BaseModel, Field

from ..auth import Principal
from ..logging import get_logger
from ..services import PlaylistService
from .deps import ListParams, playlist_service, require_auth
from .schemas import MessageResponse, Pagination
from .songs import SongResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/playlists", tags=["playlists"])


class PlaylistResponse(BaseModel):
    """Playlist response model."""

    id: str
    name: str
    creator_name: str
    description: Optional[str] = None
    songs: List[str] = Field(default_factory=list, description="Song IDs in playback order")
    tags: List[str] = []
    is_public: bool
    cover_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PlaylistListResponse(BaseModel):
    playlists: List[PlaylistResponse]
    pagination: Pagination


class PlaylistCreatedResponse(BaseModel):
    message: str
    playlist: PlaylistResponse


@router.get("", response_model=PlaylistListResponse)
async def list_playlists(
    creator: Optional[str] = Query(None, description="Filter by creator name (case-insensitive substring)"),
    tag: Optional[str] = Query(None, description="Filter by tag (case-insensitive substring)"),
    is_public: Optional[str] = Query(None, description="'true' for public playlists, anything else for private"),
    list_params: ListParams = Depends(),
    service: PlaylistService = Depends(playlist_service),
) -> PlaylistListResponse:
    """List playlists with optional filtering, sorting and pagination."""
    playlists, pagination = await service.list(list_params.to_params(creator=creator, tag=tag, is_public=is_public))
    return PlaylistListResponse(
        playlists=[PlaylistResponse.model_validate(playlist) for playlist in playlists],
        pagination=Pagination(**pagination),
    )


@router.get("/{playlist_id}", response_model=PlaylistResponse)
async def get_playlist(
    playlist_id: str,
    service: PlaylistService = Depends(playlist_service),
) -> PlaylistResponse:
    """Get a playlist by ID."""
    playlist = await service.get(playlist_id)
    return PlaylistResponse.model_validate(playlist)


@router.get("/{playlist_id}/songs", response_model=List[SongResponse])
async def get_playlist_songs(
    playlist_id: str,
    service: PlaylistService = Depends(playlist_service),
) -> List[SongResponse]:
    """Get the playlist's songs in playback order."""
    songs = await service.get_songs(playlist_id)
    return [SongResponse.model_validate(song) for song in songs]


@router.post("", response_model=PlaylistCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_playlist(
    payload: Dict[str, Any] = Body(...),
    principal: Principal = Depends(require_auth),
    service: PlaylistService = Depends(playlist_service),
) -> PlaylistCreatedResponse:
    """Create a playlist. Every listed song must exist."""
    playlist = await service.create(payload)
    logger.info("playlist_created", playlist_id=playlist["id"], song_count=len(playlist["songs"]), principal=principal.id)
    return PlaylistCreatedResponse(
        message="Playlist created successfully",
        playlist=PlaylistResponse.model_validate(playlist),
    )


@router.put("/{playlist_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_playlist(
    playlist_id: str,
    payload: Dict[str, Any] = Body(...),
    principal: Principal = Depends(require_auth),
    service: PlaylistService = Depends(playlist_service),
) -> Response:
    """Replace a playlist's fields. Responds with no body."""
    await service.update(playlist_id, payload)
    logger.info("playlist_updated", playlist_id=playlist_id, principal=principal.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{playlist_id}/songs/{song_id}", response_model=MessageResponse)
async def add_song_to_playlist(
    playlist_id: str,
    song_id: str,
    principal: Principal = Depends(require_auth),
    service: PlaylistService = Depends(playlist_service),
) -> MessageResponse:
    """Append a song to the playlist."""
    await service.add_song(playlist_id, song_id)
    return MessageResponse(message="Song added to playlist successfully")


@router.delete("/{playlist_id}/songs/{song_id}", response_model=MessageResponse)
async def remove_song_from_playlist(
    playlist_id: str,
    song_id: str,
    principal: Principal = Depends(require_auth),
    service: PlaylistService = Depends(playlist_service),
) -> MessageResponse:
    """Remove a song from the playlist."""
    await service.remove_song(playlist_id, song_id)
    return MessageResponse(message="Song removed from playlist successfully")


@router.delete("/{playlist_id}", response_model=MessageResponse)
async def delete_playlist(
    playlist_id: str,
    principal: Principal = Depends(require_auth),
    service: PlaylistService = Depends(playlist_service),
) -> MessageResponse:
    """Delete a playlist."""
    await service.delete(playlist_id)
    logger.info("playlist_deleted", playlist_id=playlist_id, principal=principal.id)
    return MessageResponse(message="Playlist deleted successfully")
