"""Playlist service: ordered song expansion and membership changes."""
from typing import Any, Dict, List

from ..db.base import utcnow
from ..db.store import DocumentStore
from ..exceptions import DuplicateEntityError
from ..logging import get_logger
from .collection_service import CollectionService
from .resources import PLAYLISTS, SONGS

logger = get_logger(__name__)


class PlaylistService(CollectionService):
    """Collection service for playlists plus song membership operations."""

    def __init__(self, store: DocumentStore, enforce_unique_on_update: bool = True):
        super().__init__(store, PLAYLISTS, enforce_unique_on_update=enforce_unique_on_update)

    async def get_songs(self, playlist_id: str) -> List[Dict[str, Any]]:
        """Get the playlist's songs in stored order, skipping ids that no longer resolve."""
        playlist = await self.get(playlist_id)
        song_ids = playlist.get("songs") or []
        if not song_ids:
            return []

        songs_by_id = {
            song["id"]: song for song in await self.store.find_by_ids(SONGS.collection, song_ids)
        }
        ordered = [songs_by_id[song_id] for song_id in song_ids if song_id in songs_by_id]

        logger.info(
            "retrieved_playlist_songs",
            playlist_id=playlist_id,
            count=len(ordered),
            unresolved=len(song_ids) - len(ordered),
        )
        return ordered

    async def add_song(self, playlist_id: str, song_id: str) -> None:
        """Append a song to the end of the playlist."""
        async with self._track("add_song"):
            playlist_id = self.require_id(playlist_id)
            song_id = self.require_id(song_id, SONGS.label)

            if await self.store.find_by_id(SONGS.collection, song_id) is None:
                raise self.not_found(SONGS.label)

            playlist = await self.store.find_by_id(self.resource.collection, playlist_id)
            if playlist is None:
                raise self.not_found()
            if song_id in (playlist.get("songs") or []):
                raise DuplicateEntityError(
                    "This song is already in the playlist",
                    error="Song already in playlist",
                )

            if not await self.store.push(
                self.resource.collection, playlist_id, "songs", song_id, {"updated_at": utcnow()}
            ):
                raise self.not_found()

        logger.info("playlist_song_added", playlist_id=playlist_id, song_id=song_id)

    async def remove_song(self, playlist_id: str, song_id: str) -> None:
        """Remove a song from the playlist; removing an absent song is not an error."""
        async with self._track("remove_song"):
            playlist_id = self.require_id(playlist_id)
            song_id = self.require_id(song_id, SONGS.label)

            if not await self.store.pull(
                self.resource.collection, playlist_id, "songs", song_id, {"updated_at": utcnow()}
            ):
                raise self.not_found()

        logger.info("playlist_song_removed", playlist_id=playlist_id, song_id=song_id)
