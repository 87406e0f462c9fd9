"""Services for the music catalog."""
from .collection_service import CollectionService
from .playlist_service import PlaylistService
from .resources import ALBUMS, ARTISTS, PLAYLISTS, RESOURCES, SONGS, EntityKind

__all__ = [
    "CollectionService",
    "PlaylistService",
    "EntityKind",
    "RESOURCES",
    "ARTISTS",
    "ALBUMS",
    "SONGS",
    "PLAYLISTS",
]
