"""Models for the music catalog."""
from .album import Album
from .artist import Artist
from .playlist import Playlist
from .song import Song

COLLECTIONS = {
    "artists": Artist,
    "albums": Album,
    "songs": Song,
    "playlists": Playlist,
}

__all__ = ["Artist", "Album", "Song", "Playlist", "COLLECTIONS"]
