"""Music catalog service: artists, albums, songs and playlists over a REST API."""

__version__ = "2.0.0"
