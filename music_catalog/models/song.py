"""Song model for the music catalog."""
from sqlalchemy import JSON, Column, Integer, String, Text

from ..db.base import Base, ObjectIdMixin, TimestampMixin


class Song(Base, ObjectIdMixin, TimestampMixin):
    """Song model; album_id and artist_id are soft references."""

    __tablename__ = "songs"

    title = Column(String(200), nullable=False, index=True)  # Unique per album
    album_id = Column(String(24), nullable=False, index=True)
    artist_id = Column(String(24), nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # seconds
    track_number = Column(Integer, nullable=True)  # Unique per album when set
    genre = Column(String(50), nullable=False, index=True)
    lyrics = Column(Text, nullable=True)
    audio_url = Column(String(2048), nullable=True)
    featured_artists = Column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Song(id={self.id}, title='{self.title}', album_id={self.album_id}, track_number={self.track_number})>"
