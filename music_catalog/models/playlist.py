"""Playlist model for the music catalog."""
from sqlalchemy import JSON, Boolean, Column, String, Text

from ..db.base import Base, ObjectIdMixin, TimestampMixin


class Playlist(Base, ObjectIdMixin, TimestampMixin):
    """Playlist model holding an ordered list of song ids."""

    __tablename__ = "playlists"

    name = Column(String(100), nullable=False, index=True)  # Unique per creator
    creator_name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    songs = Column(JSON, nullable=False, default=list)  # Order is playback order
    tags = Column(JSON, nullable=False, default=list)
    is_public = Column(Boolean, nullable=False, default=False)
    cover_image_url = Column(String(2048), nullable=True)

    def __repr__(self) -> str:
        return f"<Playlist(id={self.id}, name='{self.name}', creator_name='{self.creator_name}')>"
