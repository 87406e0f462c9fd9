"""Album model for the music catalog."""
from sqlalchemy import Column, Integer, String

from ..db.base import Base, ObjectIdMixin, TimestampMixin


class Album(Base, ObjectIdMixin, TimestampMixin):
    """Album model; artist_id is a soft reference checked by the engine."""

    __tablename__ = "albums"

    title = Column(String(200), nullable=False, index=True)  # Unique per artist
    artist_id = Column(String(24), nullable=False, index=True)
    release_date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    genre = Column(String(50), nullable=False, index=True)
    track_count = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    record_label = Column(String(100), nullable=True)
    cover_image_url = Column(String(2048), nullable=True)

    def __repr__(self) -> str:
        return f"<Album(id={self.id}, title='{self.title}', artist_id={self.artist_id})>"
