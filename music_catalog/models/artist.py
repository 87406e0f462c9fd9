"""Artist model for the music catalog."""
from sqlalchemy import JSON, Column, Integer, String, Text

from ..db.base import Base, ObjectIdMixin, TimestampMixin


class Artist(Base, ObjectIdMixin, TimestampMixin):
    """Artist model representing a band or solo act."""

    __tablename__ = "artists"

    name = Column(String(100), nullable=False, index=True)  # Unique case-insensitively, enforced by the engine
    genre = Column(String(50), nullable=False, index=True)
    country = Column(String(50), nullable=False, index=True)
    formed_year = Column(Integer, nullable=False)
    members = Column(JSON, nullable=False, default=list)
    biography = Column(Text, nullable=True)
    website = Column(String(2048), nullable=True)
    social_media = Column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<Artist(id={self.id}, name='{self.name}', genre='{self.genre}')>"
