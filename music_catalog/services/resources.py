"""Per-entity configuration of the generic collection engine.

Each entity kind is described once: its collection, the reference fields
checked before writes, its uniqueness keys, list filters, sortable fields and
delete guards. The field-level constraints live in ``validation.FIELD_RULES``.
"""
import enum
from dataclasses import dataclass, field
from typing import Dict, Tuple

from .query_builder import BooleanFilter, IdFilter, IntegerRangeFilter, TextFilter, YearFilter


class EntityKind(str, enum.Enum):
    """Entity kinds managed by the catalog."""

    ARTIST = "artist"
    ALBUM = "album"
    SONG = "song"
    PLAYLIST = "playlist"


@dataclass(frozen=True)
class Reference:
    """A field holding the id (or ids) of records in another collection."""

    field: str
    target: EntityKind
    many: bool = False


@dataclass(frozen=True)
class UniqueKey:
    """field must be unique among records sharing the same scope values."""

    field: str
    error: str
    message: str
    scope: Tuple[str, ...] = ()
    case_insensitive: bool = True


@dataclass(frozen=True)
class DeleteGuard:
    """Blocks deletion while records of ``dependent`` point at the record via ``field``."""

    dependent: EntityKind
    field: str


@dataclass(frozen=True)
class Resource:
    kind: EntityKind
    collection: str
    label: str
    references: Tuple[Reference, ...] = ()
    unique_keys: Tuple[UniqueKey, ...] = ()
    filters: tuple = ()
    sortable: Tuple[str, ...] = ()
    delete_guards: Tuple[DeleteGuard, ...] = ()
    default_sort: Tuple[Tuple[str, int], ...] = field(default=(("created_at", 1),))

    @property
    def name(self) -> str:
        """Lower-case singular name, e.g. ``album``."""
        return self.kind.value


ARTISTS = Resource(
    kind=EntityKind.ARTIST,
    collection="artists",
    label="Artist",
    unique_keys=(
        UniqueKey(
            field="name",
            error="Artist already exists",
            message="An artist with this name already exists in the database",
        ),
    ),
    filters=(TextFilter("genre"), TextFilter("country")),
    sortable=("name", "genre", "country", "formed_year", "created_at"),
    delete_guards=(DeleteGuard(dependent=EntityKind.ALBUM, field="artist_id"),),
)

ALBUMS = Resource(
    kind=EntityKind.ALBUM,
    collection="albums",
    label="Album",
    references=(Reference("artist_id", EntityKind.ARTIST),),
    unique_keys=(
        UniqueKey(
            field="title",
            scope=("artist_id",),
            error="Album already exists",
            message="This artist already has an album with this title",
        ),
    ),
    filters=(TextFilter("genre"), IdFilter("artist_id"), YearFilter("year", field="release_date")),
    sortable=("title", "genre", "release_date", "track_count", "duration", "created_at"),
)

SONGS = Resource(
    kind=EntityKind.SONG,
    collection="songs",
    label="Song",
    references=(
        Reference("album_id", EntityKind.ALBUM),
        Reference("artist_id", EntityKind.ARTIST),
    ),
    unique_keys=(
        UniqueKey(
            field="title",
            scope=("album_id",),
            error="Song already exists",
            message="This album already has a song with this title",
        ),
        UniqueKey(
            field="track_number",
            scope=("album_id",),
            case_insensitive=False,
            error="Track number already exists",
            message="This album already has a song with this track number",
        ),
    ),
    filters=(
        TextFilter("genre"),
        IdFilter("artist_id"),
        IdFilter("album_id"),
        IntegerRangeFilter("duration", min_param="duration_min", max_param="duration_max"),
    ),
    sortable=("title", "genre", "duration", "track_number", "created_at"),
)

PLAYLISTS = Resource(
    kind=EntityKind.PLAYLIST,
    collection="playlists",
    label="Playlist",
    references=(Reference("songs", EntityKind.SONG, many=True),),
    unique_keys=(
        UniqueKey(
            field="name",
            scope=("creator_name",),
            error="Playlist already exists",
            message="You already have a playlist with this name",
        ),
    ),
    filters=(
        TextFilter("creator", field="creator_name"),
        TextFilter("tag", field="tags"),
        BooleanFilter("is_public"),
    ),
    sortable=("name", "creator_name", "created_at", "updated_at"),
)

RESOURCES: Dict[EntityKind, Resource] = {
    resource.kind: resource for resource in (ARTISTS, ALBUMS, SONGS, PLAYLISTS)
}
