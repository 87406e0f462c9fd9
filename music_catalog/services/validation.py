"""Field-constraint validation driven by one descriptor table per entity kind.

``normalize`` turns a request payload into a candidate record (trimmed strings,
coerced integers, only declared fields) and ``validate`` checks that record
against ``FIELD_RULES``. Both are pure; neither touches the store.
"""
import enum
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import AnyUrl, TypeAdapter, ValidationError

from ..db.base import canonical_object_id, is_valid_object_id
from .resources import EntityKind

_url_adapter = TypeAdapter(AnyUrl)

Bound = Union[int, date, Callable[[], Any], None]


class FieldType(str, enum.Enum):
    STRING = "string"
    INTEGER = "integer"
    DATE = "date"
    URL = "url"
    OBJECT_ID = "object_id"
    MAPPING = "mapping"
    BOOLEAN = "boolean"
    STRING_LIST = "string_list"
    OBJECT_ID_LIST = "object_id_list"


@dataclass(frozen=True)
class FieldRule:
    """Constraints for one field of an entity."""

    name: str
    type: FieldType
    required: bool = False
    max_length: Optional[int] = None
    minimum: Bound = None
    maximum: Bound = None
    item_max_length: Optional[int] = None
    min_items: int = 0
    unique_items: bool = False


def _current_year() -> int:
    return date.today().year


FIELD_RULES: Dict[EntityKind, Tuple[FieldRule, ...]] = {
    EntityKind.ARTIST: (
        FieldRule("name", FieldType.STRING, required=True, max_length=100),
        FieldRule("genre", FieldType.STRING, required=True, max_length=50),
        FieldRule("country", FieldType.STRING, required=True, max_length=50),
        FieldRule("formed_year", FieldType.INTEGER, required=True, minimum=1900, maximum=_current_year),
        FieldRule(
            "members", FieldType.STRING_LIST, required=True, min_items=1, item_max_length=100, unique_items=True
        ),
        FieldRule("biography", FieldType.STRING, max_length=2000),
        FieldRule("website", FieldType.URL),
        FieldRule("social_media", FieldType.MAPPING),
    ),
    EntityKind.ALBUM: (
        FieldRule("title", FieldType.STRING, required=True, max_length=200),
        FieldRule("artist_id", FieldType.OBJECT_ID, required=True),
        FieldRule("release_date", FieldType.DATE, required=True, minimum=date(1900, 1, 1), maximum=date.today),
        FieldRule("genre", FieldType.STRING, required=True, max_length=50),
        FieldRule("track_count", FieldType.INTEGER, required=True, minimum=1, maximum=200),
        FieldRule("duration", FieldType.INTEGER, required=True, minimum=1, maximum=600),
        FieldRule("record_label", FieldType.STRING, max_length=100),
        FieldRule("cover_image_url", FieldType.URL),
    ),
    EntityKind.SONG: (
        FieldRule("title", FieldType.STRING, required=True, max_length=200),
        FieldRule("album_id", FieldType.OBJECT_ID, required=True),
        FieldRule("artist_id", FieldType.OBJECT_ID, required=True),
        FieldRule("duration", FieldType.INTEGER, required=True, minimum=1, maximum=3600),
        FieldRule("track_number", FieldType.INTEGER, minimum=1, maximum=200),
        FieldRule("genre", FieldType.STRING, required=True, max_length=50),
        FieldRule("lyrics", FieldType.STRING, max_length=10000),
        FieldRule("audio_url", FieldType.URL),
        FieldRule("featured_artists", FieldType.STRING_LIST, item_max_length=100),
    ),
    EntityKind.PLAYLIST: (
        FieldRule("name", FieldType.STRING, required=True, max_length=100),
        FieldRule("creator_name", FieldType.STRING, required=True, max_length=100),
        FieldRule("description", FieldType.STRING, max_length=1000),
        FieldRule("songs", FieldType.OBJECT_ID_LIST, unique_items=True),
        FieldRule("tags", FieldType.STRING_LIST, item_max_length=30),
        FieldRule("is_public", FieldType.BOOLEAN),
        FieldRule("cover_image_url", FieldType.URL),
    ),
}


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _normalize_text(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip() or None
    return value


def _normalize_integer(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return text
            return int(number) if number.is_integer() else text
    return value


def _normalize_boolean(value: Any) -> bool:
    return value is True or value == "true"


def _normalize_string_list(value: Any) -> Any:
    if value is None:
        return []
    if not isinstance(value, list):
        return value
    items = []
    for item in value:
        if isinstance(item, str):
            item = item.strip()
            if not item:
                continue
        elif item is None:
            continue
        items.append(item)
    return items


def _normalize_id(value: Any) -> Any:
    value = _normalize_text(value)
    return canonical_object_id(value) if is_valid_object_id(value) else value


def _normalize_id_list(value: Any) -> Any:
    if value is None:
        return []
    if not isinstance(value, list):
        return value
    return [_normalize_id(item) for item in value]


_NORMALIZERS: Dict[FieldType, Callable[[Any], Any]] = {
    FieldType.STRING: _normalize_text,
    FieldType.URL: _normalize_text,
    FieldType.DATE: _normalize_text,
    FieldType.OBJECT_ID: _normalize_id,
    FieldType.INTEGER: _normalize_integer,
    FieldType.MAPPING: lambda value: value,
    FieldType.BOOLEAN: _normalize_boolean,
    FieldType.STRING_LIST: _normalize_string_list,
    FieldType.OBJECT_ID_LIST: _normalize_id_list,
}


def normalize(kind: EntityKind, payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Build a candidate record holding exactly the fields declared for ``kind``."""
    return {
        rule.name: _NORMALIZERS[rule.type](payload.get(rule.name))
        for rule in FIELD_RULES[kind]
    }


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _resolve(bound: Bound) -> Any:
    return bound() if callable(bound) else bound


def _check_string(rule: FieldRule, value: Any) -> List[str]:
    if not isinstance(value, str):
        return [f"{rule.name} must be a non-empty string"]
    if rule.max_length is not None and len(value) > rule.max_length:
        return [f"{rule.name} must be at most {rule.max_length} characters"]
    return []


def _check_url(rule: FieldRule, value: Any) -> List[str]:
    if not isinstance(value, str):
        return [f"{rule.name} must be a valid URL"]
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return [f"{rule.name} must be a valid URL"]
    return []


def _check_integer(rule: FieldRule, value: Any) -> List[str]:
    if not isinstance(value, int) or isinstance(value, bool):
        return [f"{rule.name} must be a number"]
    minimum, maximum = _resolve(rule.minimum), _resolve(rule.maximum)
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        return [f"{rule.name} must be between {minimum} and {maximum}"]
    return []


def _check_date(rule: FieldRule, value: Any) -> List[str]:
    try:
        parsed = date.fromisoformat(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        return [f"{rule.name} must be a valid date (YYYY-MM-DD)"]
    minimum, maximum = _resolve(rule.minimum), _resolve(rule.maximum)
    if minimum is not None and parsed < minimum:
        return [f"{rule.name} cannot be before {minimum.isoformat()}"]
    if maximum is not None and parsed > maximum:
        return [f"{rule.name} cannot be in the future"]
    return []


def _check_object_id(rule: FieldRule, value: Any) -> List[str]:
    if not is_valid_object_id(value):
        return [f"{rule.name} must be a valid ID"]
    return []


def _check_mapping(rule: FieldRule, value: Any) -> List[str]:
    if not isinstance(value, dict):
        return [f"{rule.name} must be an object"]
    return []


def _check_list(rule: FieldRule, value: Any) -> List[str]:
    if not isinstance(value, list):
        return [f"{rule.name} must be an array"]

    errors = []
    if len(value) < rule.min_items:
        errors.append(f"{rule.name} must contain at least {rule.min_items} item(s)")

    for index, item in enumerate(value, start=1):
        if rule.type is FieldType.OBJECT_ID_LIST:
            if not is_valid_object_id(item):
                errors.append(f"{rule.name} item {index} must be a valid ID")
        elif not isinstance(item, str):
            errors.append(f"{rule.name} item {index} must be a non-empty string")
        elif rule.item_max_length is not None and len(item) > rule.item_max_length:
            errors.append(f"{rule.name} item {index} must be at most {rule.item_max_length} characters")

    if rule.unique_items:
        keys = [item.lower() if isinstance(item, str) else repr(item) for item in value]
        if len(set(keys)) != len(keys):
            errors.append(f"{rule.name} must not contain duplicates")
    return errors


_CHECKS: Dict[FieldType, Callable[[FieldRule, Any], List[str]]] = {
    FieldType.STRING: _check_string,
    FieldType.URL: _check_url,
    FieldType.INTEGER: _check_integer,
    FieldType.DATE: _check_date,
    FieldType.OBJECT_ID: _check_object_id,
    FieldType.MAPPING: _check_mapping,
    FieldType.BOOLEAN: lambda rule, value: [] if isinstance(value, bool) else [f"{rule.name} must be a boolean"],
    FieldType.STRING_LIST: _check_list,
    FieldType.OBJECT_ID_LIST: _check_list,
}


def validate(kind: EntityKind, record: Mapping[str, Any]) -> List[str]:
    """Return every constraint violation of ``record``; empty means valid.

    Missing required fields are reported as ``"<field> is required"``. Optional
    fields are only checked when present. All rules run; nothing short-circuits.
    """
    errors: List[str] = []
    for rule in FIELD_RULES[kind]:
        value = record.get(rule.name)
        if value is None:
            if rule.required:
                errors.append(f"{rule.name} is required")
            continue
        errors.extend(_CHECKS[rule.type](rule, value))
    return errors
