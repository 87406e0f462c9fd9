"""Store-agnostic query conditions and find options.

The query builder produces these; the document store compiles them into
SQLAlchemy clauses for the collection's table.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

ASCENDING = 1
DESCENDING = -1


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class EqualsIgnoreCase:
    field: str
    value: str


@dataclass(frozen=True)
class NotEquals:
    field: str
    value: Any


@dataclass(frozen=True)
class Contains:
    """Case-insensitive literal substring match (also matches list items)."""

    field: str
    value: str


@dataclass(frozen=True)
class Range:
    """Inclusive bounds; either side may be omitted."""

    field: str
    gte: Optional[Any] = None
    lte: Optional[Any] = None


@dataclass
class StoreQuery:
    conditions: List[Any] = field(default_factory=list)

    def add(self, condition: Any) -> "StoreQuery":
        self.conditions.append(condition)
        return self


@dataclass
class FindOptions:
    skip: int = 0
    limit: Optional[int] = None
    sort: List[Tuple[str, int]] = field(default_factory=list)
