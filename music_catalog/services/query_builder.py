"""Translate list query parameters into a store query and find options."""
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..db.base import canonical_object_id, is_valid_object_id
from ..db.query import ASCENDING, DESCENDING, Contains, Equals, FindOptions, Range, StoreQuery
from ..exceptions import InvalidLimitError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse a query-string integer, returning None when it is absent or not a number."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class TextFilter:
    """Case-insensitive substring match of ``param`` against ``field``."""

    param: str
    field: Optional[str] = None

    def apply(self, params: Mapping[str, str], query: StoreQuery) -> None:
        value = params.get(self.param)
        if value:
            query.add(Contains(self.field or self.param, value))


@dataclass(frozen=True)
class IdFilter:
    """Exact id match; malformed ids are ignored."""

    param: str
    field: Optional[str] = None

    def apply(self, params: Mapping[str, str], query: StoreQuery) -> None:
        value = params.get(self.param)
        if value and is_valid_object_id(value):
            query.add(Equals(self.field or self.param, canonical_object_id(value)))


@dataclass(frozen=True)
class IntegerRangeFilter:
    """Inclusive integer bounds from two parameters; non-numeric bounds are ignored."""

    field: str
    min_param: str
    max_param: str

    def apply(self, params: Mapping[str, str], query: StoreQuery) -> None:
        lower = parse_int(params.get(self.min_param))
        upper = parse_int(params.get(self.max_param))
        if lower is not None or upper is not None:
            query.add(Range(self.field, gte=lower, lte=upper))


@dataclass(frozen=True)
class YearFilter:
    """Expands a calendar year to a YYYY-MM-DD string range on ``field``."""

    param: str
    field: str

    def apply(self, params: Mapping[str, str], query: StoreQuery) -> None:
        year = parse_int(params.get(self.param))
        if year is not None:
            query.add(Range(self.field, gte=f"{year:04d}-01-01", lte=f"{year:04d}-12-31"))


@dataclass(frozen=True)
class BooleanFilter:
    """Present parameter filters on ``value == "true"``."""

    param: str
    field: Optional[str] = None

    def apply(self, params: Mapping[str, str], query: StoreQuery) -> None:
        value = params.get(self.param)
        if value is not None:
            query.add(Equals(self.field or self.param, value == "true"))


class QueryBuilder:
    """Builds store queries for one resource from its filter and sort configuration."""

    def __init__(self, resource):
        self.resource = resource

    def build_query(self, params: Mapping[str, str]) -> StoreQuery:
        query = StoreQuery()
        for list_filter in self.resource.filters:
            list_filter.apply(params, query)
        return query

    def build_options(self, params: Mapping[str, str]) -> FindOptions:
        """Resolve page/limit/sortBy/sortOrder into skip, limit and sort.

        Raises:
            InvalidLimitError: if limit exceeds MAX_LIMIT
        """
        page = parse_int(params.get("page"))
        if page is None or page < 1:
            page = DEFAULT_PAGE

        limit = parse_int(params.get("limit"))
        if limit is None or limit < 1:
            limit = DEFAULT_LIMIT
        if limit > MAX_LIMIT:
            raise InvalidLimitError(f"Limit cannot exceed {MAX_LIMIT} items per page")

        sort_by = params.get("sortBy")
        if sort_by in self.resource.sortable:
            direction = DESCENDING if params.get("sortOrder") == "desc" else ASCENDING
            sort = [(sort_by, direction)]
        else:
            sort = list(self.resource.default_sort)
        # id breaks ties so pages never overlap
        sort.append(("id", ASCENDING))

        return FindOptions(skip=(page - 1) * limit, limit=limit, sort=sort)


def pagination_meta(options: FindOptions, total_items: int) -> Dict[str, Any]:
    """Build the pagination block of a list response."""
    page = options.skip // options.limit + 1
    return {
        "currentPage": page,
        "totalPages": math.ceil(total_items / options.limit),
        "totalItems": total_items,
        "hasNext": page * options.limit < total_items,
        "hasPrev": page > 1,
    }
