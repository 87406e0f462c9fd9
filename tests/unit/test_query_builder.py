"""Unit tests for list query parameter translation."""

import pytest

from music_catalog.db.query import ASCENDING, DESCENDING, Contains, Equals, FindOptions, Range
from music_catalog.exceptions import InvalidLimitError
from music_catalog.services.query_builder import QueryBuilder, pagination_meta
from music_catalog.services.resources import ALBUMS, ARTISTS, PLAYLISTS, SONGS

VALID_ID = "65a1f0c2e4b0a1b2c3d4e5f6"


class TestBuildQuery:
    def test_no_params_builds_empty_query(self) -> None:
        assert QueryBuilder(ARTISTS).build_query({}).conditions == []

    def test_text_filters_are_substring_matches(self) -> None:
        query = QueryBuilder(ARTISTS).build_query({"genre": "rock", "country": "U.K. (north)"})
        assert query.conditions == [Contains("genre", "rock"), Contains("country", "U.K. (north)")]

    def test_unknown_params_are_ignored(self) -> None:
        assert QueryBuilder(ARTISTS).build_query({"name": "x", "artist_id": VALID_ID}).conditions == []

    def test_id_filter_ignores_malformed_ids(self) -> None:
        builder = QueryBuilder(ALBUMS)
        assert builder.build_query({"artist_id": "nope"}).conditions == []
        assert builder.build_query({"artist_id": VALID_ID}).conditions == [Equals("artist_id", VALID_ID)]

    def test_id_filter_accepts_uppercase_hex(self) -> None:
        query = QueryBuilder(ALBUMS).build_query({"artist_id": VALID_ID.upper()})
        assert query.conditions == [Equals("artist_id", VALID_ID)]

    def test_year_expands_to_date_range(self) -> None:
        query = QueryBuilder(ALBUMS).build_query({"year": "1997"})
        assert query.conditions == [Range("release_date", gte="1997-01-01", lte="1997-12-31")]

    def test_non_numeric_year_is_ignored(self) -> None:
        assert QueryBuilder(ALBUMS).build_query({"year": "nineties"}).conditions == []

    def test_duration_range_is_inclusive_and_skips_bad_bounds(self) -> None:
        builder = QueryBuilder(SONGS)
        assert builder.build_query({"duration_min": "120", "duration_max": "240"}).conditions == [
            Range("duration", gte=120, lte=240)
        ]
        assert builder.build_query({"duration_min": "abc", "duration_max": "240"}).conditions == [
            Range("duration", gte=None, lte=240)
        ]
        assert builder.build_query({"duration_min": "abc"}).conditions == []

    @pytest.mark.parametrize("raw, expected", [("true", True), ("false", False), ("yes", False)])
    def test_is_public_filter(self, raw, expected) -> None:
        query = QueryBuilder(PLAYLISTS).build_query({"is_public": raw})
        assert query.conditions == [Equals("is_public", expected)]

    def test_playlist_creator_and_tag_map_to_fields(self) -> None:
        query = QueryBuilder(PLAYLISTS).build_query({"creator": "sam", "tag": "chill"})
        assert query.conditions == [Contains("creator_name", "sam"), Contains("tags", "chill")]


class TestBuildOptions:
    def test_defaults(self) -> None:
        options = QueryBuilder(ARTISTS).build_options({})
        assert options == FindOptions(skip=0, limit=10, sort=[("created_at", ASCENDING), ("id", ASCENDING)])

    @pytest.mark.parametrize("page", ["0", "-3", "abc", ""])
    def test_bad_page_falls_back_to_first(self, page) -> None:
        assert QueryBuilder(ARTISTS).build_options({"page": page}).skip == 0

    @pytest.mark.parametrize("limit", ["0", "-1", "ten"])
    def test_bad_limit_falls_back_to_default(self, limit) -> None:
        assert QueryBuilder(ARTISTS).build_options({"limit": limit}).limit == 10

    def test_skip_is_derived_from_page_and_limit(self) -> None:
        assert QueryBuilder(ARTISTS).build_options({"page": "3", "limit": "20"}).skip == 40

    def test_limit_of_100_is_allowed(self) -> None:
        assert QueryBuilder(ARTISTS).build_options({"limit": "100"}).limit == 100

    def test_limit_above_100_is_rejected(self) -> None:
        with pytest.raises(InvalidLimitError) as exc_info:
            QueryBuilder(ARTISTS).build_options({"limit": "150"})
        assert exc_info.value.error == "Invalid limit"
        assert exc_info.value.status_code == 400

    def test_allow_listed_sort_with_order(self) -> None:
        options = QueryBuilder(SONGS).build_options({"sortBy": "duration", "sortOrder": "desc"})
        assert options.sort == [("duration", DESCENDING), ("id", ASCENDING)]

    def test_any_other_order_is_ascending(self) -> None:
        options = QueryBuilder(SONGS).build_options({"sortBy": "duration", "sortOrder": "DESC"})
        assert options.sort[0] == ("duration", ASCENDING)

    def test_unknown_sort_field_is_ignored(self) -> None:
        options = QueryBuilder(ARTISTS).build_options({"sortBy": "biography"})
        assert options.sort == [("created_at", ASCENDING), ("id", ASCENDING)]


class TestPaginationMeta:
    def test_middle_page(self) -> None:
        meta = pagination_meta(FindOptions(skip=10, limit=10), 25)
        assert meta == {
            "currentPage": 2,
            "totalPages": 3,
            "totalItems": 25,
            "hasNext": True,
            "hasPrev": True,
        }

    def test_empty_collection(self) -> None:
        meta = pagination_meta(FindOptions(skip=0, limit=10), 0)
        assert meta["totalPages"] == 0
        assert meta["hasNext"] is False
        assert meta["hasPrev"] is False

    def test_exact_multiple_has_no_next_page(self) -> None:
        meta = pagination_meta(FindOptions(skip=10, limit=10), 20)
        assert meta["totalPages"] == 2
        assert meta["hasNext"] is False
