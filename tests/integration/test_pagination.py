"""Integration tests for list pagination."""

import math

import pytest

from tests.conftest import create_artist


async def _seed(client, count: int) -> None:
    for index in range(count):
        await create_artist(client, name=f"Artist {index:02d}", formed_year=1950 + index)


@pytest.mark.parametrize("total, limit", [(7, 3), (10, 5), (1, 10)])
async def test_walking_every_page_returns_each_record_once(client, total, limit) -> None:
    await _seed(client, total)

    first = (await client.get("/artists", params={"limit": limit})).json()
    total_pages = first["pagination"]["totalPages"]
    assert total_pages == math.ceil(total / limit)

    seen = []
    for page in range(1, total_pages + 1):
        body = (await client.get("/artists", params={"page": page, "limit": limit})).json()
        assert body["pagination"]["currentPage"] == page
        assert body["pagination"]["hasPrev"] is (page > 1)
        assert body["pagination"]["hasNext"] is (page < total_pages)
        seen.extend(artist["id"] for artist in body["artists"])

    assert len(seen) == total
    assert len(set(seen)) == total


async def test_pages_are_stable_when_sort_values_tie(client) -> None:
    for index in range(6):
        await create_artist(client, name=f"Tie {index}", genre="Same")

    seen = []
    for page in (1, 2, 3):
        body = (await client.get("/artists", params={"page": page, "limit": 2, "sortBy": "genre"})).json()
        seen.extend(artist["id"] for artist in body["artists"])
    assert len(set(seen)) == 6


async def test_defaults(client) -> None:
    await _seed(client, 12)
    body = (await client.get("/artists")).json()
    assert len(body["artists"]) == 10
    assert body["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalItems": 12,
        "hasNext": True,
        "hasPrev": False,
    }


async def test_page_past_the_end_is_empty(client) -> None:
    await _seed(client, 3)
    body = (await client.get("/artists", params={"page": 5})).json()
    assert body["artists"] == []
    assert body["pagination"]["currentPage"] == 5
    assert body["pagination"]["hasNext"] is False


@pytest.mark.parametrize("page, limit", [("0", "x"), ("abc", "-4")])
async def test_bad_page_and_limit_fall_back(client, page, limit) -> None:
    body = (await client.get("/artists", params={"page": page, "limit": limit})).json()
    assert body["pagination"]["currentPage"] == 1
    assert body["pagination"]["totalPages"] == 0


@pytest.mark.parametrize("collection", ["artists", "albums", "songs", "playlists"])
async def test_limit_over_100_is_rejected_on_empty_collection(client, collection) -> None:
    response = await client.get(f"/{collection}", params={"limit": 150})
    assert response.status_code == 400
    assert response.json() == {
        "error": "Invalid limit",
        "message": "Limit cannot exceed 100 items per page",
    }
