"""Shared pytest fixtures for the music catalog test suite."""

from typing import Any, AsyncIterator, Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from music_catalog.auth import DemoAuthStrategy, TokenAuthStrategy
from music_catalog.config import Settings
from music_catalog.db.store import DocumentStore
from music_catalog.main import create_app

API_TOKEN = "test-token"
MISSING_ID = "0123456789abcdef01234567"


def make_settings(**overrides: Any) -> Settings:
    """Build settings that ignore the developer's environment file."""
    values: Dict[str, Any] = {"auth_mode": "demo", "log_format": "console"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


# ---------------------------------------------------------------------------
# Store and application
# ---------------------------------------------------------------------------


@pytest.fixture
async def store() -> AsyncIterator[DocumentStore]:
    """A fresh in-memory document store per test."""
    store = DocumentStore.from_url(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store, auth=DemoAuthStrategy())


@pytest.fixture
async def client(app) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def token_client(store) -> AsyncIterator[AsyncClient]:
    """Client for an app that only accepts ``API_TOKEN``."""
    app = create_app(
        settings=make_settings(auth_mode="token", auth_tokens=[API_TOKEN]),
        store=store,
        auth=TokenAuthStrategy([API_TOKEN]),
    )
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------


def artist_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "name": "The Midnight Echoes",
        "genre": "Indie Rock",
        "country": "United Kingdom",
        "formed_year": 2008,
        "members": ["Ada Lane", "Tom Reyes"],
        "biography": "A four-piece from Leeds.",
        "website": "https://midnightechoes.example.com",
        "social_media": {"instagram": "@midnightechoes"},
    }
    payload.update(overrides)
    return payload


def album_payload(artist_id: str, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "title": "Static Skies",
        "artist_id": artist_id,
        "release_date": "2015-06-12",
        "genre": "Indie Rock",
        "track_count": 11,
        "duration": 44,
        "record_label": "Northern Lights Records",
    }
    payload.update(overrides)
    return payload


def song_payload(album_id: str, artist_id: str, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "title": "Paper Lanterns",
        "album_id": album_id,
        "artist_id": artist_id,
        "duration": 215,
        "track_number": 1,
        "genre": "Indie Rock",
    }
    payload.update(overrides)
    return payload


def playlist_payload(songs: Optional[list] = None, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "name": "Late Night Drive",
        "creator_name": "sam",
        "description": "Quiet songs for empty roads",
        "songs": songs or [],
        "tags": ["chill", "night"],
        "is_public": True,
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------


async def create_artist(client: AsyncClient, **overrides: Any) -> Dict[str, Any]:
    response = await client.post("/artists", json=artist_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["artist"]


async def create_album(client: AsyncClient, artist_id: str, **overrides: Any) -> Dict[str, Any]:
    response = await client.post("/albums", json=album_payload(artist_id, **overrides))
    assert response.status_code == 201, response.text
    return response.json()["album"]


async def create_song(client: AsyncClient, album_id: str, artist_id: str, **overrides: Any) -> Dict[str, Any]:
    response = await client.post("/songs", json=song_payload(album_id, artist_id, **overrides))
    assert response.status_code == 201, response.text
    return response.json()["song"]


async def create_playlist(client: AsyncClient, songs: Optional[list] = None, **overrides: Any) -> Dict[str, Any]:
    response = await client.post("/playlists", json=playlist_payload(songs, **overrides))
    assert response.status_code == 201, response.text
    return response.json()["playlist"]


@pytest.fixture
async def artist(client) -> Dict[str, Any]:
    return await create_artist(client)


@pytest.fixture
async def album(client, artist) -> Dict[str, Any]:
    return await create_album(client, artist["id"])
