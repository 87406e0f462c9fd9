"""Integration tests for the album endpoints."""

from tests.conftest import MISSING_ID, album_payload, create_album, create_artist


class TestCreateAlbum:
    async def test_create(self, client, artist) -> None:
        response = await client.post("/albums", json=album_payload(artist["id"], track_count="11"))
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Album created successfully"
        assert body["album"]["artist_id"] == artist["id"]
        assert body["album"]["track_count"] == 11

    async def test_uppercase_artist_id_is_stored_lowercase(self, client, artist) -> None:
        response = await client.post("/albums", json=album_payload(artist["id"].upper()))
        assert response.status_code == 201
        assert response.json()["album"]["artist_id"] == artist["id"]

    async def test_unknown_artist(self, client) -> None:
        response = await client.post("/albums", json=album_payload(MISSING_ID))
        assert response.status_code == 400
        assert response.json() == {
            "error": "Artist not found",
            "message": "The specified artist does not exist",
        }

    async def test_malformed_artist_id_is_a_validation_error(self, client) -> None:
        response = await client.post("/albums", json=album_payload("abc"))
        assert response.status_code == 400
        assert response.json()["details"] == ["artist_id must be a valid ID"]

    async def test_duplicate_title_for_same_artist(self, client, artist, album) -> None:
        response = await client.post("/albums", json=album_payload(artist["id"], title=album["title"].lower()))
        assert response.status_code == 409
        assert response.json() == {
            "error": "Album already exists",
            "message": "This artist already has an album with this title",
        }
        listing = await client.get("/albums")
        assert listing.json()["pagination"]["totalItems"] == 1

    async def test_same_title_for_another_artist(self, client, album) -> None:
        other = await create_artist(client, name="Second Artist")
        response = await client.post("/albums", json=album_payload(other["id"], title=album["title"]))
        assert response.status_code == 201


class TestListAlbums:
    async def test_filter_by_year(self, client, artist) -> None:
        await create_album(client, artist["id"], title="Ninety Seven", release_date="1997-03-01")
        await create_album(client, artist["id"], title="Late Ninety Seven", release_date="1997-12-31")
        await create_album(client, artist["id"], title="Ninety Eight", release_date="1998-01-01")

        response = await client.get("/albums", params={"year": "1997"})
        titles = sorted(album["title"] for album in response.json()["albums"])
        assert titles == ["Late Ninety Seven", "Ninety Seven"]

    async def test_filter_by_artist_ignores_malformed_id(self, client, artist) -> None:
        other = await create_artist(client, name="Second Artist")
        await create_album(client, artist["id"], title="Mine")
        await create_album(client, other["id"], title="Theirs")

        response = await client.get("/albums", params={"artist_id": other["id"]})
        assert [album["title"] for album in response.json()["albums"]] == ["Theirs"]

        response = await client.get("/albums", params={"artist_id": "garbage"})
        assert response.json()["pagination"]["totalItems"] == 2

    async def test_sort_by_release_date(self, client, artist) -> None:
        await create_album(client, artist["id"], title="B", release_date="2001-01-01")
        await create_album(client, artist["id"], title="A", release_date="1999-01-01")

        response = await client.get("/albums", params={"sortBy": "release_date"})
        assert [album["title"] for album in response.json()["albums"]] == ["A", "B"]


class TestAlbumsByArtist:
    async def test_insertion_order(self, client, artist) -> None:
        for title in ("Zeta", "Alpha", "Mu"):
            await create_album(client, artist["id"], title=title)

        response = await client.get(f"/albums/artist/{artist['id']}")
        assert response.status_code == 200
        assert [album["title"] for album in response.json()] == ["Zeta", "Alpha", "Mu"]

    async def test_missing_artist_gives_empty_list(self, client) -> None:
        response = await client.get(f"/albums/artist/{MISSING_ID}")
        assert response.status_code == 200
        assert response.json() == []

    async def test_malformed_artist_id(self, client) -> None:
        response = await client.get("/albums/artist/nope")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid artist ID format"


class TestUpdateAndDeleteAlbum:
    async def test_update_checks_references(self, client, artist, album) -> None:
        response = await client.put(f"/albums/{album['id']}", json=album_payload(MISSING_ID))
        assert response.status_code == 400
        assert response.json()["error"] == "Artist not found"

    async def test_update_refreshes_updated_at(self, client, artist, album) -> None:
        response = await client.put(f"/albums/{album['id']}", json=album_payload(artist["id"], genre="Dream Pop"))
        assert response.status_code == 204
        stored = (await client.get(f"/albums/{album['id']}")).json()
        assert stored["genre"] == "Dream Pop"
        assert stored["updated_at"] >= album["updated_at"]

    async def test_update_into_sibling_title_conflicts(self, client, artist, album) -> None:
        sibling = await create_album(client, artist["id"], title="Sibling")
        response = await client.put(f"/albums/{sibling['id']}", json=album_payload(artist["id"], title=album["title"]))
        assert response.status_code == 409

    async def test_delete(self, client, album) -> None:
        response = await client.delete(f"/albums/{album['id']}")
        assert response.json() == {"message": "Album deleted successfully"}
        assert (await client.get(f"/albums/{album['id']}")).status_code == 404
        assert (await client.delete(f"/albums/{album['id']}")).status_code == 404
