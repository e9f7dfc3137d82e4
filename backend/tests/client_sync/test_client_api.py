"""
Tests for the HTTP client: request shape and error mapping.
"""

import httpx
import pytest
import respx
from httpx import Response

from client.api import HomeHNIClient, Session
from client.errors import (
    AuthRequiredError,
    MediaFileError,
    NetworkError,
    NotFoundError,
    RemoteError,
)

BASE_URL = "http://api.test/api"


def make_client(**session) -> HomeHNIClient:
    return HomeHNIClient(base_url=BASE_URL, session=Session(**session))


class TestRequests:
    """Tests for what the client sends."""

    @respx.mock
    async def test_sends_bearer_token(self):
        route = respx.get(f"{BASE_URL}/favorites").mock(
            return_value=Response(200, json={"listing_ids": ["abc"]})
        )

        client = make_client(user_id=1, token="tok")
        try:
            assert await client.list_favorites() == ["abc"]
        finally:
            await client.close()

        assert route.calls.last.request.headers["Authorization"] == "Bearer tok"

    @respx.mock
    async def test_search_drops_unset_params(self):
        route = respx.get(f"{BASE_URL}/search/listings").mock(
            return_value=Response(200, json={"items": [], "total": 0, "page": 1, "page_size": 10, "has_more": False})
        )

        client = make_client()
        try:
            await client.search_listings(intent="buy", city=None, pageSize=5)
        finally:
            await client.close()

        params = route.calls.last.request.url.params
        assert params["intent"] == "buy"
        assert params["pageSize"] == "5"
        assert "city" not in params
        assert "Authorization" not in route.calls.last.request.headers

    @respx.mock
    async def test_login_loads_profile(self):
        respx.post(f"{BASE_URL}/auth/login").mock(
            return_value=Response(200, json={"access_token": "tok", "token_type": "bearer"})
        )
        respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=Response(
                200,
                json={"id": 7, "email": "a@b.com", "name": "A", "phone": None, "is_admin": True},
            )
        )

        client = make_client()
        try:
            session = await client.login("a@b.com", "secret123")
        finally:
            await client.close()

        assert session == Session(user_id=7, token="tok", is_admin=True)
        assert session.authenticated

    @respx.mock
    async def test_upload_media_posts_file(self, tmp_path):
        image = tmp_path / "front.jpg"
        image.write_bytes(b"jpeg bytes")
        route = respx.post(f"{BASE_URL}/media").mock(
            return_value=Response(
                201, json={"url": "/media/x.jpg", "filename": "x.jpg", "content_type": "image/jpeg"}
            )
        )

        client = make_client(user_id=1, token="tok")
        try:
            url = await client.upload_media(image)
        finally:
            await client.close()

        assert url == "/media/x.jpg"
        body = route.calls.last.request.content
        assert b"jpeg bytes" in body
        assert b"image/jpeg" in body

    @respx.mock
    async def test_missing_media_file_is_a_client_error(self, tmp_path):
        route = respx.post(f"{BASE_URL}/media").mock(
            return_value=Response(201, json={"url": "/media/x.jpg"})
        )

        client = make_client(user_id=1, token="tok")
        try:
            with pytest.raises(MediaFileError):
                await client.upload_media(tmp_path / "gone.jpg")
        finally:
            await client.close()

        assert not route.called


class TestErrorMapping:
    """Tests for turning responses into client exceptions."""

    @respx.mock
    async def test_missing_draft_is_none(self):
        respx.get(f"{BASE_URL}/drafts/latest").mock(
            return_value=Response(404, json={"detail": "Draft not found"})
        )

        client = make_client(user_id=1, token="tok")
        try:
            assert await client.get_latest_draft() is None
        finally:
            await client.close()

    @respx.mock
    async def test_not_found_keeps_detail(self):
        respx.post(f"{BASE_URL}/drafts/d1/submit").mock(
            return_value=Response(404, json={"detail": "Draft not found"})
        )

        client = make_client(user_id=1, token="tok")
        try:
            with pytest.raises(NotFoundError) as exc_info:
                await client.submit_draft("d1")
        finally:
            await client.close()

        assert exc_info.value.detail == "Draft not found"

    @respx.mock
    async def test_unauthorized(self):
        respx.get(f"{BASE_URL}/favorites").mock(
            return_value=Response(401, json={"detail": "Invalid token"})
        )

        client = make_client(user_id=1, token="expired")
        try:
            with pytest.raises(AuthRequiredError):
                await client.list_favorites()
        finally:
            await client.close()

    @respx.mock
    async def test_server_error(self):
        respx.post(f"{BASE_URL}/favorites/abc/toggle").mock(return_value=Response(500, text="boom"))

        client = make_client(user_id=1, token="tok")
        try:
            with pytest.raises(RemoteError) as exc_info:
                await client.toggle_favorite("abc")
        finally:
            await client.close()

        assert exc_info.value.status_code == 500

    @respx.mock
    async def test_connection_failure(self):
        respx.get(f"{BASE_URL}/drafts/latest").mock(side_effect=httpx.ConnectError("refused"))

        client = make_client(user_id=1, token="tok")
        try:
            with pytest.raises(NetworkError):
                await client.get_latest_draft()
        finally:
            await client.close()

    @respx.mock
    async def test_no_content(self):
        respx.delete(f"{BASE_URL}/drafts/d1").mock(return_value=Response(204))

        client = make_client(user_id=1, token="tok")
        try:
            assert await client.delete_draft("d1") is None
        finally:
            await client.close()
