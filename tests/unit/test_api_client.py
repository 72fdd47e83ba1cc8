"""Tests for DelcomApiClient against a mocked transport."""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from delcom_client.core.client import DelcomApiClient, Session
from delcom_client.core.client.errors import DelcomError, NetworkError, ServerRejectedError
from delcom_client.core.models import LoginRequest, ProfileUpdateRequest, RegisterRequest

from fakes import BASE_URL, post_json, posts_json, profile_json


class TestHeaders:

    @pytest.mark.asyncio
    async def test_bearer_and_cache_control(self, backend, client) -> None:
        backend.on("GET", "users/me", json=profile_json())

        await client.get_profile()

        request = backend.requests[0]
        assert request.headers["Authorization"] == "Bearer test-token"
        assert request.headers["Cache-Control"] == "no-cache"
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_no_authorization_without_token(self, backend) -> None:
        backend.on("POST", "auth/register", json={"success": True, "message": "Registered"})
        client = DelcomApiClient(base_url=BASE_URL, session=Session(), transport=backend.transport)

        await client.register(RegisterRequest(name="Ayu", email="ayu@example.com", password="pw"))

        assert "Authorization" not in backend.requests[0].headers

    @pytest.mark.asyncio
    async def test_token_change_is_picked_up(self, backend, client, session) -> None:
        backend.on("GET", "users/me", json=profile_json())

        session.token = "rotated"
        await client.get_profile()

        assert backend.requests[0].headers["Authorization"] == "Bearer rotated"


class TestEndpoints:

    @pytest.mark.asyncio
    async def test_login_parses_token(self, backend, client) -> None:
        backend.on("POST", "auth/login", json={
            "success": True,
            "message": "OK",
            "data": {
                "user": {"id": 1, "name": "Ayu", "email": "ayu@example.com"},
                "token": "abc",
            },
        })

        response = await client.login(LoginRequest(email="ayu@example.com", password="pw"))

        assert response.data.token == "abc"
        assert response.data.user.name == "Ayu"

    @pytest.mark.asyncio
    async def test_update_profile_sends_name_and_email_only(self, backend, client) -> None:
        backend.on("PUT", "users/me", json=profile_json(name="New"))

        await client.update_profile(ProfileUpdateRequest(name="New", email="new@example.com"))

        assert json.loads(backend.requests[0].read()) == {"name": "New", "email": "new@example.com"}

    @pytest.mark.asyncio
    async def test_get_all_posts_filters_own(self, backend, client) -> None:
        backend.on("GET", "posts", json=posts_json(post_json(1), post_json(2)))

        posts = await client.get_all_posts()

        assert [p.id for p in posts] == [1, 2]
        assert backend.requests[0].url.params["is_me"] == "1"

    @pytest.mark.asyncio
    async def test_get_post_without_data(self, backend, client) -> None:
        backend.on("GET", "posts/9", json={"success": True, "message": "OK", "data": None})

        assert await client.get_post(9) is None

    @pytest.mark.asyncio
    async def test_get_post_with_comments(self, backend, client) -> None:
        detail = post_json(9)
        detail["comments"] = [{
            "id": 4,
            "comment": "Nice",
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-01-01T00:00:00Z",
        }]
        backend.on("GET", "posts/9", json={"success": True, "message": "OK", "data": {"post": detail}})

        post = await client.get_post(9)

        assert post.comments[0].comment == "Nice"
        assert post.my_comment is None

    @pytest.mark.asyncio
    async def test_add_post_is_multipart(self, backend, client, image_file) -> None:
        backend.on("POST", "posts", json={"success": True, "message": "Created", "data": {"post_id": 12}})

        response = await client.add_post(image_file, "Sunset")

        request = backend.requests[0]
        body = request.read()
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="cover"; filename="cover.jpg"' in body
        assert b"Content-Type: image/jpeg" in body
        assert b'name="description"' in body
        assert b"Sunset" in body
        assert response.data.post_id == 12

    @pytest.mark.asyncio
    async def test_update_photo_field_name(self, backend, client, image_file) -> None:
        backend.on("POST", "users/photo", json={"success": True, "message": "OK"})

        await client.update_profile_photo(image_file)

        assert b'name="photo"; filename="cover.jpg"' in backend.requests[0].read()

    @pytest.mark.asyncio
    async def test_update_post_is_form_encoded(self, backend, client) -> None:
        backend.on("PUT", "posts/3", json={"success": True, "message": "Updated"})

        await client.update_post(3, "New text")

        request = backend.requests[0]
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.read().decode()) == {"description": ["New text"]}


class TestErrorMapping:

    @pytest.mark.asyncio
    async def test_non_success_status(self, backend, client) -> None:
        backend.on("DELETE", "posts/5", status=404, text="no such post")

        with pytest.raises(ServerRejectedError) as exc_info:
            await client.delete_post(5)

        assert exc_info.value.status == 404
        assert exc_info.value.body == "no such post"

    @pytest.mark.asyncio
    async def test_transport_failure(self, backend, client) -> None:
        backend.fail("GET", "posts", httpx.ConnectError("connection refused"))

        with pytest.raises(NetworkError) as exc_info:
            await client.get_all_posts()

        assert "connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_invalid_json(self, backend, client) -> None:
        backend.on("GET", "users/me", text="<html>oops</html>")

        with pytest.raises(DelcomError) as exc_info:
            await client.get_profile()

        assert exc_info.value.code == "INVALID_RESPONSE"

    @pytest.mark.asyncio
    async def test_write_with_empty_body_succeeds(self, backend, client) -> None:
        backend.on("DELETE", "posts/5", status=204)

        response = await client.delete_post(5)

        assert response.success is True
        assert response.message is None
        assert response.data is None

    @pytest.mark.asyncio
    async def test_write_with_unreadable_body_succeeds(self, backend, client) -> None:
        backend.on("PUT", "posts/3", text="<html>saved</html>")

        response = await client.update_post(3, "New text")

        assert response.success is True

    @pytest.mark.asyncio
    async def test_empty_data_list_is_none(self, backend, client, image_file) -> None:
        backend.on("POST", "posts/3/cover", json={"success": True, "message": "Cover changed", "data": []})

        response = await client.change_cover(3, image_file)

        assert response.data is None
        assert response.message == "Cover changed"

    @pytest.mark.asyncio
    async def test_unexpected_shape(self, backend, client) -> None:
        backend.on("GET", "users/me", json={"unexpected": True})

        with pytest.raises(DelcomError) as exc_info:
            await client.get_profile()

        assert exc_info.value.code == "INVALID_RESPONSE"
