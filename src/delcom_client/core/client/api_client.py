"""
HTTP client for the Delcom REST API.

`DelcomApiClient` wraps an `httpx.AsyncClient`. A request hook adds the
`Cache-Control` header and, when the session holds a token, the bearer
`Authorization` header. Request and response hooks log traffic. Every
endpoint method returns a parsed pydantic record or raises a `DelcomError`.
"""

import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError

from delcom_client import USER_AGENT
from ..models import (
    ApiModel,
    ApiResponse,
    DetailedPost,
    LoginRequest,
    LoginResponse,
    Post,
    PostResponse,
    PostsResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    SinglePostResponse,
)
from .errors import DelcomError, classify_error
from .session import Session

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=ApiModel)
R = TypeVar("R", bound=ApiResponse)


class DelcomApiClient:
    """Async client for the Delcom backend endpoints."""

    def __init__(
        self,
        base_url: str,
        session: Session,
        timeout: float = 30.0,
        log_bodies: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.session = session
        self.log_bodies = log_bodies

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
            event_hooks={
                "request": [self._inject_headers, self._log_request],
                "response": [self._log_response],
            },
        )

    async def __aenter__(self) -> "DelcomApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # Hooks

    async def _inject_headers(self, request: httpx.Request) -> None:
        request.headers["Cache-Control"] = "no-cache"
        authorization = self.session.authorization_header()
        if authorization:
            logger.debug(f"Adding Authorization header for {request.url}")
            request.headers["Authorization"] = authorization
        else:
            logger.warning(f"No auth token available for request: {request.url}")

    async def _log_request(self, request: httpx.Request) -> None:
        logger.debug(f"--> {request.method} {request.url}")
        if self.log_bodies and request.content:
            logger.debug(f"--> body: {request.content[:2048]!r}")

    async def _log_response(self, response: httpx.Response) -> None:
        request = response.request
        logger.debug(f"<-- {response.status_code} {request.method} {request.url}")
        if self.log_bodies:
            await response.aread()
            logger.debug(f"<-- body: {response.text[:2048]}")

    # Transport

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            error = classify_error(e)
            logger.error(f"{method} {path} rejected: {error.status} {e.response.text}")
            raise error
        except httpx.TransportError as e:
            error = classify_error(e)
            logger.error(f"{method} {path} failed: {error.message}")
            raise error

    def _parse(self, response: httpx.Response, model: Type[M]) -> M:
        try:
            return model.model_validate(response.json())
        except (json.JSONDecodeError, ValidationError) as e:
            raise DelcomError(
                f"Unexpected response from {response.request.url}: {e}",
                status=response.status_code,
                code="INVALID_RESPONSE",
                original_error=e,
            )

    def _parse_mutation(self, response: httpx.Response, model: Type[R]) -> R:
        """Parse the reply to a write. A 2xx without a readable body still counts as success."""
        if not response.content.strip():
            logger.debug(f"Empty {response.status_code} body from {response.request.url}")
            return model(success=True)
        try:
            return self._parse(response, model)
        except DelcomError as e:
            logger.warning(f"Ignoring unreadable success body: {e.message}")
            return model(success=True)

    @staticmethod
    def _file_part(field: str, path: Path) -> Dict[str, Any]:
        content_type = mimetypes.guess_type(path.name)[0] or "image/*"
        return {field: (path.name, path.read_bytes(), content_type)}

    # Auth

    async def login(self, request: LoginRequest) -> LoginResponse:
        response = await self._request("POST", "auth/login", json=request.model_dump())
        return self._parse(response, LoginResponse)

    async def register(self, request: RegisterRequest) -> RegisterResponse:
        response = await self._request("POST", "auth/register", json=request.model_dump())
        return self._parse(response, RegisterResponse)

    # Profile

    async def get_profile(self) -> ProfileResponse:
        response = await self._request("GET", "users/me")
        return self._parse(response, ProfileResponse)

    async def update_profile(self, request: ProfileUpdateRequest) -> ProfileResponse:
        response = await self._request("PUT", "users/me", json=request.model_dump())
        return self._parse_mutation(response, ProfileResponse)

    async def update_profile_photo(self, photo: Path) -> ProfileResponse:
        response = await self._request("POST", "users/photo", files=self._file_part("photo", photo))
        return self._parse_mutation(response, ProfileResponse)

    # Posts

    async def get_all_posts(self, is_me: int = 1) -> List[Post]:
        response = await self._request("GET", "posts", params={"is_me": is_me})
        parsed = self._parse(response, PostsResponse)
        return parsed.data.posts if parsed.data else []

    async def get_post(self, post_id: int) -> Optional[DetailedPost]:
        response = await self._request("GET", f"posts/{post_id}")
        parsed = self._parse(response, SinglePostResponse)
        return parsed.data.post if parsed.data else None

    async def add_post(self, cover: Path, description: str) -> PostResponse:
        response = await self._request(
            "POST",
            "posts",
            data={"description": description},
            files=self._file_part("cover", cover),
        )
        return self._parse_mutation(response, PostResponse)

    async def change_cover(self, post_id: int, cover: Path) -> PostResponse:
        response = await self._request(
            "POST",
            f"posts/{post_id}/cover",
            files=self._file_part("cover", cover),
        )
        return self._parse_mutation(response, PostResponse)

    async def update_post(self, post_id: int, description: str) -> PostResponse:
        response = await self._request("PUT", f"posts/{post_id}", data={"description": description})
        return self._parse_mutation(response, PostResponse)

    async def delete_post(self, post_id: int) -> PostResponse:
        response = await self._request("DELETE", f"posts/{post_id}")
        return self._parse_mutation(response, PostResponse)


def create_api_client(
    session: Session,
    base_url: str,
    timeout: float = 30.0,
    **kwargs: Any
) -> DelcomApiClient:
    """Create an API client bound to the given session."""
    return DelcomApiClient(base_url=base_url, session=session, timeout=timeout, **kwargs)
