"""
Request and response records for the Delcom REST API.

Every model mirrors the JSON contract of the backend. Unknown fields are
ignored so that additive server changes do not break parsing.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ApiModel(BaseModel):
    """Base class for API records."""

    model_config = ConfigDict(extra="ignore")


class ApiResponse(ApiModel):
    """Envelope shared by every endpoint: `{success, message, data?}`."""

    success: bool
    message: Optional[str] = None

    @field_validator("data", mode="before", check_fields=False)
    @classmethod
    def empty_data_as_none(cls, v: Any) -> Any:
        # The backend sends `"data": []` when there is nothing to return.
        return v if isinstance(v, dict) else None


# Auth

class LoginRequest(ApiModel):
    email: str
    password: str


class RegisterRequest(ApiModel):
    name: str
    email: str
    password: str


class User(ApiModel):
    id: int
    name: str
    email: str
    photo: Optional[str] = None
    token: Optional[str] = None


class LoginData(ApiModel):
    user: User
    token: str


class LoginResponse(ApiResponse):
    data: Optional[LoginData] = None


class RegisterResponse(ApiResponse):
    pass


# Profile

class ProfileUser(ApiModel):
    """Profile record. `phone` is a device-local override, never server data."""

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    photo: Optional[str] = None
    verified_at: Optional[str] = None
    created_at: str
    updated_at: str


class ProfileData(ApiModel):
    user: ProfileUser


class ProfileResponse(ApiResponse):
    data: Optional[ProfileData] = None


class ProfileUpdateRequest(ApiModel):
    """Body of `PUT users/me`. Phone is deliberately absent."""

    name: str
    email: str


# Posts

class Author(ApiModel):
    name: str
    photo: Optional[str] = None


class Comment(ApiModel):
    id: int
    comment: str
    created_at: str
    updated_at: str


class Post(ApiModel):
    """Summary form of a post as returned by the list endpoint."""

    id: int
    user_id: int
    cover: str
    description: str
    created_at: str
    updated_at: str
    author: Author
    likes: List[int] = []
    comments: List[int] = []


class DetailedPost(ApiModel):
    """A post with its full comment list and the viewer's own comment."""

    id: int
    user_id: int
    cover: str
    description: str
    created_at: str
    updated_at: str
    author: Author
    likes: List[int] = []
    comments: List[Comment] = []
    my_comment: Optional[Comment] = None


class PostData(ApiModel):
    post_id: int


class PostResponse(ApiResponse):
    data: Optional[PostData] = None


class PostsData(ApiModel):
    posts: List[Post] = []


class PostsResponse(ApiResponse):
    data: Optional[PostsData] = None


class SinglePostData(ApiModel):
    post: Optional[DetailedPost] = None


class SinglePostResponse(ApiResponse):
    data: Optional[SinglePostData] = None
