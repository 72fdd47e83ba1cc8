"""
Post feed view-model.

Every operation checks its inputs, the session token and connectivity in
that order, issues one request and reports the outcome. Successful
mutations refresh the post list; failed ones leave it untouched.
"""

from pathlib import Path
from typing import List, Optional, Union
import logging

from ..core.client import DelcomApiClient, Session
from ..core.client.errors import (
    DelcomError,
    InvalidFileError,
    Operation,
)
from ..core.connectivity import ConnectivityMonitor
from ..core.models import DetailedPost, Post
from ..media.image_file import is_valid_upload
from .base import BaseViewModel
from .state import ActionResult, Observable

logger = logging.getLogger(__name__)

DESCRIPTION_REQUIRED_MESSAGE = "Description cannot be empty"
INVALID_COVER_MESSAGE = "Invalid cover image: File is empty or does not exist"


class PostsViewModel(BaseViewModel):
    """The signed-in user's own posts."""

    def __init__(
        self,
        client: DelcomApiClient,
        session: Session,
        connectivity: Optional[ConnectivityMonitor] = None,
    ):
        super().__init__(client, session, connectivity)
        self.posts: Observable[List[Post]] = Observable([])

    def find(self, post_id: int) -> Optional[Post]:
        return next((post for post in self.posts.value if post.id == post_id), None)

    @staticmethod
    def _require_cover(cover: Path) -> None:
        if not is_valid_upload(cover):
            raise InvalidFileError(INVALID_COVER_MESSAGE, path=str(cover))

    async def load_posts(self) -> ActionResult:
        logger.debug("Loading posts")
        try:
            await self._ensure_ready()
            with self._loading():
                posts = await self.client.get_all_posts(is_me=1)
        except DelcomError as e:
            return self._fail(e, Operation.LOAD_POSTS)

        self.posts.value = posts
        logger.debug(f"Posts loaded: count={len(posts)}")
        return self._succeed(posts)

    async def get_post(self, post_id: int) -> ActionResult:
        logger.debug(f"Loading post: id={post_id}")
        try:
            await self._ensure_ready()
            with self._loading():
                post: Optional[DetailedPost] = await self.client.get_post(post_id)
        except DelcomError as e:
            return self._fail(e, Operation.GET_POST)

        if post is None:
            logger.error(f"Post data is null for id={post_id}")
            return self._fail(DelcomError("Post data is null"), Operation.GET_POST)

        return self._succeed(post)

    async def delete_post(self, post_id: int) -> ActionResult:
        logger.debug(f"Deleting post: id={post_id}")
        try:
            await self._ensure_ready()
            with self._loading():
                response = await self.client.delete_post(post_id)
        except DelcomError as e:
            return self._fail(e, Operation.DELETE_POST)

        message = response.message or "Post deleted successfully"
        logger.debug(f"Post deleted successfully: id={post_id}")
        result = self._succeed(message, message)
        await self.load_posts()
        return result

    async def add_post(self, cover: Union[str, Path], description: str) -> ActionResult:
        cover = Path(cover)
        try:
            self._require_cover(cover)
            self._require_text(description, DESCRIPTION_REQUIRED_MESSAGE, "description")
            await self._ensure_ready()
            logger.debug(f"Uploading post: cover={cover}, description={description}")
            with self._loading():
                response = await self.client.add_post(cover, description)
        except DelcomError as e:
            return self._fail(e, Operation.ADD_POST)

        post_id = response.data.post_id if response.data else -1
        logger.debug(f"Post added successfully: post_id={post_id}")
        result = self._succeed(post_id, response.message or "Post added successfully")
        await self.load_posts()
        return result

    async def change_post_cover(self, post_id: int, cover: Union[str, Path]) -> ActionResult:
        cover = Path(cover)
        try:
            self._require_cover(cover)
            await self._ensure_ready()
            logger.debug(f"Changing cover for post_id={post_id}, cover={cover}")
            with self._loading():
                response = await self.client.change_cover(post_id, cover)
        except DelcomError as e:
            return self._fail(e, Operation.CHANGE_COVER)

        message = response.message or "Cover changed successfully"
        result = self._succeed(message, message)
        await self.load_posts()
        return result

    async def update_post_description(self, post_id: int, description: str) -> ActionResult:
        try:
            self._require_text(description, DESCRIPTION_REQUIRED_MESSAGE, "description")
            await self._ensure_ready()
            logger.debug(f"Updating post description for post_id={post_id}")
            with self._loading():
                response = await self.client.update_post(post_id, description)
        except DelcomError as e:
            return self._fail(e, Operation.UPDATE_POST)

        message = response.message or "Post updated successfully"
        result = self._succeed(message, message)
        await self.load_posts()
        return result
