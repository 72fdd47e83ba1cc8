"""
Edit dialog for a single post.

Saving may dispatch two independent requests: a description update and a
cover change. They run concurrently. The dialog closes only once every
dispatched request has succeeded. A failure keeps the dialog open and
records the error; a request that already succeeded is not rolled back, so
one change can be applied while the other is not.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Union
import logging

from ..core.client.errors import InvalidFileError
from ..core.models import Post
from ..media.image_file import is_valid_upload, materialize_image
from .posts import PostsViewModel
from .state import ActionResult, Observable

logger = logging.getLogger(__name__)

NO_CHANGES_MESSAGE = "No changes to save"
INVALID_COVER_MESSAGE = "Invalid cover image"

Materializer = Callable[[Path], Path]


@dataclass
class EditOutcome:
    """What happened on one save."""
    dispatched: int = 0
    succeeded: int = 0
    closed: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        """Some, but not all, dispatched requests succeeded."""
        return 0 < self.succeeded < self.dispatched


class PostEditor:
    """State of the edit dialog and the save coordination."""

    def __init__(self, posts: PostsViewModel, materialize: Optional[Materializer] = None):
        self.posts = posts
        self.materialize: Materializer = materialize or materialize_image

        self.is_open: Observable[bool] = Observable(False)
        self.editing_post: Observable[Optional[Post]] = Observable(None)
        self.description: Observable[str] = Observable("")
        self.cover_source: Observable[Optional[Path]] = Observable(None)
        self.error_message: Observable[Optional[str]] = Observable(None)

        self.dispatched_count = 0
        self.success_count = 0

    def open(self, post: Post) -> None:
        self.editing_post.value = post
        self.description.value = post.description
        self.cover_source.value = None
        self.error_message.value = None
        self.is_open.value = True

    def choose_cover(self, source: Union[str, Path, None]) -> None:
        self.cover_source.value = Path(source) if source is not None else None

    def close(self) -> None:
        self.is_open.value = False
        self.editing_post.value = None
        self.description.value = ""
        self.cover_source.value = None

    def _report(self, message: str, outcome: EditOutcome) -> None:
        self.error_message.value = message
        outcome.errors.append(message)
        logger.warning(f"Post edit: {message}")

    def _prepare_cover(self, outcome: EditOutcome) -> Optional[Path]:
        source = self.cover_source.value
        if source is None:
            return None
        try:
            cover = self.materialize(source)
        except InvalidFileError as e:
            self._report(f"Error processing image: {e.message}", outcome)
            return None
        if not is_valid_upload(cover):
            self._report(INVALID_COVER_MESSAGE, outcome)
            return None
        return cover

    async def _track(self, call: Awaitable[ActionResult], outcome: EditOutcome) -> ActionResult:
        result = await call
        if result.ok:
            self.success_count += 1
            outcome.succeeded = self.success_count
            if self.success_count == self.dispatched_count:
                outcome.closed = True
                self.close()
        else:
            self._report(result.message or "Update failed", outcome)
        return result

    async def save(self) -> EditOutcome:
        """Dispatch the pending changes and wait for all of them."""
        outcome = EditOutcome()
        post = self.editing_post.value
        if post is None:
            return outcome

        self.dispatched_count = 0
        self.success_count = 0
        calls: List[Awaitable[ActionResult]] = []

        description = self.description.value
        cover = self._prepare_cover(outcome)

        if description != post.description and description.strip():
            self.dispatched_count += 1
            calls.append(self.posts.update_post_description(post.id, description))

        if cover is not None:
            self.dispatched_count += 1
            calls.append(self.posts.change_post_cover(post.id, cover))

        outcome.dispatched = self.dispatched_count
        if not calls:
            if not outcome.errors:
                self._report(NO_CHANGES_MESSAGE, outcome)
            return outcome

        logger.debug(f"Saving post {post.id}: {self.dispatched_count} request(s) dispatched")
        await asyncio.gather(*(self._track(call, outcome) for call in calls))
        return outcome
