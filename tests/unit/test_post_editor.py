"""Tests for the combined description/cover edit dialog."""

from functools import partial
from pathlib import Path
from urllib.parse import parse_qs

import pytest
from PIL import Image

from delcom_client.core.client.errors import InvalidFileError
from delcom_client.core.models import Post
from delcom_client.media.image_file import materialize_image
from delcom_client.viewmodels import PostEditor, PostsViewModel

from fakes import post_json, posts_json


@pytest.fixture
def posts_vm(client, session, online) -> PostsViewModel:
    return PostsViewModel(client, session, online)


@pytest.fixture
def editor(posts_vm) -> PostEditor:
    editor = PostEditor(posts_vm, materialize=lambda source: Path(source))
    editor.open(Post.model_validate(post_json(7, "Old text")))
    return editor


class TestPostEditor:

    def test_open_fills_buffers(self, editor) -> None:
        assert editor.is_open.value is True
        assert editor.description.value == "Old text"
        assert editor.cover_source.value is None

    @pytest.mark.asyncio
    async def test_no_changes(self, editor, backend) -> None:
        outcome = await editor.save()

        assert outcome.dispatched == 0
        assert editor.error_message.value == "No changes to save"
        assert editor.is_open.value is True
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_blank_description_is_not_sent(self, editor, backend) -> None:
        editor.description.value = "   "

        outcome = await editor.save()

        assert outcome.dispatched == 0
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_both_succeed_closes(self, editor, backend, image_file) -> None:
        backend.on("PUT", "posts/7", json={"success": True, "message": "Updated"})
        backend.on("POST", "posts/7/cover", json={"success": True, "message": "Cover changed"})
        backend.on("GET", "posts", json=posts_json(post_json(7, "New text")))
        editor.description.value = "New text"
        editor.choose_cover(image_file)

        outcome = await editor.save()

        assert outcome.dispatched == 2
        assert outcome.succeeded == 2
        assert outcome.closed is True
        assert editor.is_open.value is False
        assert editor.editing_post.value is None

    @pytest.mark.asyncio
    async def test_cover_failure_keeps_description_change(self, editor, posts_vm, backend, image_file) -> None:
        backend.on("PUT", "posts/7", json={"success": True, "message": "Updated"})
        backend.on("POST", "posts/7/cover", status=413)
        backend.on("GET", "posts", json=posts_json(post_json(7, "New text")))
        editor.description.value = "New text"
        editor.choose_cover(image_file)

        outcome = await editor.save()

        assert outcome.partial is True
        assert outcome.closed is False
        assert editor.is_open.value is True
        assert editor.error_message.value == "Image too large. Please choose a smaller file."
        sent = backend.calls("PUT", "posts/7")
        assert parse_qs(sent[0].read().decode()) == {"description": ["New text"]}
        assert posts_vm.find(7).description == "New text"

    @pytest.mark.asyncio
    async def test_description_only(self, editor, backend) -> None:
        backend.on("PUT", "posts/7", json={"success": True, "message": "Updated"})
        backend.on("GET", "posts", json=posts_json(post_json(7, "New text")))
        editor.description.value = "New text"

        outcome = await editor.save()

        assert outcome.dispatched == 1
        assert outcome.closed is True
        assert backend.calls("POST", "posts/7/cover") == []

    @pytest.mark.asyncio
    async def test_unreadable_cover_is_not_dispatched(self, posts_vm, backend, tmp_path) -> None:
        def broken(source: Path) -> Path:
            raise InvalidFileError(f"Failed to decode image {source}")

        editor = PostEditor(posts_vm, materialize=broken)
        editor.open(Post.model_validate(post_json(7, "Old text")))
        editor.choose_cover(tmp_path / "photo.heic")

        outcome = await editor.save()

        assert outcome.dispatched == 0
        assert editor.error_message.value.startswith("Error processing image: Failed to decode image")
        assert editor.is_open.value is True
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_cover_write_failure_keeps_editor_usable(self, posts_vm, backend, tmp_path) -> None:
        source = tmp_path / "pick.png"
        Image.new("RGB", (200, 200)).save(source, format="PNG")
        blocker = tmp_path / "cachefile"
        blocker.write_text("not a directory")
        editor = PostEditor(posts_vm, materialize=partial(materialize_image, cache_dir=blocker / "sub"))
        editor.open(Post.model_validate(post_json(7, "Old text")))
        editor.choose_cover(source)

        outcome = await editor.save()

        assert outcome.dispatched == 0
        assert editor.error_message.value.startswith("Error processing image: Failed to write image")
        assert editor.is_open.value is True
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_empty_materialized_cover(self, posts_vm, backend, tmp_path) -> None:
        empty = tmp_path / "empty.jpg"
        empty.write_bytes(b"")
        editor = PostEditor(posts_vm, materialize=lambda source: empty)
        editor.open(Post.model_validate(post_json(7, "Old text")))
        editor.choose_cover(tmp_path / "any.jpg")

        outcome = await editor.save()

        assert outcome.errors == ["Invalid cover image"]
        assert backend.requests == []

    def test_close_resets(self, editor) -> None:
        editor.description.value = "Draft"
        editor.close()

        assert editor.is_open.value is False
        assert editor.description.value == ""
