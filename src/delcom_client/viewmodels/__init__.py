"""
View-models for Delcom Client.

Each view-model exposes observable state and coroutine actions that check
local preconditions, call the API client and record the outcome.
"""

from .state import Observable, ActionState, ActionResult
from .auth import AuthViewModel
from .profile import ProfileViewModel
from .posts import PostsViewModel
from .post_editor import PostEditor, EditOutcome

__all__ = [
    "Observable",
    "ActionState",
    "ActionResult",
    "AuthViewModel",
    "ProfileViewModel",
    "PostsViewModel",
    "PostEditor",
    "EditOutcome",
]
