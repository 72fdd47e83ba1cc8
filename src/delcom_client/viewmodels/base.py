"""
Base class for view-models.

A view-model owns observable state and exposes coroutine actions. Each
action checks its local preconditions, issues at most one request, and
converts any `DelcomError` into an error message. Failures never
propagate out of an action, so the view-model stays usable for a retry.
"""

from contextlib import contextmanager
from typing import Iterator, Optional
import logging

from ..core.client import DelcomApiClient, Session
from ..core.client.errors import (
    DelcomError,
    InvalidInputError,
    NoConnectivityError,
    Operation,
    create_user_friendly_message,
)
from ..core.connectivity import AlwaysOnline, ConnectivityMonitor
from .state import ActionResult, ActionState, Observable

logger = logging.getLogger(__name__)


class BaseViewModel:
    """Shared state and plumbing for the view-models."""

    def __init__(
        self,
        client: DelcomApiClient,
        session: Session,
        connectivity: Optional[ConnectivityMonitor] = None,
    ):
        self.client = client
        self.session = session
        self.connectivity = connectivity or AlwaysOnline()

        self.state: Observable[ActionState] = Observable(ActionState.IDLE)
        self.is_loading: Observable[bool] = Observable(False)
        self.error_message: Observable[Optional[str]] = Observable(None)
        self.success_message: Observable[Optional[str]] = Observable(None)
        self._in_flight = 0

    async def _ensure_ready(self) -> None:
        """Token first, then connectivity."""
        self.session.require_token()
        if not await self.connectivity.is_available():
            raise NoConnectivityError()

    @staticmethod
    def _require_text(value: str, message: str, field: str) -> None:
        if not value or not value.strip():
            raise InvalidInputError(message, field=field)

    @contextmanager
    def _loading(self) -> Iterator[None]:
        """Raise the loading flag while at least one request is in flight."""
        self._in_flight += 1
        self.is_loading.value = True
        self.state.value = ActionState.LOADING
        try:
            yield
        finally:
            self._in_flight -= 1
            self.is_loading.value = self._in_flight > 0

    def _succeed(self, value=None, message: Optional[str] = None) -> ActionResult:
        if message:
            self.success_message.value = message
        self.state.value = ActionState.SUCCESS
        return ActionResult.success(value, message)

    def _fail(self, error: DelcomError, operation: Optional[Operation] = None) -> ActionResult:
        message = create_user_friendly_message(error, operation)
        self.error_message.value = message
        self.state.value = ActionState.FAILURE
        label = operation.value if operation else type(self).__name__
        logger.error(f"{label} failed: {error}")
        return ActionResult.failure(message)
