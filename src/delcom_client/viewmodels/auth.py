"""Login and registration."""

from typing import Optional
import logging

from ..core.client import DelcomApiClient, Session
from ..core.client.errors import DelcomError, InvalidInputError, ServerRejectedError
from ..core.connectivity import ConnectivityMonitor
from ..core.models import LoginRequest, RegisterRequest
from .base import BaseViewModel
from .state import ActionResult

logger = logging.getLogger(__name__)

LOGIN_SUCCESS_MESSAGE = "Login successful"
REGISTER_FAILED_MESSAGE = "Registration failed. Check inputs."


class AuthViewModel(BaseViewModel):
    """Obtains the bearer token and stores it in the session."""

    def __init__(
        self,
        client: DelcomApiClient,
        session: Session,
        connectivity: Optional[ConnectivityMonitor] = None,
    ):
        super().__init__(client, session, connectivity)

    def _fail_with(self, message: str) -> ActionResult:
        return self._fail(DelcomError(message))

    async def login(self, email: str, password: str) -> ActionResult:
        if not email or not password:
            return self._fail(InvalidInputError("Please fill all fields"))

        try:
            with self._loading():
                response = await self.client.login(LoginRequest(email=email, password=password))
        except ServerRejectedError as e:
            logger.debug(f"Login rejected with status {e.status}")
            return self._fail_with("Invalid credentials")
        except DelcomError as e:
            return self._fail(e)

        if not response.success or response.data is None:
            return self._fail_with(response.message or "Login failed")

        self.session.token = response.data.token
        logger.info(f"Logged in as {response.data.user.email}")
        return self._succeed(response.data.user, LOGIN_SUCCESS_MESSAGE)

    async def register(self, name: str, email: str, password: str) -> ActionResult:
        if not name or not email or not password:
            return self._fail(InvalidInputError("All fields required"))

        try:
            with self._loading():
                response = await self.client.register(
                    RegisterRequest(name=name, email=email, password=password)
                )
        except ServerRejectedError as e:
            logger.debug(f"Registration rejected with status {e.status}")
            return self._fail_with(REGISTER_FAILED_MESSAGE)
        except DelcomError as e:
            return self._fail_with(f"Error: {e.details.get('detail', e.message)}")

        if not response.success:
            return self._fail_with(response.message or REGISTER_FAILED_MESSAGE)

        return self._succeed(None, response.message or "Registration successful")

    def logout(self) -> None:
        self.session.clear()
