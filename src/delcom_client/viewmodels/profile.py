"""
Profile view-model.

The server profile never carries an authoritative phone number. After every
fetch the phone stored in local preferences replaces whatever the server
sent, and saving the profile writes the phone locally only.
"""

from pathlib import Path
from typing import Optional, Union
import logging

from ..core.client import DelcomApiClient, Session
from ..core.client.errors import (
    DelcomError,
    InvalidFileError,
    InvalidInputError,
    Operation,
)
from ..core.connectivity import ConnectivityMonitor
from ..core.models import ProfileUpdateRequest, ProfileUser
from ..media.image_file import is_valid_upload
from ..storage.preferences import Preferences
from .base import BaseViewModel
from .state import ActionResult, Observable
from .validation import is_valid_email, is_valid_phone, normalize_phone

logger = logging.getLogger(__name__)

PHONE_KEY = "phone"
PROFILE_UPDATED_MESSAGE = "Profile updated successfully"
PHOTO_UPDATED_MESSAGE = "Photo updated successfully"


class ProfileViewModel(BaseViewModel):
    """Loads, edits and saves the signed-in user's profile."""

    def __init__(
        self,
        client: DelcomApiClient,
        session: Session,
        preferences: Preferences,
        connectivity: Optional[ConnectivityMonitor] = None,
    ):
        super().__init__(client, session, connectivity)
        self.preferences = preferences

        self.user: Observable[Optional[ProfileUser]] = Observable(None)
        self.is_edit_mode: Observable[bool] = Observable(False)
        self.temp_name: Observable[str] = Observable("")
        self.temp_email: Observable[str] = Observable("")
        self.temp_phone: Observable[str] = Observable("")

    @property
    def local_phone(self) -> Optional[str]:
        return self.preferences.get_string(PHONE_KEY)

    def merge_local_fields(self, server_user: ProfileUser) -> ProfileUser:
        """Overlay device-local fields onto a server profile."""
        return server_user.model_copy(update={"phone": self.local_phone})

    async def load_profile(self) -> ActionResult:
        logger.debug("Loading profile")
        try:
            await self._ensure_ready()
            with self._loading():
                response = await self.client.get_profile()
        except DelcomError as e:
            return self._fail(e, Operation.LOAD_PROFILE)

        server_user = response.data.user if response.data else None
        self.user.value = self.merge_local_fields(server_user) if server_user else None
        if self.user.value:
            logger.debug(
                f"Profile loaded: name={self.user.value.name}, "
                f"email={self.user.value.email}, phone={self.user.value.phone}"
            )
        return self._succeed(self.user.value)

    def enter_edit_mode(self) -> None:
        user = self.user.value
        if user:
            self.temp_name.value = user.name
            self.temp_email.value = user.email
            self.temp_phone.value = user.phone or ""
        self.is_edit_mode.value = True

    def cancel_edit(self) -> None:
        self.is_edit_mode.value = False
        self.temp_name.value = ""
        self.temp_email.value = ""
        self.temp_phone.value = ""

    def _validate_edit(self) -> None:
        if not self.temp_name.value.strip():
            raise InvalidInputError("Name cannot be empty", field="name")

        if not is_valid_email(self.temp_email.value):
            raise InvalidInputError("Please enter a valid email", field="email")

        if self.temp_phone.value and not is_valid_phone(self.temp_phone.value):
            raise InvalidInputError(
                "Please enter a valid phone number (e.g., +6281234567890)",
                field="phone",
            )

    def _store_phone(self) -> Optional[str]:
        normalized = normalize_phone(self.temp_phone.value)
        if normalized is not None:
            self.preferences.put_string(PHONE_KEY, normalized)
        else:
            self.preferences.remove(PHONE_KEY)
        return normalized

    def _identity_unchanged(self) -> bool:
        user = self.user.value
        return (
            user is not None
            and user.email == self.temp_email.value
            and user.name == self.temp_name.value
        )

    async def update_profile(self) -> ActionResult:
        """
        Save the edit buffers.

        The phone is always written locally. A remote update is only issued
        when the name or email differ from the displayed profile.
        """
        try:
            self._validate_edit()
            await self._ensure_ready()
        except DelcomError as e:
            return self._fail(e)

        if self._identity_unchanged():
            phone = self._store_phone()
            logger.debug(f"No changes to name or email, only phone updated locally: {phone}")
            self.is_edit_mode.value = False
            result = self._succeed(message=PROFILE_UPDATED_MESSAGE)
            await self.load_profile()
            return result

        phone = self._store_phone()
        request = ProfileUpdateRequest(name=self.temp_name.value, email=self.temp_email.value)
        logger.debug(f"Updating profile: name={request.name}, email={request.email}, local phone={phone}")

        try:
            with self._loading():
                await self.client.update_profile(request)
        except DelcomError as e:
            return self._fail(e, Operation.UPDATE_PROFILE)

        self.is_edit_mode.value = False
        result = self._succeed(message=PROFILE_UPDATED_MESSAGE)
        await self.load_profile()
        return result

    async def update_profile_photo(self, photo: Union[str, Path]) -> ActionResult:
        photo = Path(photo)
        try:
            if not is_valid_upload(photo):
                raise InvalidFileError(
                    "Invalid file: File is empty or does not exist",
                    path=str(photo),
                )
            await self._ensure_ready()
            logger.debug(f"Uploading file: {photo}, size: {photo.stat().st_size} bytes")
            with self._loading():
                await self.client.update_profile_photo(photo)
        except DelcomError as e:
            return self._fail(e, Operation.UPDATE_PHOTO)

        result = self._succeed(message=PHOTO_UPDATED_MESSAGE)
        await self.load_profile()
        return result
