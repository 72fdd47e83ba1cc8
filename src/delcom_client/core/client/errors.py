"""
Structured error system for the Delcom API client.

Failures fall in three groups: local precondition failures (no request is
made), requests the server rejected with an HTTP status, and transport
failures. Status codes are turned into user-facing text through a single
table keyed by operation and status code.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional
import logging

import httpx

logger = logging.getLogger(__name__)


AUTH_REQUIRED_MESSAGE = "Authentication required. Please log in again."
NO_CONNECTIVITY_MESSAGE = "No internet connection. Please check your network."
AUTH_FAILED_MESSAGE = "Authentication failed. Please log in again."
POST_NOT_FOUND_MESSAGE = "Post not found."
FILE_TOO_LARGE_MESSAGE = "Image too large. Please choose a smaller file."
RATE_LIMITED_MESSAGE = "Too many requests. Try again later."


class DelcomError(Exception):
    """Base exception for all Delcom client errors."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "message": self.message,
            "status": self.status,
            "code": self.code,
            "details": self.details,
            "type": self.__class__.__name__
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.status:
            parts.append(f"(Status: {self.status})")
        if self.code:
            parts.append(f"(Code: {self.code})")
        return " ".join(parts)


class PreconditionError(DelcomError):
    """A local check failed before any request was issued."""

    def __init__(self, message: str, code: str = "PRECONDITION_FAILED", **kwargs):
        super().__init__(message, code=code, **kwargs)


class AuthenticationRequiredError(PreconditionError):
    """No bearer token is held by the session."""

    def __init__(self, message: str = AUTH_REQUIRED_MESSAGE, **kwargs):
        super().__init__(message, code="AUTHENTICATION_REQUIRED", **kwargs)


class NoConnectivityError(PreconditionError):
    """The platform reports no usable network."""

    def __init__(self, message: str = NO_CONNECTIVITY_MESSAGE, **kwargs):
        super().__init__(message, code="NO_CONNECTIVITY", **kwargs)


class InvalidInputError(PreconditionError):
    """A user-supplied field failed validation."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="INVALID_INPUT", **kwargs)
        if field:
            self.details["field"] = field


class InvalidFileError(PreconditionError):
    """An upload source is missing, empty or not a decodable image."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, code="INVALID_FILE", **kwargs)
        if path:
            self.details["path"] = path


class ServerRejectedError(DelcomError):
    """The backend answered with a non-success status code."""

    def __init__(
        self,
        message: str = "Request rejected",
        status: Optional[int] = None,
        body: str = "",
        reason: str = "",
        **kwargs
    ):
        super().__init__(message, status=status, code="SERVER_REJECTED", **kwargs)
        self.body = body
        self.reason = reason
        self.details["body"] = body
        self.details["reason"] = reason


class NetworkError(DelcomError):
    """Transport failure: DNS, TLS, refused connection, timeout."""

    def __init__(self, detail: str = "", **kwargs):
        super().__init__(f"Network error: {detail}", code="NETWORK_ERROR", **kwargs)
        self.details["detail"] = detail


class Operation(Enum):
    """Client operations that have their own error wording."""
    LOAD_PROFILE = "load_profile"
    UPDATE_PROFILE = "update_profile"
    UPDATE_PHOTO = "update_photo"
    LOAD_POSTS = "load_posts"
    GET_POST = "get_post"
    DELETE_POST = "delete_post"
    ADD_POST = "add_post"
    CHANGE_COVER = "change_cover"
    UPDATE_POST = "update_post"


@dataclass(frozen=True)
class OperationMessages:
    """Wording for one operation.

    `failure_label` feeds the fallback "Failed to <label>: <code> - <detail>".
    `detail_from_body` selects the response body as the fallback detail
    instead of the HTTP reason phrase.
    """
    failure_label: str
    forbidden_action: Optional[str] = None
    bad_request: Optional[str] = None
    bad_request_email: Optional[str] = None
    not_found: Optional[str] = None
    conflict: Optional[str] = None
    accepts_upload: bool = False
    detail_from_body: bool = False


INVALID_IMAGE_MESSAGE = "Invalid image format or data. Please try another image."

ERROR_TAXONOMY: Dict[Operation, OperationMessages] = {
    Operation.LOAD_PROFILE: OperationMessages(failure_label="load profile"),
    Operation.UPDATE_PROFILE: OperationMessages(
        failure_label="update profile",
        forbidden_action="update this profile",
        bad_request="Invalid data. Please check your input.",
        bad_request_email="Invalid email format. Please use a valid email (e.g., user@example.com).",
        conflict="Email already in use. Please use a different email.",
    ),
    Operation.UPDATE_PHOTO: OperationMessages(
        failure_label="update photo",
        forbidden_action="update this photo",
        bad_request=INVALID_IMAGE_MESSAGE,
        accepts_upload=True,
    ),
    Operation.LOAD_POSTS: OperationMessages(failure_label="load posts"),
    Operation.GET_POST: OperationMessages(
        failure_label="load post",
        not_found=POST_NOT_FOUND_MESSAGE,
    ),
    Operation.DELETE_POST: OperationMessages(
        failure_label="delete post",
        forbidden_action="delete this post",
        not_found=POST_NOT_FOUND_MESSAGE,
        detail_from_body=True,
    ),
    Operation.ADD_POST: OperationMessages(
        failure_label="add post",
        forbidden_action="create posts",
        bad_request="Invalid data. Please check your image or description.",
        accepts_upload=True,
        detail_from_body=True,
    ),
    Operation.CHANGE_COVER: OperationMessages(
        failure_label="change cover",
        forbidden_action="change this cover",
        bad_request=INVALID_IMAGE_MESSAGE,
        not_found=POST_NOT_FOUND_MESSAGE,
        accepts_upload=True,
        detail_from_body=True,
    ),
    Operation.UPDATE_POST: OperationMessages(
        failure_label="update post",
        forbidden_action="update this post",
        bad_request="Invalid description. Please check your input.",
        not_found=POST_NOT_FOUND_MESSAGE,
        detail_from_body=True,
    ),
}


def message_for_status(
    operation: Operation,
    status: int,
    body: str = "",
    reason: str = ""
) -> str:
    """
    Map an HTTP status to the user-facing message for an operation.

    Args:
        operation: The operation that was rejected
        status: HTTP status code
        body: Raw response body, used by some operations as detail
        reason: HTTP reason phrase

    Returns:
        Message suitable for display
    """
    wording = ERROR_TAXONOMY[operation]

    if status == 400 and wording.bad_request:
        if wording.bad_request_email and "email" in body.lower():
            return wording.bad_request_email
        return wording.bad_request
    if status == 401:
        return AUTH_FAILED_MESSAGE
    if status == 403 and wording.forbidden_action:
        return f"You are not authorized to {wording.forbidden_action}."
    if status == 404 and wording.not_found:
        return wording.not_found
    if status == 409 and wording.conflict:
        return wording.conflict
    if status == 413 and wording.accepts_upload:
        return FILE_TOO_LARGE_MESSAGE
    if status == 429:
        return RATE_LIMITED_MESSAGE

    if wording.detail_from_body:
        detail = body or "No details"
    else:
        detail = reason
    return f"Failed to {wording.failure_label}: {status} - {detail}"


def classify_error(error: Exception) -> DelcomError:
    """
    Classify a generic exception into a structured DelcomError.

    Args:
        error: The original exception

    Returns:
        Classified DelcomError instance
    """
    if isinstance(error, DelcomError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        return ServerRejectedError(
            f"HTTP {response.status_code} from {error.request.url}",
            status=response.status_code,
            body=response.text,
            reason=response.reason_phrase,
            original_error=error,
        )

    if isinstance(error, httpx.TransportError):
        return NetworkError(str(error) or type(error).__name__, original_error=error)

    return DelcomError(str(error), original_error=error)


def create_user_friendly_message(error: Exception, operation: Optional[Operation] = None) -> str:
    """
    Create a user-friendly error message.

    Args:
        error: The error to convert
        operation: Operation that failed, used to word server rejections

    Returns:
        User-friendly error message
    """
    error = classify_error(error)

    if isinstance(error, ServerRejectedError) and operation is not None and error.status:
        return message_for_status(operation, error.status, error.body, error.reason)

    return error.message
