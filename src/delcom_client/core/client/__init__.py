"""
API client package for Delcom Client.

This package provides the session holding the bearer token, the HTTP
client for the Delcom endpoints and the structured error system.
"""

from .session import Session
from .api_client import DelcomApiClient, create_api_client
from .errors import (
    DelcomError,
    PreconditionError,
    AuthenticationRequiredError,
    NoConnectivityError,
    InvalidInputError,
    InvalidFileError,
    ServerRejectedError,
    NetworkError,
    Operation,
    ERROR_TAXONOMY,
    message_for_status,
    classify_error,
    create_user_friendly_message,
)

__all__ = [
    # Session
    "Session",
    # Client
    "DelcomApiClient",
    "create_api_client",
    # Errors
    "DelcomError",
    "PreconditionError",
    "AuthenticationRequiredError",
    "NoConnectivityError",
    "InvalidInputError",
    "InvalidFileError",
    "ServerRejectedError",
    "NetworkError",
    "Operation",
    "ERROR_TAXONOMY",
    "message_for_status",
    "classify_error",
    "create_user_friendly_message",
]
