"""
Delcom Client - A Python client for the Delcom social feed API.

This package provides session handling, profile reconciliation and post
management on top of the Delcom REST backend, plus a command-line front end.
"""

__version__ = "0.1.0"
__author__ = "Delcom Client Team"
__license__ = "Apache-2.0"

from typing import Final

# Package metadata
VERSION: Final[str] = __version__
PACKAGE_NAME: Final[str] = "delcom-client"
USER_AGENT: Final[str] = f"{PACKAGE_NAME}/{VERSION}"

# Re-export commonly used items
__all__ = [
    "__version__",
    "VERSION",
    "PACKAGE_NAME",
    "USER_AGENT",
]
