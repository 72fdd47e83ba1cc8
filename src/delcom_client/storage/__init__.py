"""
Local storage for Delcom Client.

This package provides the device-local key-value store holding
client-only fields such as the phone override.
"""

from .preferences import Preferences

__all__ = ["Preferences"]
