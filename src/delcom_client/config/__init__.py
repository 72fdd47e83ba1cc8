"""
Configuration package for Delcom Client.

This package contains settings management and .env file discovery.
"""

from .settings import DelcomSettings, get_settings
from .env_loader import EnvFileLoader

__all__ = ["DelcomSettings", "get_settings", "EnvFileLoader"]
