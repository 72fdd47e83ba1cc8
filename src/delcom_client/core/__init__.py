"""
Core components for Delcom Client.

This module provides the API records, the HTTP client, the session and
the connectivity checks shared by the view-models.
"""

__all__ = ["client", "connectivity", "models"]
