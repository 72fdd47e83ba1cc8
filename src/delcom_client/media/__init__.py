"""
Media helpers for Delcom Client.

This package prepares picked images for upload.
"""

from .image_file import materialize_image, is_valid_upload

__all__ = ["materialize_image", "is_valid_upload"]
