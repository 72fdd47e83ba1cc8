"""
Command-line interface for Delcom Client.

This module provides the main CLI application built with Typer and Rich.
"""

__all__ = ["app"]
