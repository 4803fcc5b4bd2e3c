"""Command-line interface for gitcast.

This module provides the terminal front end for GitCast.
"""

from .main import main

__all__ = ["main"]
