"""Frontend interfaces for multiverse exploration."""

from .cli import main

__all__ = ["main"]
