"""Ports - interfaces/protocols for external dependencies."""

from .mood_store import MoodStore, StoreError

__all__ = [
    "MoodStore",
    "StoreError",
]
