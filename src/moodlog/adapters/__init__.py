"""Adapters - I/O implementations of ports."""

from .firestore import FirestoreMoodStore

__all__ = [
    "FirestoreMoodStore",
]
