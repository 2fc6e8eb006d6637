"""Mood entry store interface."""

from typing import Protocol

from moodlog.core.entries import MoodEntry


class StoreError(Exception):
    """Raised when the remote store fails (network, permission, validation)."""

    pass


class MoodStore(Protocol):
    """Interface for persisting mood entries in a remote document store."""

    async def insert(self, mood: str, note: str) -> str:
        """Create an entry with a server-assigned timestamp. Returns its id."""
        ...

    async def list_ordered(self) -> list[MoodEntry]:
        """Fetch all entries, newest first."""
        ...

    async def delete_by_id(self, entry_id: str) -> None:
        """Delete an entry. Fails if it does not exist."""
        ...
