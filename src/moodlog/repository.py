"""Entry repository - in-memory reflection of the remote mood collection."""

import logging
from enum import Enum
from typing import Callable
from zoneinfo import ZoneInfoNotFoundError

from .core.entries import (
    EMPTY_PLACEHOLDER,
    ERROR_PLACEHOLDER,
    LOADING_PLACEHOLDER,
    MoodEntry,
    RenderedEntry,
    render_entry,
    validate_mood,
)
from .ports.mood_store import MoodStore, StoreError

logger = logging.getLogger(__name__)

SAVE_FAILED = "Failed to save entry. Please try again."
DELETE_FAILED = "Failed to delete entry. Please try again."


class RegionState(Enum):
    """What the rendered list region currently shows."""

    LOADING = "loading"
    EMPTY = "empty"
    ERROR = "error"
    ENTRIES = "entries"


PLACEHOLDERS = {
    RegionState.LOADING: LOADING_PLACEHOLDER,
    RegionState.EMPTY: EMPTY_PLACEHOLDER,
    RegionState.ERROR: ERROR_PLACEHOLDER,
}


class ListRegion:
    """The rendered entry list: either a placeholder or rendered entries."""

    def __init__(self):
        self.state = RegionState.LOADING
        self.items: list[RenderedEntry] = []
        self._listeners: list[Callable[["ListRegion"], None]] = []

    @property
    def placeholder(self) -> str | None:
        return PLACEHOLDERS.get(self.state)

    def subscribe(self, listener: Callable[["ListRegion"], None]) -> None:
        self._listeners.append(listener)

    def show(self, state: RegionState, items: list[RenderedEntry] | None = None) -> None:
        self.state = state
        self.items = list(items or [])
        for listener in self._listeners:
            listener(self)


class EntryRepository:
    """
    Keeps the rendered list in sync with the store.

    Every write is followed by a full refresh; the store's copy is
    authoritative, including ids and timestamps.
    """

    def __init__(
        self,
        store: MoodStore,
        notify: Callable[[str], None] | None = None,
        timezone: str = "UTC",
    ):
        self.store = store
        self.notify = notify or (lambda message: None)
        self.timezone = timezone
        self.entries: list[MoodEntry] = []
        self.region = ListRegion()
        self._latest_request = 0

    async def refresh(self) -> bool:
        """Re-fetch all entries. Returns False on failure or if superseded."""
        self._latest_request += 1
        token = self._latest_request
        self.region.show(RegionState.LOADING)

        try:
            entries = await self.store.list_ordered()
        except StoreError as e:
            if token != self._latest_request:
                logger.debug(f"Discarding stale refresh failure #{token}: {e}")
                return False
            logger.error(f"Error loading entries: {e}")
            self.region.show(RegionState.ERROR)
            return False

        if token != self._latest_request:
            logger.debug(f"Discarding stale refresh #{token} (latest is #{self._latest_request})")
            return False

        try:
            items = [render_entry(e, self.timezone) for e in entries]
        except (ZoneInfoNotFoundError, ValueError) as e:
            logger.error(f"Cannot render entries in timezone {self.timezone!r}: {e}")
            self.region.show(RegionState.ERROR)
            return False

        self.entries = entries
        if items:
            self.region.show(RegionState.ENTRIES, items)
        else:
            self.region.show(RegionState.EMPTY)
        return True

    async def add(self, mood: str | None, note: str = "") -> str | None:
        """
        Save a new entry and refresh the list.

        Raises ValidationError for an empty mood without touching the store.
        Returns the new id, or None if the store rejected the write.
        """
        mood = validate_mood(mood)
        try:
            entry_id = await self.store.insert(mood, note)
        except StoreError as e:
            logger.error(f"Error saving entry: {e}")
            self.notify(SAVE_FAILED)
            return None

        await self.refresh()
        return entry_id

    async def remove(self, entry_id: str) -> bool:
        """Delete an entry and refresh the list. Returns False on failure."""
        try:
            await self.store.delete_by_id(entry_id)
        except StoreError as e:
            logger.error(f"Error deleting entry {entry_id}: {e}")
            self.notify(DELETE_FAILED)
            return False

        await self.refresh()
        return True

    def get(self, entry_id: str) -> MoodEntry | None:
        """Look up an entry from the last successful refresh."""
        return next((e for e in self.entries if e.id == entry_id), None)
