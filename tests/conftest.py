"""Shared fixtures: an in-memory store and a hand-cranked timer."""

from datetime import datetime, timedelta, timezone

import pytest

from moodlog.core.entries import MoodEntry
from moodlog.ports.mood_store import StoreError


class FakeStore:
    """In-memory MoodStore. Each insert is one minute newer than the last."""

    def __init__(self, entries: list[MoodEntry] | None = None):
        self.entries = list(entries or [])
        self.base_time = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)
        self.inserted: list[dict] = []
        self.deleted: list[str] = []
        self.list_calls = 0
        self.fail_insert = False
        self.fail_list = False
        self.fail_delete = False
        self._next_id = 1

    async def insert(self, mood: str, note: str) -> str:
        if self.fail_insert:
            raise StoreError("permission denied")
        self.inserted.append({"mood": mood, "note": note})
        entry_id = f"id{self._next_id}"
        ts = self.base_time + timedelta(minutes=self._next_id)
        self._next_id += 1
        self.entries.append(MoodEntry(id=entry_id, mood=mood, note=note, timestamp=ts))
        return entry_id

    async def list_ordered(self) -> list[MoodEntry]:
        self.list_calls += 1
        if self.fail_list:
            raise StoreError("unavailable")
        return sorted(self.entries, key=lambda e: e.timestamp, reverse=True)

    async def delete_by_id(self, entry_id: str) -> None:
        if self.fail_delete:
            raise StoreError("unavailable")
        self.deleted.append(entry_id)
        match = [e for e in self.entries if e.id == entry_id]
        if not match:
            raise StoreError(f"No document to delete: {entry_id}")
        self.entries.remove(match[0])


class Timer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose timers only fire when the test says so."""

    def __init__(self):
        self.timers: list[Timer] = []

    def __call__(self, delay, callback):
        timer = Timer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[Timer]:
        return [t for t in self.timers if not t.cancelled]

    def run_all(self):
        """Fire pending timers until none are left."""
        while self.pending:
            timer = self.pending[0]
            self.timers.remove(timer)
            timer.callback()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def scheduler():
    return ManualScheduler()
