"""Pure mood entry domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

DEFAULT_MOODS = ["Happy", "Calm", "Neutral", "Sad", "Anxious", "Angry"]

MOOD_EMOJI = {
    "Happy": "😊",
    "Calm": "😌",
    "Neutral": "😐",
    "Sad": "😢",
    "Anxious": "😰",
    "Angry": "😠",
}

NO_NOTE = "No note"

LOADING_PLACEHOLDER = "Loading entries..."
EMPTY_PLACEHOLDER = "No entries yet. Start journaling!"
ERROR_PLACEHOLDER = "Error loading entries. Please refresh the page."


class ValidationError(Exception):
    """Raised when an entry is rejected before reaching the store."""

    pass


@dataclass
class MoodEntry:
    """One mood + note + timestamp record."""

    id: str
    mood: str
    note: str = ""
    timestamp: datetime | None = None

    @classmethod
    def from_document(cls, entry_id: str, data: dict, timestamp: datetime | None = None) -> "MoodEntry":
        """Create a MoodEntry from decoded document fields.

        A document whose server timestamp has not been materialized yet is
        read back as "now".
        """
        return cls(
            id=entry_id,
            mood=data.get("mood", ""),
            note=data.get("note", "") or "",
            timestamp=timestamp or datetime.now(timezone.utc),
        )


@dataclass
class RenderedEntry:
    """Display form of an entry, carrying the id for its delete control."""

    entry_id: str
    text: str
    when: str


def validate_mood(mood: str | None) -> str:
    """Return the stripped mood, or raise ValidationError if it is empty."""
    if mood is None or not mood.strip():
        raise ValidationError("Please select a mood before saving.")
    return mood.strip()


def mood_label(mood: str) -> str:
    """Button label for a mood, with its emoji when one is known."""
    emoji = MOOD_EMOJI.get(mood)
    return f"{emoji} {mood}" if emoji else mood


def format_timestamp(ts: datetime | None, tz: str = "UTC") -> str:
    """Format a timestamp in the local zone."""
    if ts is None:
        return ""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(ZoneInfo(tz)).strftime("%Y-%m-%d %H:%M")


def render_entry(entry: MoodEntry, tz: str = "UTC") -> RenderedEntry:
    """Render an entry as "<mood> - <note>", with NO_NOTE for an empty note."""
    note = entry.note if entry.note else NO_NOTE
    return RenderedEntry(
        entry_id=entry.id,
        text=f"{entry.mood} - {note}",
        when=format_timestamp(entry.timestamp, tz),
    )
