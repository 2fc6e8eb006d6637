"""Functional core - pure mood journal logic with no I/O."""

from .entries import (
    DEFAULT_MOODS,
    EMPTY_PLACEHOLDER,
    ERROR_PLACEHOLDER,
    LOADING_PLACEHOLDER,
    NO_NOTE,
    MoodEntry,
    RenderedEntry,
    ValidationError,
    format_timestamp,
    mood_label,
    render_entry,
    validate_mood,
)
from .modal import Modal, Visibility
from .selector import MoodSelector

__all__ = [
    # Entries
    "DEFAULT_MOODS",
    "EMPTY_PLACEHOLDER",
    "ERROR_PLACEHOLDER",
    "LOADING_PLACEHOLDER",
    "NO_NOTE",
    "MoodEntry",
    "RenderedEntry",
    "ValidationError",
    "format_timestamp",
    "mood_label",
    "render_entry",
    "validate_mood",
    # Modals
    "Modal",
    "Visibility",
    # Selection
    "MoodSelector",
]
