"""Single-choice mood selection state."""

from .entries import DEFAULT_MOODS


class MoodSelector:
    """Holds at most one selected mood out of a fixed set."""

    def __init__(self, moods: list[str] | None = None):
        self.moods = list(moods or DEFAULT_MOODS)
        self._selected: str | None = None

    @property
    def selected(self) -> str | None:
        return self._selected

    def select(self, mood: str) -> None:
        """Select a mood, replacing any previous selection."""
        if mood not in self.moods:
            raise ValueError(f"Unknown mood: {mood}")
        self._selected = mood

    def is_selected(self, mood: str) -> bool:
        return self._selected == mood

    def clear(self) -> None:
        self._selected = None
