"""Mood journal page - form, entry list and modals wired together.

Front ends (Telegram, CLI) feed user events in and read the page state
back out; nothing here knows how it is displayed.
"""

import logging

from .config import Config
from .confirmation import ConfirmationWorkflow
from .core.entries import ValidationError
from .core.modal import Scheduler
from .core.selector import MoodSelector
from .ports.mood_store import MoodStore
from .repository import EntryRepository

logger = logging.getLogger(__name__)


class MoodJournalPage:
    """A single journaling page: one form, one list, two modals."""

    def __init__(
        self,
        repository: EntryRepository,
        selector: MoodSelector,
        workflow: ConfirmationWorkflow,
        alerts: list[str] | None = None,
    ):
        self.repository = repository
        self.selector = selector
        self.workflow = workflow
        self.alerts = alerts if alerts is not None else []
        self.note = ""
        self.saving = False

    async def load(self) -> None:
        """Initial load of the entry list."""
        await self.repository.refresh()

    def select_mood(self, mood: str) -> None:
        self.selector.select(mood)

    def set_note(self, note: str) -> None:
        self.note = note

    async def submit(self, note: str | None = None) -> bool:
        """
        Submit the form. Returns True if an entry was saved.

        The note and mood selection are cleared only once the store has
        accepted the entry; a failed save leaves the form as it was.
        """
        if self.saving:
            logger.debug("Ignoring submit while a save is in progress")
            return False
        if note is not None:
            self.note = note

        self.saving = True
        try:
            entry_id = await self.repository.add(self.selector.selected, self.note.strip())
        except ValidationError:
            self.workflow.warn_mood_required()
            return False
        finally:
            self.saving = False

        if entry_id is None:
            return False

        self.note = ""
        self.selector.clear()
        return True

    def request_delete(self, entry_id: str) -> bool:
        return self.workflow.request_delete(entry_id)

    async def handle_click(self, target: str) -> bool:
        """
        Dispatch a click on any page control.

        Targets: ``mood:<mood>``, ``save``, ``delete:<id>``,
        ``confirm-delete``, ``cancel-delete``, ``ok-mood``,
        ``backdrop:<modal>``.
        """
        action, _, arg = target.partition(":")
        match action:
            case "mood":
                try:
                    self.select_mood(arg)
                except ValueError:
                    logger.warning(f"Ignoring click on unknown mood: {arg!r}")
                    return False
                return True
            case "save":
                return await self.submit()
            case "delete":
                if not arg:
                    return False
                return self.request_delete(arg)
            case "confirm-delete":
                return await self.workflow.confirm_delete()
            case "cancel-delete":
                return self.workflow.cancel_delete()
            case "ok-mood":
                return self.workflow.acknowledge_mood_warning()
            case "backdrop":
                return self.workflow.click_outside(arg)

        logger.warning(f"Unhandled click target: {target!r}")
        return False

    def handle_key(self, key: str) -> bool:
        return self.workflow.press_key(key)

    def drain_alerts(self) -> list[str]:
        """Return and clear alerts queued for the user."""
        alerts, self.alerts[:] = list(self.alerts), []
        return alerts


def create_page(
    store: MoodStore,
    config: Config | None = None,
    scheduler: Scheduler | None = None,
) -> MoodJournalPage:
    """Build a page around a store, with the store injected into the repository."""
    config = config or Config()
    alerts: list[str] = []
    repository = EntryRepository(store, notify=alerts.append, timezone=config.timezone)
    workflow = ConfirmationWorkflow(
        repository.remove,
        appear_delay=config.modal_appear_delay,
        dismiss_delay=config.modal_dismiss_delay,
        scheduler=scheduler,
    )
    return MoodJournalPage(repository, MoodSelector(config.moods), workflow, alerts=alerts)
