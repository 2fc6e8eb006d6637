"""Confirmation workflow - the delete-confirm and mood-warning modals."""

import logging
from typing import Awaitable, Callable

from .core.modal import APPEAR_DELAY, DISMISS_DELAY, Modal, Scheduler, Visibility

logger = logging.getLogger(__name__)

DELETE_MODAL = "delete"
MOOD_MODAL = "mood"


class ConfirmationWorkflow:
    """
    Two modals gating destructive and invalid actions.

    The delete modal carries the target entry id as its payload. At most
    one modal is open at a time: opening one dismisses the other.
    """

    def __init__(
        self,
        remove: Callable[[str], Awaitable[bool]],
        appear_delay: float = APPEAR_DELAY,
        dismiss_delay: float = DISMISS_DELAY,
        scheduler: Scheduler | None = None,
    ):
        self._remove = remove
        self.delete_modal = Modal(DELETE_MODAL, appear_delay, dismiss_delay, scheduler)
        self.mood_modal = Modal(MOOD_MODAL, appear_delay, dismiss_delay, scheduler)
        self._confirming = False

    @property
    def modals(self) -> dict[str, Modal]:
        return {DELETE_MODAL: self.delete_modal, MOOD_MODAL: self.mood_modal}

    @property
    def active(self) -> Modal | None:
        """The open modal, if any."""
        return next((m for m in self.modals.values() if m.is_open), None)

    def _open(self, modal: Modal, payload=None) -> bool:
        for other in self.modals.values():
            if other is not modal:
                other.dismiss()
        return modal.show(payload)

    def request_delete(self, entry_id: str) -> bool:
        """Ask for confirmation before deleting an entry."""
        return self._open(self.delete_modal, entry_id)

    async def confirm_delete(self) -> bool:
        """
        Delete the entry the modal was opened for.

        Only valid while the delete modal is shown. The modal is dismissed
        whether or not the delete succeeds.
        """
        modal = self.delete_modal
        if modal.visibility is not Visibility.SHOWN or modal.payload is None:
            logger.debug("Ignoring delete confirmation: modal not shown")
            return False
        if self._confirming:
            logger.debug("Ignoring delete confirmation: already in progress")
            return False

        self._confirming = True
        try:
            return await self._remove(modal.payload)
        finally:
            self._confirming = False
            modal.dismiss()

    def cancel_delete(self) -> bool:
        return self.delete_modal.dismiss()

    def warn_mood_required(self) -> bool:
        """Tell the user to pick a mood before saving."""
        return self._open(self.mood_modal)

    def acknowledge_mood_warning(self) -> bool:
        return self.mood_modal.dismiss()

    def click_outside(self, name: str) -> bool:
        """A click on a modal's backdrop, outside its content area."""
        modal = self.modals.get(name)
        if modal is None:
            logger.warning(f"Click outside unknown modal: {name}")
            return False
        return modal.dismiss()

    def press_key(self, key: str) -> bool:
        """Escape dismisses whichever modal is open."""
        if key != "Escape":
            return False
        modal = self.active
        if modal is None:
            return False
        return modal.dismiss()
