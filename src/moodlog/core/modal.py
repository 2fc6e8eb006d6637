"""Modal dialog visibility state machine.

Hidden -> Appearing -> Shown -> Disappearing -> Hidden. The two timed hops
(Appearing -> Shown, Disappearing -> Hidden) go through a scheduler so the
machine does not depend on any UI toolkit.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

APPEAR_DELAY = 0.01
DISMISS_DELAY = 0.3


class Visibility(Enum):
    """Visibility of a modal."""

    HIDDEN = "hidden"
    APPEARING = "appearing"
    SHOWN = "shown"
    DISAPPEARING = "disappearing"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def asyncio_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule a callback on the running event loop."""
    return asyncio.get_running_loop().call_later(delay, callback)


class Modal:
    """A modal dialog with a four-state visibility cycle and an optional payload."""

    def __init__(
        self,
        name: str,
        appear_delay: float = APPEAR_DELAY,
        dismiss_delay: float = DISMISS_DELAY,
        scheduler: Scheduler | None = None,
    ):
        self.name = name
        self.appear_delay = appear_delay
        self.dismiss_delay = dismiss_delay
        self._schedule = scheduler or asyncio_scheduler
        self._visibility = Visibility.HIDDEN
        self._payload: Any = None
        self._timer: TimerHandle | None = None
        self._listeners: list[Callable[["Modal"], None]] = []

    @property
    def visibility(self) -> Visibility:
        return self._visibility

    @property
    def payload(self) -> Any:
        return self._payload

    @property
    def is_open(self) -> bool:
        """Appearing or shown."""
        return self._visibility in (Visibility.APPEARING, Visibility.SHOWN)

    def subscribe(self, listener: Callable[["Modal"], None]) -> None:
        """Register a callback fired on every visibility change."""
        self._listeners.append(listener)

    def show(self, payload: Any = None) -> bool:
        """Start showing the modal. Only valid while hidden."""
        if self._visibility is not Visibility.HIDDEN:
            logger.debug(f"Ignoring show on {self.name} modal while {self._visibility.value}")
            return False
        self._payload = payload
        self._set(Visibility.APPEARING)
        self._timer = self._schedule(self.appear_delay, self._finish_appearing)
        return True

    def dismiss(self) -> bool:
        """Start hiding the modal. No-op unless appearing or shown."""
        if not self.is_open:
            return False
        self._cancel_timer()
        self._set(Visibility.DISAPPEARING)
        self._timer = self._schedule(self.dismiss_delay, self._finish_disappearing)
        return True

    def _finish_appearing(self) -> None:
        self._timer = None
        if self._visibility is Visibility.APPEARING:
            self._set(Visibility.SHOWN)

    def _finish_disappearing(self) -> None:
        self._timer = None
        if self._visibility is Visibility.DISAPPEARING:
            self._payload = None
            self._set(Visibility.HIDDEN)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set(self, visibility: Visibility) -> None:
        self._visibility = visibility
        for listener in self._listeners:
            listener(self)
