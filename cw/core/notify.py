"""Notifier sink and notification permission state.

Engines call ``Notifier.notify(kind, payload)`` synchronously on every state
transition. The base class turns completions and alarm fires into a
transient message, plus an OS pop-up when permission has been granted.
Rendering layers subclass it and override the hooks.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any
from cw.common.logger import log

PERMISSION_DENIED_MESSAGE = (
    "Notification permission was denied. Please enable notifications in your system settings."
)


class EventKind(Enum):
    UPDATED = "updated"
    COMPLETED = "completed"
    FIRED = "fired"


@dataclass(frozen=True)
class Event:
    source: str
    value: Any = None


class NotificationPermission(Enum):
    UNKNOWN = "unknown"
    GRANTED = "granted"
    DENIED = "denied"


class PermissionGate:
    """Tracks whether OS pop-ups may be shown.

    ``requester`` is called at most once per session with a ``resolve``
    callback and may answer later (or never). Nothing waits on it: until
    it answers, the state stays UNKNOWN and pop-ups are simply skipped.
    """

    def __init__(self, requester: Callable[[Callable[[bool], None]], None] | None = None):
        self.state = NotificationPermission.UNKNOWN
        self._requester = requester
        self._requested = False
        self._listeners: list[Callable[[NotificationPermission], None]] = []

    @property
    def granted(self):
        return self.state is NotificationPermission.GRANTED

    def add_listener(self, listener: Callable[[NotificationPermission], None]):
        self._listeners.append(listener)

    def request(self):
        if self._requested or self._requester is None:
            return
        self._requested = True
        log.debug("Requesting notification permission")
        try:
            self._requester(self.resolve)
        except Exception:
            log.warning("Notification permission request failed, pop-ups unavailable", exc_info=True)
            self.resolve(False)

    def resolve(self, granted: bool):
        new_state = NotificationPermission.GRANTED if granted else NotificationPermission.DENIED
        if new_state is self.state:
            return
        self.state = new_state
        log.info(f"Notification permission resolved as '{new_state.value}'")
        for listener in self._listeners:
            listener(new_state)


class Notifier:

    def __init__(self, permission: PermissionGate | None = None):
        self.permission = permission or PermissionGate()
        self.permission.add_listener(self._on_permission)

    def notify(self, kind: EventKind, payload: Event):
        if kind is EventKind.UPDATED:
            self.on_update(payload)
            return

        log.info(f"{payload.source} event '{kind.value}'")
        text, title, body = announcement(kind, payload)
        self.message(text)
        if self.permission.granted:
            self.popup(title, body)

    # Rendering hooks. The defaults only log, subclasses draw.
    def on_update(self, event: Event):
        pass

    def message(self, text: str):
        log.info(f"Message: {text}")

    def popup(self, title: str, body: str):
        log.debug(f"Popup: {title} - {body}")

    def on_labels(self, labels):
        pass

    def _on_permission(self, state: NotificationPermission):
        if state is NotificationPermission.DENIED:
            self.message(PERMISSION_DENIED_MESSAGE)


# Returns the (message, popup title, popup body) triple announcing a completion or an alarm.
def announcement(kind: EventKind, payload: Event):
    if kind is EventKind.COMPLETED:
        return "Timer finished!", "Timer Finished!", "Your countdown has ended."
    if kind is EventKind.FIRED:
        time_of_day = payload.value.time_of_day
        return f"Alarm: {time_of_day}", "Alarm!", f"It's time for your {time_of_day} alarm."
    raise ValueError(f"No announcement for event kind '{kind.value}'")
