from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtWidgets import QSystemTrayIcon
from cw.common.logger import log
from cw.core.notify import Event, EventKind, Notifier, PermissionGate

POPUP_TIMEOUT_MS = 10000


class NotifierSignals(QObject):
    updated = Signal(str, object)
    transition = Signal(object, object)
    message = Signal(str)
    labels = Signal(object)


# Notifier that forwards engine events to the window through Qt signals, and shows OS pop-ups through the tray icon.
# Pop-ups count as permitted when the platform has a tray that supports balloon messages.
class QtNotifier(Notifier):

    def __init__(self, tray: QSystemTrayIcon | None = None):
        self.tray = tray
        self.signals = NotifierSignals()
        super().__init__(PermissionGate(self._request_permission))

    def notify(self, kind: EventKind, payload: Event):
        super().notify(kind, payload)
        if kind is not EventKind.UPDATED:
            self.signals.transition.emit(kind, payload)

    def _request_permission(self, resolve):
        # Answered from the event loop so the caller never waits on it
        QTimer.singleShot(0, lambda: resolve(self._popups_supported()))

    def _popups_supported(self):
        return (self.tray is not None
                and QSystemTrayIcon.isSystemTrayAvailable()
                and QSystemTrayIcon.supportsMessages())

    def on_update(self, event: Event):
        self.signals.updated.emit(event.source, event.value)

    def message(self, text):
        super().message(text)
        self.signals.message.emit(text)

    def popup(self, title, body):
        if self.tray is None:
            return
        log.debug(f"Showing tray popup '{title}'")
        self.tray.showMessage(title, body, QSystemTrayIcon.Information, POPUP_TIMEOUT_MS)

    def on_labels(self, labels):
        self.signals.labels.emit(labels)
