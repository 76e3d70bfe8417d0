from PySide6.QtCore import QObject, QTimer
from cw.core.ticker import Ticker


# Ticker backed by a QTimer, so ticks arrive on the Qt event loop alongside button presses.
class QtTicker(Ticker):

    def __init__(self, interval_ms: int, name: str = "ticker", parent: QObject | None = None):
        super().__init__(interval_ms, name)
        self._timer = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    def start(self, callback):
        super().start(callback)
        self._timer.start()

    def stop(self):
        self._timer.stop()
        super().stop()

    def _on_timeout(self):
        if self._callback is not None:
            self._callback()
