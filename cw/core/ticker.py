from collections.abc import Callable
from cw.common.logger import log

# Recommended tick intervals in milliseconds.
CLOCK_INTERVAL_MS = 1000
COUNTDOWN_INTERVAL_MS = 500
STOPWATCH_INTERVAL_MS = 50


# Base tick scheduler injected into each engine. An engine calls start() when it begins running and stop() when it
# pauses, resets or finishes, so idle engines cause no wakeups. Subclasses decide where ticks actually come from.
class Ticker:

    def __init__(self, interval_ms: int, name: str = "ticker"):
        self.interval_ms = interval_ms
        self.name = name
        self._callback: Callable[[], None] | None = None

    @property
    def is_active(self):
        return self._callback is not None

    def start(self, callback: Callable[[], None]):
        self._callback = callback
        log.debug(f"Started ticker '{self.name}' every {self.interval_ms}ms")

    def stop(self):
        if self._callback is not None:
            self._callback = None
            log.debug(f"Stopped ticker '{self.name}'")


# Ticker that only fires when told to. Used headless and in tests, where the caller controls both when a tick happens
# and what `now` the engine sees.
class ManualTicker(Ticker):

    # Invokes the registered callback once. Returns False if the ticker is stopped, meaning nothing ran.
    def fire(self):
        if self._callback is None:
            return False
        self._callback()
        return True
