from dataclasses import dataclass
from datetime import datetime, timedelta
from cw.common.logger import log
from cw.core.clock import SystemClock
from cw.core.errors import NotStarted
from cw.core.notify import Event, EventKind, Notifier
from cw.core.ticker import STOPWATCH_INTERVAL_MS, ManualTicker, Ticker
from cw.util import format_time

_SECOND = timedelta(seconds=1)


# A single recorded lap. displayed_elapsed is the whole seconds shown on the stopwatch when the lap was taken.
@dataclass(frozen=True)
class Lap:
    index: int
    displayed_elapsed: int

    @property
    def label(self):
        return f"Lap {self.index}"

    @property
    def formatted(self):
        return format_time(self.displayed_elapsed)


# This object handles the stopwatch. Elapsed time is derived from a reference start (now - reference_start) so
# resuming after a pause continues the accumulation rather than restarting it. Elapsed never moves backwards while
# running, even if the wall clock does.
class Stopwatch:

    def __init__(self, notifier: Notifier | None = None, ticker: Ticker | None = None, clock=None,
                 name="stopwatch"):
        self.name = name
        self.notifier = notifier or Notifier()
        self.ticker = ticker or ManualTicker(STOPWATCH_INTERVAL_MS, name)
        self.clock = clock or SystemClock()

        self.elapsed = timedelta(0)
        self.running = False
        self.reference_start: datetime | None = None
        self._laps: list[Lap] = []

    # Laps newest first, which is how they get displayed.
    @property
    def laps(self):
        return tuple(reversed(self._laps))

    # Elapsed time floored to whole seconds. The stopwatch never shows time that hasn't fully passed yet.
    @property
    def display_seconds(self):
        return self.elapsed // _SECOND

    def start(self, now=None):
        if self.running:
            return
        now = now or self.clock()
        self.reference_start = now - self.elapsed
        self.running = True
        self.ticker.start(self._on_tick)
        log.debug(f"Started stopwatch '{self.name}' with {self.elapsed.total_seconds()}s already elapsed")

    def pause(self, now=None):
        if not self.running:
            return
        now = now or self.clock()
        self.elapsed = max(self.elapsed, now - self.reference_start)
        self.running = False
        self.ticker.stop()
        log.debug(f"Paused stopwatch '{self.name}' at {self.elapsed.total_seconds()}s")

    def reset(self):
        self.elapsed = timedelta(0)
        self.reference_start = None
        self.running = False
        self._laps.clear()
        self.ticker.stop()
        log.debug(f"Reset stopwatch '{self.name}'")

    def tick(self, now=None):
        if not self.running:
            return
        now = now or self.clock()
        self.elapsed = max(self.elapsed, now - self.reference_start)
        self.notifier.notify(EventKind.UPDATED, Event(self.name, self.display_seconds))

    # Records a lap at the current elapsed time. Works while paused too, as long as something has been timed.
    def lap(self, now=None):
        if not self.running and self.elapsed == timedelta(0):
            raise NotStarted()
        if self.running:
            current = (now or self.clock()) - self.reference_start
        else:
            current = self.elapsed

        lap = Lap(index=len(self._laps) + 1, displayed_elapsed=current // _SECOND)
        self._laps.append(lap)
        log.debug(f"Recorded {lap.label} on stopwatch '{self.name}' at {lap.formatted}")
        return lap

    def _on_tick(self):
        self.tick(self.clock())
