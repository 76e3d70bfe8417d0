from datetime import datetime, timedelta
from cw.common.logger import log
from cw.core.clock import SystemClock
from cw.core.errors import InvalidDuration
from cw.core.notify import Event, EventKind, Notifier
from cw.core.ticker import COUNTDOWN_INTERVAL_MS, ManualTicker, Ticker

_MICROSECOND = timedelta(microseconds=1)
_US_PER_SECOND = 1_000_000


# Whole seconds left until the deadline, rounded up so the last second still reads 00:00:01. Done on integer
# microseconds so there's no float rounding at the boundary.
def _ceil_seconds(remaining: timedelta):
    remaining_us = remaining // _MICROSECOND
    return -(-remaining_us // _US_PER_SECOND)


# This object handles a single countdown. Remaining time is always derived from an absolute deadline instead of being
# decremented per tick, so late or missed ticks never make it drift.
class Countdown:

    def __init__(self, notifier: Notifier | None = None, ticker: Ticker | None = None, clock=None,
                 name="countdown"):
        self.name = name
        self.notifier = notifier or Notifier()
        self.ticker = ticker or ManualTicker(COUNTDOWN_INTERVAL_MS, name)
        self.clock = clock or SystemClock()

        self.remaining_seconds = 0
        self.running = False
        self.deadline: datetime | None = None

    # Starts the countdown. A paused remainder always takes precedence over duration_seconds, reset first to start
    # over with a new duration.
    def start(self, duration_seconds=None, now=None):
        if self.running:
            return
        now = now or self.clock()

        resuming = self.remaining_seconds > 0
        seconds = self.remaining_seconds if resuming else int(duration_seconds or 0)
        if seconds <= 0:
            raise InvalidDuration()

        self.deadline = now + timedelta(seconds=seconds)
        self.running = True
        self.ticker.start(self._on_tick)
        log.debug(f"{'Resumed' if resuming else 'Started'} countdown '{self.name}' for {seconds}s, deadline {self.deadline}")
        self.tick(now)

    def pause(self, now=None):
        if not self.running:
            return
        now = now or self.clock()
        self.remaining_seconds = max(0, _ceil_seconds(self.deadline - now))
        self.running = False
        self.ticker.stop()
        log.debug(f"Paused countdown '{self.name}' with {self.remaining_seconds}s left")

    def reset(self):
        self.remaining_seconds = 0
        self.running = False
        self.deadline = None
        self.ticker.stop()
        log.debug(f"Reset countdown '{self.name}'")

    # Recomputes remaining time from the deadline. Completion stops the countdown, so Completed can only ever be
    # emitted once per start.
    def tick(self, now=None):
        if not self.running:
            return
        now = now or self.clock()
        remaining = self.deadline - now

        if remaining <= timedelta(0):
            self.remaining_seconds = 0
            self.running = False
            self.deadline = None
            self.ticker.stop()
            log.debug(f"Countdown '{self.name}' completed")
            self.notifier.notify(EventKind.COMPLETED, Event(self.name))
        else:
            self.remaining_seconds = _ceil_seconds(remaining)
            self.notifier.notify(EventKind.UPDATED, Event(self.name, self.remaining_seconds))

    def _on_tick(self):
        self.tick(self.clock())
