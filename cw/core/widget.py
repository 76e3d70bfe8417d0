"""Widget facade: owns the engines and turns button presses into engine calls.

This is the toolkit-free part of the host window. Every engine error is
caught here and shown to the user as a transient message, never raised.
"""

from collections.abc import Callable
from cw.common.logger import log
from cw.core.alarms import AlarmScheduler
from cw.core.clock import ClockReading, SystemClock
from cw.core.config import LabelConfig
from cw.core.countdown import Countdown
from cw.core.errors import ClockWidgetError, InvalidDuration
from cw.core.notify import Event, EventKind, Notifier
from cw.core.stopwatch import Stopwatch
from cw.core.ticker import (
    CLOCK_INTERVAL_MS,
    COUNTDOWN_INTERVAL_MS,
    STOPWATCH_INTERVAL_MS,
    ManualTicker,
    Ticker,
)
from cw.util import parse_duration_field


class ClockWidget:

    def __init__(self,
                 notifier: Notifier | None = None,
                 labels: LabelConfig | None = None,
                 clock=None,
                 ticker_factory: Callable[[int, str], Ticker] = ManualTicker):
        self.notifier = notifier or Notifier()
        self.clock = clock or SystemClock()
        self._labels = labels or LabelConfig()

        self.clock_ticker = ticker_factory(CLOCK_INTERVAL_MS, "clock")
        self.countdown = Countdown(self.notifier, ticker_factory(COUNTDOWN_INTERVAL_MS, "countdown"), self.clock)
        self.stopwatch = Stopwatch(self.notifier, ticker_factory(STOPWATCH_INTERVAL_MS, "stopwatch"), self.clock)
        self.alarms = AlarmScheduler(self.notifier, self.clock)

    #region === Lifecycle ===

    def start(self):
        self.clock_ticker.start(self.tick_clock)
        self.tick_clock()
        log.info("Clock widget started")

    def stop(self):
        self.clock_ticker.stop()
        self.countdown.ticker.stop()
        self.stopwatch.ticker.stop()
        log.info("Clock widget stopped")

    # Refreshes the clock header and checks alarms against the same instant.
    def tick_clock(self, now=None):
        now = now or self.clock()
        self.notifier.notify(EventKind.UPDATED, Event("clock", ClockReading.at(now)))
        return self.alarms.check_all(now)

    #endregion === Lifecycle ===

    #region === Labels ===

    @property
    def labels(self):
        return self._labels

    # Replaces the label snapshot wholesale with the overrides applied.
    def apply_config(self, overrides):
        self._labels = self._labels.merged(overrides)
        log.debug(f"Applied label config {self._labels.as_dict()}")
        self.notifier.on_labels(self._labels)
        return self._labels

    #endregion === Labels ===

    #region === Countdown ===

    # Starts (or resumes) the countdown from hours/minutes/seconds input. Inputs are ignored while a paused
    # remainder exists.
    def start_timer(self, hours=0, minutes=0, seconds=0):
        if self.countdown.running:
            return False
        self.notifier.permission.request()
        try:
            parts = [parse_duration_field(v) for v in (hours, minutes, seconds)]
            if any(part < 0 for part in parts):
                raise InvalidDuration()
            h, m, s = parts
            self.countdown.start(h * 3600 + m * 60 + s)
        except ClockWidgetError as e:
            self._report(e)
            return False
        return True

    def pause_timer(self):
        self.countdown.pause()
        self._refresh(self.countdown.name, self.countdown.remaining_seconds)

    def reset_timer(self):
        self.countdown.reset()
        self._refresh(self.countdown.name, 0)

    #endregion === Countdown ===

    #region === Alarms ===

    def add_alarm(self, time_of_day):
        try:
            alarm = self.alarms.add(time_of_day)
        except ClockWidgetError as e:
            self._report(e)
            return None
        self.notifier.permission.request()
        self.notifier.message("Alarm added successfully")
        return alarm

    def toggle_alarm(self, alarm_id):
        try:
            return self.alarms.toggle(alarm_id)
        except ClockWidgetError as e:
            self._report(e)
            return None

    def delete_alarm(self, alarm_id):
        removed = self.alarms.remove(alarm_id)
        self.notifier.message("Alarm deleted")
        return removed

    #endregion === Alarms ===

    #region === Stopwatch ===

    def start_stopwatch(self):
        self.stopwatch.start()

    def pause_stopwatch(self):
        self.stopwatch.pause()
        self._refresh(self.stopwatch.name, self.stopwatch.display_seconds)

    def reset_stopwatch(self):
        self.stopwatch.reset()
        self._refresh(self.stopwatch.name, 0)

    def lap_stopwatch(self):
        try:
            return self.stopwatch.lap()
        except ClockWidgetError as e:
            self._report(e)
            return None

    #endregion === Stopwatch ===

    def _refresh(self, source, seconds):
        self.notifier.notify(EventKind.UPDATED, Event(source, seconds))

    def _report(self, error: ClockWidgetError):
        log.warning(f"{type(error).__name__}: {error}")
        self.notifier.message(str(error))
