from dataclasses import dataclass
from datetime import datetime
from cw.util import format_clock_time, format_long_date


# Wall-clock source. Local time on purpose, alarms compare against the time of day the user sees. Any zero-argument
# callable returning a datetime can stand in for it (tests pass a fixed or stepping clock).
class SystemClock:
    def __call__(self):
        return datetime.now()


# What the clock header shows for a single instant.
@dataclass(frozen=True)
class ClockReading:
    time: str
    date: str

    @staticmethod
    def at(now: datetime):
        return ClockReading(time=format_clock_time(now), date=format_long_date(now))
