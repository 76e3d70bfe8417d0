"""Time-of-day alarms.

An alarm matches for a whole minute while the scheduler is checked at least
once a second, so a fired alarm is both deactivated and stamped with
``last_triggered``; the stamp keeps it from firing again inside the same
60-second window even if the user re-activates it straight away.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from cw.common.logger import log
from cw.core.clock import SystemClock
from cw.core.errors import AlarmNotFound, InvalidTime
from cw.core.notify import Event, EventKind, Notifier
from cw.util import format_time_of_day

SUPPRESSION_WINDOW = timedelta(seconds=60)

_TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass
class Alarm:
    id: int
    time_of_day: str
    active: bool = True
    last_triggered: datetime | None = None

    # Whether this alarm should go off at `now`.
    def is_due(self, now: datetime):
        if not self.active or self.time_of_day != format_time_of_day(now):
            return False
        return self.last_triggered is None or now - self.last_triggered > SUPPRESSION_WINDOW


# Validates a user-entered alarm time and returns it stripped. Only strict 24-hour HH:MM is accepted.
def parse_time_of_day(text):
    if text is None:
        raise InvalidTime()
    text = str(text).strip()
    if not _TIME_OF_DAY.match(text):
        raise InvalidTime()
    return text


class AlarmScheduler:

    def __init__(self, notifier: Notifier | None = None, clock=None, name="alarm"):
        self.name = name
        self.notifier = notifier or Notifier()
        self.clock = clock or SystemClock()
        self._alarms: dict[int, Alarm] = {}
        self._last_id = 0

    def __iter__(self):
        return iter(list(self._alarms.values()))

    def __len__(self):
        return len(self._alarms)

    def get(self, alarm_id):
        try:
            return self._alarms[alarm_id]
        except KeyError:
            raise AlarmNotFound(alarm_id) from None

    def add(self, time_of_day, now=None):
        time_of_day = parse_time_of_day(time_of_day)
        now = now or self.clock()

        # Ids are creation timestamps in milliseconds, bumped when two alarms land on the same millisecond.
        alarm_id = max(int(now.timestamp() * 1000), self._last_id + 1)
        self._last_id = alarm_id

        alarm = Alarm(id=alarm_id, time_of_day=time_of_day)
        self._alarms[alarm_id] = alarm
        log.debug(f"Added alarm {alarm_id} for {time_of_day}")
        return alarm

    def toggle(self, alarm_id):
        alarm = self.get(alarm_id)
        alarm.active = not alarm.active
        log.debug(f"Toggled alarm {alarm_id} to {'active' if alarm.active else 'inactive'}")
        return alarm

    # Deletes an alarm. Unknown ids are ignored, returns whether anything was removed.
    def remove(self, alarm_id):
        removed = self._alarms.pop(alarm_id, None) is not None
        if removed:
            log.debug(f"Removed alarm {alarm_id}")
        return removed

    def check_all(self, now=None):
        now = now or self.clock()
        fired = []
        for alarm in list(self._alarms.values()):
            if not alarm.is_due(now):
                continue
            alarm.active = False
            alarm.last_triggered = now
            fired.append(alarm)
            log.info(f"Alarm {alarm.id} fired for {alarm.time_of_day}")
            self.notifier.notify(EventKind.FIRED, Event(self.name, alarm))
        return fired
