"""Error taxonomy for the time-tracking engines.

All of these are local and recoverable. Engines raise them, and the widget
facade turns them into a transient message for the user.
"""


class ClockWidgetError(Exception):
    """Base class for every user-recoverable engine error."""


class InvalidDuration(ClockWidgetError):
    def __init__(self, message="Please set a valid timer duration"):
        super().__init__(message)


class InvalidTime(ClockWidgetError):
    def __init__(self, message="Please select a time for the alarm"):
        super().__init__(message)


class NotStarted(ClockWidgetError):
    def __init__(self, message="Start the stopwatch before recording a lap"):
        super().__init__(message)


class AlarmNotFound(ClockWidgetError):
    def __init__(self, alarm_id):
        self.alarm_id = alarm_id
        super().__init__(f"No alarm with id {alarm_id}")
