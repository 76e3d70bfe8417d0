from datetime import datetime


# Formats a whole number of seconds as HH:MM:SS. Negative values clamp to zero, hours are allowed to run past 99.
def format_time(total_seconds):
    total_seconds = max(0, int(total_seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

# 24-hour wall clock reading, such as 07:05:09
def format_clock_time(now: datetime):
    return now.strftime("%H:%M:%S")

# Long-form date, such as "Sunday, October 18, 2026". Built by hand since %-d isn't portable to Windows.
def format_long_date(now: datetime):
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"

# Minute-granular time of day, used to match alarms.
def format_time_of_day(now: datetime):
    return now.strftime("%H:%M")

# Reads a single hours/minutes/seconds field the way a spin box or text field hands it over. Blank or non-numeric
# values count as 0, everything else must be a whole number.
def parse_duration_field(value):
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        return 0

# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return datetime.now().astimezone().isoformat()
