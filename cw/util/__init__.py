from .misc import (
    format_time,
    format_clock_time,
    format_long_date,
    format_time_of_day,
    parse_duration_field,
    now_iso,
)
