"""Clip an appointment to one visible day of the 24-hour axis."""

from datetime import date, datetime

from facility_calendar.scheduling.dates import (
    as_date,
    day_bounds,
    format_time,
    fractional_hour,
    span_dates,
)
from facility_calendar.scheduling.models import Appointment, DaySegment

HOURS_PER_DAY = 24


def segment_label(appointment: Appointment, is_first_day: bool, is_last_day: bool) -> str | None:
    """Time label for a segment; middle days carry no label."""
    start = format_time(appointment.start_time)
    end = format_time(appointment.end_time)
    if is_first_day and is_last_day:
        return f"{start} - {end}"
    if is_first_day:
        return f"{start} →"
    if is_last_day:
        return f"→ {end}"
    return None


def clip_to_day(
    appointment: Appointment,
    day: date | datetime,
    min_width_percent: float = 2.0,
) -> DaySegment:
    """Compute the segment of *appointment* drawn on *day*.

    The caller is expected to pass a day the appointment touches; a day
    that contains neither endpoint is treated as a pass-through day and
    gets a full-width bar. Middle-day bars assume every day column has the
    same width.
    """
    d = as_date(day)
    day_start, day_end = day_bounds(d)
    start, end = appointment.start_time, appointment.end_time
    if appointment.is_malformed:
        end = start

    effective_start = max(start, day_start)
    effective_end = min(end, day_end)

    is_first_day = day_start <= start <= day_end
    is_last_day = day_start <= end <= day_end
    is_middle_day = not is_first_day and not is_last_day
    is_multi_day = len(span_dates(start, end)) > 1

    if is_first_day and is_last_day:
        start_hour = fractional_hour(effective_start)
        end_hour = fractional_hour(effective_end)
        left = start_hour / HOURS_PER_DAY * 100
        width = (end_hour - start_hour) / HOURS_PER_DAY * 100
    elif is_first_day:
        left = fractional_hour(effective_start) / HOURS_PER_DAY * 100
        width = 100 - left
    elif is_last_day:
        left = 0.0
        width = fractional_hour(effective_end) / HOURS_PER_DAY * 100
    else:
        left = 0.0
        width = 100.0

    width = min(100.0, max(min_width_percent, width))
    left = min(max(0.0, left), 100.0 - width)

    return DaySegment(
        appointment_id=appointment.id,
        day=d,
        left=left,
        width=width,
        is_first_day=is_first_day,
        is_last_day=is_last_day,
        is_middle_day=is_middle_day,
        is_multi_day=is_multi_day,
        rounded_start=is_first_day,
        rounded_end=is_last_day,
        label=segment_label(appointment, is_first_day, is_last_day),
    )
