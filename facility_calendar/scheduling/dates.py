"""Calendar arithmetic shared by the composer and the interaction layer.

All values are naive local datetimes; the week starts on Monday.
"""

import calendar
from datetime import date, datetime, time, timedelta

DAY_END_TIME = time(23, 59, 59, 999000)
WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTH_GRID_DAYS = 42


def as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def day_bounds(day: date | datetime) -> tuple[datetime, datetime]:
    """Return the first and last millisecond of *day*."""
    d = as_date(day)
    return datetime.combine(d, time.min), datetime.combine(d, DAY_END_TIME)


def weekday_offset(day: date) -> int:
    """Offset of *day* from the Monday that starts its week.

    Sunday-first weekday indexes are shifted so Sunday (0) lands on 6 and
    every other day on ``index - 1``.
    """
    sunday_first = day.isoweekday() % 7
    return 6 if sunday_first == 0 else sunday_first - 1


def start_of_week(day: date | datetime) -> date:
    d = as_date(day)
    return d - timedelta(days=weekday_offset(d))


def week_dates(day: date | datetime) -> list[date]:
    """The seven dates of the Monday-start week containing *day*."""
    monday = start_of_week(day)
    return [monday + timedelta(days=i) for i in range(7)]


def month_grid_dates(day: date | datetime) -> list[date]:
    """42 dates (six weeks) starting on the Monday on or before the 1st."""
    d = as_date(day)
    first = d.replace(day=1)
    grid_start = start_of_week(first)
    return [grid_start + timedelta(days=i) for i in range(MONTH_GRID_DAYS)]


def add_months(day: date, months: int) -> date:
    """Shift *day* by whole months, clamping to the last day of the target month."""
    index = day.month - 1 + months
    year = day.year + index // 12
    month = index % 12 + 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def span_dates(start: datetime, end: datetime) -> list[date]:
    """Every calendar date from *start*'s date through *end*.

    A span ending exactly at midnight includes that midnight's date.
    Inverted spans still yield the start date.
    """
    current = start.date()
    dates = [current]
    while True:
        current = current + timedelta(days=1)
        if datetime.combine(current, time.min) > end:
            break
        dates.append(current)
    return dates


def overlaps_day(start: datetime, end: datetime, day: date) -> bool:
    """Closed-range scope test used to decide which appointments a day shows."""
    day_start, day_end = day_bounds(day)
    return start <= day_end and end >= day_start


def fractional_hour(value: datetime) -> float:
    return value.hour + value.minute / 60


def format_time(value: datetime) -> str:
    """24-hour ``HH:MM``."""
    return value.strftime("%H:%M")


def format_week_header(day: date) -> str:
    """``Mon, 06/23/2025``."""
    return f"{WEEKDAY_LABELS[weekday_offset(day)]}, {day.strftime('%m/%d/%Y')}"


def format_long_date(day: date) -> str:
    """``Monday, June 23, 2025``."""
    return f"{day.strftime('%A, %B')} {day.day}, {day.year}"
