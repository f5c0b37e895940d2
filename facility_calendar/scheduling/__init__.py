"""Temporal layout engine for the facility calendar."""

from facility_calendar.scheduling.models import (
    Appointment,
    Board,
    CalendarView,
    DayGrid,
    DaySegment,
    FacilityGroup,
    MonthGrid,
    RescheduleCommand,
    WeekGrid,
)
from facility_calendar.scheduling.packer import LanePacking, pack_appointments, pack_lanes
from facility_calendar.scheduling.clipper import clip_to_day
from facility_calendar.scheduling.groups import resolve_groups, synthesize_groups
from facility_calendar.scheduling.composer import compose_day, compose_month, compose_week

__all__ = [
    "Appointment",
    "Board",
    "CalendarView",
    "DayGrid",
    "DaySegment",
    "FacilityGroup",
    "LanePacking",
    "MonthGrid",
    "RescheduleCommand",
    "WeekGrid",
    "clip_to_day",
    "compose_day",
    "compose_month",
    "compose_week",
    "pack_appointments",
    "pack_lanes",
    "resolve_groups",
    "synthesize_groups",
]
