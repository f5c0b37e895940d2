"""View composer: turns appointments into day, week and month grids.

Every facility+day scope is packed and clipped on its own; lane numbers
mean nothing outside the cell that produced them.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from facility_calendar.config import Settings, get_settings
from facility_calendar.interaction.state import IDLE, InteractionState
from facility_calendar.scheduling.clipper import clip_to_day
from facility_calendar.scheduling.dates import (
    WEEKDAY_LABELS,
    as_date,
    format_long_date,
    format_week_header,
    month_grid_dates,
    overlaps_day,
    week_dates,
)
from facility_calendar.scheduling.groups import resolve_groups
from facility_calendar.scheduling.models import (
    Appointment,
    DayGrid,
    DragPreview,
    FacilityGroup,
    FacilityRow,
    GroupSection,
    MonthCell,
    MonthGrid,
    PlacedAppointment,
    SlotHighlight,
    TypeBadge,
    WeekCell,
    WeekGrid,
    WeekRow,
)
from facility_calendar.scheduling.packer import pack_appointments

logger = logging.getLogger(__name__)

DAY_TIME_MARKERS = list(range(0, 25, 2))
WEEK_TIME_MARKERS = [0, 6, 12, 18, 24]
UNTYPED = "Other"


def slot_zone(slot: int, slot_count: int = 24) -> SlotHighlight:
    """Geometry of the drop-zone highlight drawn over *slot*."""
    return SlotHighlight(slot=slot, left=slot / slot_count * 100, width=1 / slot_count * 100)


def appointments_on_day(
    appointments: Sequence[Appointment],
    day: date,
    facility: Optional[str] = None,
) -> list[Appointment]:
    """Appointments touching *day*, optionally limited to one facility, in input order.

    A malformed appointment belongs to the day of its start only.
    """
    return [
        apt
        for apt in appointments
        if (facility is None or apt.facility == facility)
        and overlaps_day(apt.start_time, apt.start_time if apt.is_malformed else apt.end_time, day)
    ]


def drag_preview(
    interaction: InteractionState,
    appointments: Sequence[Appointment],
    settings: Settings,
) -> Optional[DragPreview]:
    """The preview that follows the pointer during an appointment drag."""
    drag = interaction.appointment if interaction.dragging_appointment else None
    if drag is None:
        return None
    appointment = next((apt for apt in appointments if apt.id == drag.appointment_id), None)
    if appointment is None:
        return None
    return DragPreview(
        appointment_id=appointment.id,
        left=drag.pointer_x - settings.drag_preview_offset_x,
        top=drag.pointer_y - settings.drag_preview_offset_y,
        segments=[clip_to_day(appointment, d, settings.min_width_percent) for d in drag.span],
    )


class _WarningLog:
    """Collects one data-quality warning per malformed appointment.

    The packer already logs each one; these messages travel with the grid.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self.messages: list[str] = []

    def check(self, appointments: Sequence[Appointment]) -> None:
        for apt in appointments:
            if apt.is_malformed and apt.id not in self._seen:
                self._seen.add(apt.id)
                message = (
                    f"Appointment {apt.id} ends at or before its start "
                    f"({apt.start_time.isoformat()} -> {apt.end_time.isoformat()})"
                )
                self.messages.append(message)


def _place(
    scoped: Sequence[Appointment],
    day: date,
    settings: Settings,
    pitch: int,
    offset: int,
    item_height: int,
    interaction: InteractionState,
) -> tuple[int, list[PlacedAppointment]]:
    packing = pack_appointments(
        scoped, min_duration=timedelta(minutes=settings.min_malformed_minutes)
    )
    by_id = {apt.id: apt for apt in scoped}
    placed: list[PlacedAppointment] = []
    for lane_index, members in enumerate(packing.members):
        for appointment_id in members:
            apt = by_id[appointment_id]
            placed.append(
                PlacedAppointment(
                    appointment=apt,
                    lane=lane_index,
                    segment=clip_to_day(apt, day, settings.min_width_percent),
                    top=lane_index * pitch + offset,
                    height=item_height,
                    draggable=not interaction.dragging_group,
                    is_dragging=apt.id == interaction.dragged_appointment_id,
                )
            )
    return packing.lane_count, placed


def compose_day(
    day: date | datetime,
    appointments: Sequence[Appointment],
    facilities: Sequence[str],
    settings: Optional[Settings] = None,
    interaction: Optional[InteractionState] = None,
) -> DayGrid:
    """Day view: one row per facility along a 0-24 h axis."""
    settings = settings or get_settings()
    interaction = interaction or IDLE
    d = as_date(day)
    warnings = _WarningLog()

    day_appointments = appointments_on_day(appointments, d)
    warnings.check(day_appointments)

    rows: list[FacilityRow] = []
    for facility in facilities:
        scoped = [apt for apt in day_appointments if apt.facility == facility]
        lane_count, items = _place(
            scoped,
            d,
            settings,
            pitch=settings.day_item_pitch,
            offset=settings.day_item_offset,
            item_height=settings.day_item_height,
            interaction=interaction,
        )
        highlight = None
        if (
            interaction.dragging_appointment
            and interaction.hover is not None
            and interaction.hover.is_cell(facility, d)
        ):
            highlight = slot_zone(interaction.hover.slot, settings.slot_count)

        rows.append(
            FacilityRow(
                facility=facility,
                lane_count=lane_count,
                height=max(settings.day_min_row_height, lane_count * settings.day_lane_height),
                items=items,
                accepts_drop=not interaction.dragging_group,
                highlight=highlight,
            )
        )

    logger.debug(f"Composed day {d}: {len(day_appointments)} appointments across {len(rows)} facilities")
    return DayGrid(
        date=d,
        title=format_long_date(d),
        time_markers=DAY_TIME_MARKERS,
        rows=rows,
        warnings=warnings.messages,
    )


def compose_week(
    day: date | datetime,
    appointments: Sequence[Appointment],
    facilities: Sequence[str],
    groups: Optional[Sequence[FacilityGroup]] = None,
    settings: Optional[Settings] = None,
    interaction: Optional[InteractionState] = None,
) -> WeekGrid:
    """Week view: Monday-start columns, facility rows under their group headers."""
    settings = settings or get_settings()
    interaction = interaction or IDLE
    dates = week_dates(day)
    warnings = _WarningLog()
    active_groups = resolve_groups(facilities, groups, settings.on_call_suffix_pattern)

    drag = interaction.appointment if interaction.dragging_appointment else None
    group_drag = interaction.group if interaction.dragging_group else None

    sections: list[GroupSection] = []
    for group in active_groups:
        rows: list[WeekRow] = []
        for facility in group.facilities:
            cells: list[WeekCell] = []
            for d in dates:
                scoped = appointments_on_day(appointments, d, facility)
                warnings.check(scoped)
                lane_count, items = _place(
                    scoped,
                    d,
                    settings,
                    pitch=settings.week_item_pitch,
                    offset=settings.week_item_offset,
                    item_height=settings.week_item_height,
                    interaction=interaction,
                )
                highlight = None
                if drag is not None and interaction.hover is not None and interaction.hover.is_cell(facility, d):
                    highlight = slot_zone(interaction.hover.slot, settings.slot_count)

                cells.append(
                    WeekCell(
                        date=d,
                        lane_count=lane_count,
                        height=max(settings.week_min_cell_height, lane_count * settings.week_lane_height),
                        items=items,
                        accepts_drop=group_drag is None,
                        is_drag_source=drag is not None
                        and drag.origin_facility == facility
                        and d in drag.span,
                        highlight=highlight,
                    )
                )
            rows.append(WeekRow(facility=facility, cells=cells))

        is_target = group_drag is not None and group_drag.hover_group_id == group.id
        sections.append(
            GroupSection(
                group=group,
                rows=rows,
                is_dragged=group_drag is not None and group_drag.group_id == group.id,
                is_drop_target=is_target,
                drop_position=group_drag.position.value if is_target and group_drag.position else None,
            )
        )

    logger.debug(f"Composed week of {dates[0]}: {len(sections)} groups")
    return WeekGrid(
        start_date=dates[0],
        dates=dates,
        day_labels=[format_week_header(d) for d in dates],
        time_markers=WEEK_TIME_MARKERS,
        sections=sections,
        drag_preview=drag_preview(interaction, appointments, settings),
        warnings=warnings.messages,
    )


def _month_cell(
    d: date,
    month: int,
    today: date,
    day_appointments: list[Appointment],
    settings: Settings,
) -> MonthCell:
    counts: dict[str, int] = {}
    colors: dict[str, str] = {}
    for apt in day_appointments:
        key = apt.type or UNTYPED
        counts[key] = counts.get(key, 0) + 1
        colors.setdefault(key, apt.color)

    badges = [
        TypeBadge(type=key, count=count, color=colors[key])
        for key, count in list(counts.items())[: settings.month_max_type_badges]
    ]
    summaries = [
        f"{apt.facility} ({apt.provider})"
        for apt in day_appointments[: settings.month_max_summaries]
    ]
    return MonthCell(
        date=d,
        in_current_month=d.month == month,
        is_today=d == today,
        appointment_count=len(day_appointments),
        badges=badges,
        hidden_type_count=max(0, len(counts) - settings.month_max_type_badges),
        summaries=summaries,
        hidden_summary_count=max(0, len(day_appointments) - settings.month_max_summaries),
    )


def compose_month(
    day: date | datetime,
    appointments: Sequence[Appointment],
    today: Optional[date] = None,
    settings: Optional[Settings] = None,
) -> MonthGrid:
    """Month view: 42 cells of per-type counts rather than laid-out appointments."""
    settings = settings or get_settings()
    d = as_date(day)
    today = today or date.today()
    warnings = _WarningLog()

    cells: list[MonthCell] = []
    for cell_date in month_grid_dates(d):
        day_appointments = appointments_on_day(appointments, cell_date)
        warnings.check(day_appointments)
        cells.append(_month_cell(cell_date, d.month, today, day_appointments, settings))

    return MonthGrid(
        year=d.year,
        month=d.month,
        weekday_labels=WEEKDAY_LABELS,
        cells=cells,
        warnings=warnings.messages,
    )
