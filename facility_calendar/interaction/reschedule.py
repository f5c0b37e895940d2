"""Drag-to-reschedule transitions.

``Idle -> Dragging(appointment) -> Idle``, with a single hovered cell
layered on top while dragging. Every function takes the current
:class:`InteractionState` and returns the next one; drops also return the
:class:`RescheduleCommand` they produce, if any.
"""

import logging
from datetime import date, datetime, time
from typing import Optional, Sequence

from facility_calendar.interaction.state import (
    IDLE,
    SLOT_COUNT,
    AppointmentDrag,
    CellTarget,
    DragMode,
    InteractionState,
    slot_from_pointer,
)
from facility_calendar.scheduling.dates import as_date, span_dates
from facility_calendar.scheduling.models import Appointment, RescheduleCommand

logger = logging.getLogger(__name__)


def start_appointment_drag(
    state: InteractionState,
    appointment: Appointment,
    pointer_x: float = 0.0,
    pointer_y: float = 0.0,
) -> InteractionState:
    """Begin dragging *appointment*; refused while any drag is in progress."""
    if not state.is_idle:
        logger.debug(
            f"Ignoring drag of appointment {appointment.id}: {state.mode.value} drag in progress"
        )
        return state

    return InteractionState(
        mode=DragMode.APPOINTMENT,
        appointment=AppointmentDrag(
            appointment_id=appointment.id,
            origin_facility=appointment.facility,
            span=tuple(span_dates(appointment.start_time, appointment.end_time)),
            pointer_x=pointer_x,
            pointer_y=pointer_y,
        ),
    )


def track_pointer(state: InteractionState, pointer_x: float, pointer_y: float) -> InteractionState:
    """Move the floating multi-day preview with the pointer."""
    if not state.dragging_appointment or state.appointment is None:
        return state
    return state.model_copy(
        update={
            "appointment": state.appointment.model_copy(
                update={"pointer_x": pointer_x, "pointer_y": pointer_y}
            )
        }
    )


def hover_cell(
    state: InteractionState,
    facility: str,
    day: date | datetime,
    pointer_x: float,
    cell_width: float,
    slot_count: int = SLOT_COUNT,
) -> InteractionState:
    """Highlight the hour slot under the pointer, replacing any previous highlight."""
    if not state.dragging_appointment:
        return state
    target = CellTarget(
        facility=facility,
        day=as_date(day),
        slot=slot_from_pointer(pointer_x, cell_width, slot_count),
    )
    if state.hover == target:
        return state
    return state.model_copy(update={"hover": target})


def leave_cell(state: InteractionState, facility: str, day: date | datetime) -> InteractionState:
    """Clear the highlight if the pointer left the highlighted cell."""
    if state.hover is None or not state.hover.is_cell(facility, as_date(day)):
        return state
    return state.model_copy(update={"hover": None})


def reschedule_to_slot(
    appointment: Appointment,
    facility: str,
    day: date | datetime,
    slot: int,
) -> RescheduleCommand:
    """Move *appointment* to *slot*:00 on *day* at *facility*, keeping its duration."""
    new_start = datetime.combine(as_date(day), time(hour=slot))
    return RescheduleCommand(
        appointment_id=appointment.id,
        new_start=new_start,
        new_end=new_start + (appointment.end_time - appointment.start_time),
        new_facility=facility,
    )


def drop_on_cell(
    state: InteractionState,
    appointments: Sequence[Appointment],
    facility: str,
    day: date | datetime,
    pointer_x: float,
    cell_width: float,
    slot_count: int = SLOT_COUNT,
) -> tuple[InteractionState, Optional[RescheduleCommand]]:
    """Release the dragged appointment over a facility cell.

    The facility is taken as-is; validating it is the storage layer's job.
    Drops that arrive during a group drag are ignored entirely.
    """
    if state.dragging_group:
        return state, None
    if not state.dragging_appointment or state.appointment is None:
        return IDLE, None

    appointment_id = state.appointment.appointment_id
    appointment = next((apt for apt in appointments if apt.id == appointment_id), None)
    if appointment is None:
        logger.warning(f"Dropped appointment {appointment_id} is no longer on the board")
        return IDLE, None

    slot = slot_from_pointer(pointer_x, cell_width, slot_count)
    command = reschedule_to_slot(appointment, facility, day, slot)
    logger.info(
        f"Reschedule {appointment_id}: {facility} "
        f"{command.new_start.isoformat()} -> {command.new_end.isoformat()}"
    )
    return IDLE, command


def end_drag(state: InteractionState) -> InteractionState:
    """Drag ended without a drop on a cell: forget everything transient.

    A group drag in progress is not this reducer's to end.
    """
    if state.dragging_group:
        return state
    if state.dragging_appointment:
        logger.debug(f"Drag of appointment {state.dragged_appointment_id} cancelled")
    return IDLE


def apply_reschedule(
    appointments: Sequence[Appointment],
    command: RescheduleCommand,
) -> tuple[Appointment, ...]:
    """New appointment collection with *command* merged in by id."""
    return tuple(
        apt.model_copy(
            update={
                "start_time": command.new_start,
                "end_time": command.new_end,
                "facility": command.new_facility,
            }
        )
        if apt.id == command.appointment_id
        else apt
        for apt in appointments
    )
