"""Drag interactions: appointment rescheduling and facility-group reordering."""

from facility_calendar.interaction.state import (
    IDLE,
    DragMode,
    DropPosition,
    InteractionState,
    drop_position,
    slot_from_pointer,
)
from facility_calendar.interaction.reschedule import (
    apply_reschedule,
    drop_on_cell,
    end_drag,
    hover_cell,
    start_appointment_drag,
)
from facility_calendar.interaction.reorder import (
    drop_on_group,
    end_group_drag,
    hover_group,
    reorder_groups,
    start_group_drag,
)

__all__ = [
    "IDLE",
    "DragMode",
    "DropPosition",
    "InteractionState",
    "apply_reschedule",
    "drop_on_cell",
    "drop_on_group",
    "drop_position",
    "end_drag",
    "end_group_drag",
    "hover_cell",
    "hover_group",
    "reorder_groups",
    "slot_from_pointer",
    "start_appointment_drag",
    "start_group_drag",
]
