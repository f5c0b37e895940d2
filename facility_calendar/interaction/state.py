"""Interaction state for drag sessions.

One frozen value describes everything transient about the pointer: which
kind of drag is active (if any), what is being dragged and what it hovers.
Transitions in :mod:`reschedule` and :mod:`reorder` take a state and return
a new one, so the drag logic is testable without pointer events.
"""

import math
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

SLOT_COUNT = 24


class DragMode(str, Enum):
    NONE = "none"
    APPOINTMENT = "appointment"
    GROUP = "group"


class DropPosition(str, Enum):
    ABOVE = "above"
    BELOW = "below"


class CellTarget(BaseModel):
    """A facility cell on a given day, and the hour slot under the pointer."""

    model_config = ConfigDict(frozen=True)

    facility: str
    day: date
    slot: int

    def is_cell(self, facility: str, day: date) -> bool:
        return self.facility == facility and self.day == day


class AppointmentDrag(BaseModel):
    model_config = ConfigDict(frozen=True)

    appointment_id: str
    origin_facility: str
    span: tuple[date, ...] = ()
    pointer_x: float = 0.0
    pointer_y: float = 0.0


class GroupDrag(BaseModel):
    model_config = ConfigDict(frozen=True)

    group_id: str
    hover_group_id: Optional[str] = None
    position: Optional[DropPosition] = None


class InteractionState(BaseModel):
    """At most one drag session, appointment or group, never both."""

    model_config = ConfigDict(frozen=True)

    mode: DragMode = DragMode.NONE
    appointment: Optional[AppointmentDrag] = None
    hover: Optional[CellTarget] = None
    group: Optional[GroupDrag] = None

    @property
    def is_idle(self) -> bool:
        return self.mode == DragMode.NONE

    @property
    def dragging_appointment(self) -> bool:
        return self.mode == DragMode.APPOINTMENT

    @property
    def dragging_group(self) -> bool:
        return self.mode == DragMode.GROUP

    @property
    def dragged_appointment_id(self) -> Optional[str]:
        return self.appointment.appointment_id if self.appointment else None

    @property
    def dragged_group_id(self) -> Optional[str]:
        return self.group.group_id if self.group else None


IDLE = InteractionState()


def slot_from_pointer(pointer_x: float, cell_width: float, slot_count: int = SLOT_COUNT) -> int:
    """Map a pointer offset inside a cell to an hour slot in ``[0, slot_count)``."""
    if cell_width <= 0:
        return 0
    ratio = max(0.0, min(1.0, pointer_x / cell_width))
    return min(slot_count - 1, math.floor(ratio * slot_count))


def drop_position(pointer_y: float, header_height: float) -> DropPosition:
    """Top half of a group header inserts above it, bottom half below."""
    return DropPosition.ABOVE if pointer_y < header_height / 2 else DropPosition.BELOW
