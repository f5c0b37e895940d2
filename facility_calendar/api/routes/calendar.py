"""Stateless calendar endpoints: lay out a posted board, compute drops."""

import logging
from datetime import date
from typing import Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from facility_calendar.config import get_settings
from facility_calendar.interaction.reorder import reorder_groups
from facility_calendar.interaction.reschedule import reschedule_to_slot
from facility_calendar.interaction.state import DropPosition, InteractionState, slot_from_pointer
from facility_calendar.scheduling.composer import compose_day, compose_month, compose_week
from facility_calendar.scheduling.models import (
    Appointment,
    CalendarView,
    DayGrid,
    FacilityGroup,
    MonthGrid,
    RescheduleCommand,
    WeekGrid,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar")


# ---------------------------------------------------------------------------
# Request/response schemas
# ---------------------------------------------------------------------------


class LayoutRequest(BaseModel):
    day: date
    facilities: list[str]
    facility_groups: list[FacilityGroup] = Field(default_factory=list)
    appointments: list[Appointment] = Field(default_factory=list)
    interaction: Optional[InteractionState] = None
    today: Optional[date] = None


class RescheduleRequest(BaseModel):
    appointment: Appointment
    facility: str
    day: date
    slot: Optional[int] = Field(default=None, ge=0, le=23)
    pointer_x: Optional[float] = None
    cell_width: Optional[float] = None


class ReorderRequest(BaseModel):
    groups: list[FacilityGroup]
    dragged_id: str
    target_id: str
    position: DropPosition


class ReorderResponse(BaseModel):
    groups: list[FacilityGroup]
    changed: bool


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/reschedule", response_model=RescheduleCommand)
async def reschedule(request: RescheduleRequest) -> RescheduleCommand:
    """Where an appointment lands when dropped on a facility cell."""
    if request.slot is not None:
        slot = request.slot
    elif request.pointer_x is not None and request.cell_width is not None:
        slot = slot_from_pointer(request.pointer_x, request.cell_width, get_settings().slot_count)
    else:
        raise HTTPException(
            status_code=422,
            detail="Provide either slot or pointer_x and cell_width",
        )
    return reschedule_to_slot(request.appointment, request.facility, request.day, slot)


@router.post("/groups/reorder", response_model=ReorderResponse)
async def reorder(request: ReorderRequest) -> ReorderResponse:
    """Move one facility group above or below another."""
    reordered = reorder_groups(request.groups, request.dragged_id, request.target_id, request.position)
    if reordered is None:
        logger.debug(f"Reorder of {request.dragged_id} onto {request.target_id} left the order unchanged")
        return ReorderResponse(groups=request.groups, changed=False)
    return ReorderResponse(groups=reordered, changed=True)


@router.post("/{view}", response_model=Union[DayGrid, WeekGrid, MonthGrid])
async def layout(view: str, request: LayoutRequest):
    """Lay out the posted appointments as a day, week or month grid."""
    try:
        calendar_view = CalendarView(view)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown view: {view}")

    if calendar_view == CalendarView.DAY:
        return compose_day(
            request.day, request.appointments, request.facilities, interaction=request.interaction
        )
    if calendar_view == CalendarView.WEEK:
        return compose_week(
            request.day,
            request.appointments,
            request.facilities,
            groups=request.facility_groups or None,
            interaction=request.interaction,
        )
    return compose_month(request.day, request.appointments, today=request.today)
