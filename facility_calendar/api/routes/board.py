"""Endpoints for the seeded in-memory board."""

from datetime import date
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from facility_calendar.api.dependencies import get_board
from facility_calendar.interaction.board import CalendarBoard
from facility_calendar.scheduling.models import (
    Board,
    CalendarView,
    DayGrid,
    FacilityGroup,
    MonthGrid,
    RescheduleCommand,
    WeekGrid,
)

router = APIRouter(prefix="/board")


class CellDropRequest(BaseModel):
    facility: str
    day: date
    pointer_x: float
    cell_width: float


class GroupDropRequest(BaseModel):
    target_id: str
    pointer_y: float
    header_height: float


class GroupOrderResponse(BaseModel):
    groups: list[FacilityGroup]
    changed: bool


@router.get("", response_model=Board)
async def get_snapshot(board: CalendarBoard = Depends(get_board)) -> Board:
    """Current facilities, group order and appointments."""
    return board.to_board()


@router.get("/{view}", response_model=Union[DayGrid, WeekGrid, MonthGrid])
async def get_view(
    view: str,
    day: Optional[date] = Query(None, description="Date to show; defaults to the board's current date"),
    board: CalendarBoard = Depends(get_board),
):
    """Lay out the board as a day, week or month grid."""
    try:
        calendar_view = CalendarView(view)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown view: {view}")

    if day is not None:
        board.go_to(day)
    board.set_view(calendar_view)
    return board.render()


@router.post("/appointments/{appointment_id}/drop", response_model=RescheduleCommand)
async def drop_appointment(
    appointment_id: str,
    request: CellDropRequest,
    board: CalendarBoard = Depends(get_board),
) -> RescheduleCommand:
    """Drag an appointment onto a facility cell and apply the move."""
    if board.find_appointment(appointment_id) is None:
        raise HTTPException(status_code=404, detail=f"Appointment not found: {appointment_id}")
    if not board.begin_appointment_drag(appointment_id):
        raise HTTPException(status_code=409, detail="Another drag is in progress")

    board.hover_cell(request.facility, request.day, request.pointer_x, request.cell_width)
    command = board.drop_on_cell(request.facility, request.day, request.pointer_x, request.cell_width)
    if command is None:
        board.end_drag()
        raise HTTPException(status_code=409, detail="Drop was not accepted")
    return command


@router.post("/groups/{group_id}/drop", response_model=GroupOrderResponse)
async def drop_group(
    group_id: str,
    request: GroupDropRequest,
    board: CalendarBoard = Depends(get_board),
) -> GroupOrderResponse:
    """Drag a facility group onto another group's header and apply the new order."""
    known = {g.id for g in board.groups}
    for missing in (group_id, request.target_id):
        if missing not in known:
            raise HTTPException(status_code=404, detail=f"Group not found: {missing}")
    if not board.begin_group_drag(group_id):
        raise HTTPException(status_code=409, detail="Another drag is in progress")

    board.hover_group(request.target_id, request.pointer_y, request.header_height)
    reordered = board.drop_on_group(request.target_id)
    if reordered is None:
        return GroupOrderResponse(groups=list(board.groups), changed=False)
    return GroupOrderResponse(groups=reordered, changed=True)
