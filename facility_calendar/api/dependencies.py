"""FastAPI dependencies."""

from fastapi import HTTPException, Request

from facility_calendar.interaction.board import CalendarBoard


def get_board(request: Request) -> CalendarBoard:
    """The in-memory board seeded at startup."""
    board = getattr(request.app.state, "board", None)
    if board is None:
        raise HTTPException(status_code=503, detail="Calendar board not loaded")
    return board
