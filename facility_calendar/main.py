"""Main entry point for the facility calendar."""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from facility_calendar.config import get_settings


def setup_logging():
    """Configure logging based on settings."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main():
    """Main entry point - runs CLI."""
    setup_logging()

    from facility_calendar.cli.commands import app

    app()


def render_board(
    view: str = "week",
    day: Optional[date] = None,
    data: Optional[Path] = None,
):
    """Programmatic API for laying out a board file.

    Example:
        from datetime import date
        from facility_calendar.main import render_board

        grid = render_board("day", date(2025, 6, 25))
        for row in grid.rows:
            print(row.facility, row.lane_count)
    """
    from facility_calendar.interaction.board import CalendarBoard
    from facility_calendar.scheduling.models import CalendarView

    board = CalendarBoard.from_file(data or get_settings().board_seed_path)
    if day is not None:
        board.go_to(day)
    return board.render(CalendarView(view))


if __name__ == "__main__":
    main()
