"""CLI commands for the facility calendar."""

from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from facility_calendar.config import get_settings

app = typer.Typer(
    name="facility-calendar",
    help="Facility scheduling calendar: lane layout, rescheduling and group ordering",
    add_completion=False,
)
console = Console()


def load_board(data: Optional[Path]):
    """Load a board file, falling back to the bundled sample board."""
    from facility_calendar.interaction.board import CalendarBoard

    path = data or get_settings().board_seed_path
    if not path.exists():
        console.print(f"[red]Board file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return CalendarBoard.from_file(path)
    except ValueError as e:
        console.print(f"[red]Invalid board file {path}: {e}[/red]")
        raise typer.Exit(1)


def save_board(board, data: Optional[Path]) -> None:
    path = data or get_settings().board_seed_path
    path.write_text(board.to_board().model_dump_json(indent=2) + "\n")
    console.print(f"[green]Saved board to {path}[/green]")


def parse_day(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Invalid date: {value}. Use YYYY-MM-DD[/red]")
        raise typer.Exit(1)


def _item_line(item) -> str:
    apt = item.appointment
    label = item.segment.label or "..."
    return f"[{item.lane}] {label} {apt.title} ({apt.provider})"


def _display_day(grid) -> None:
    table = Table(title=grid.title)
    table.add_column("Facility")
    table.add_column("Lanes", justify="right")
    table.add_column("Appointments")
    for row in grid.rows:
        table.add_row(row.facility, str(row.lane_count), "\n".join(_item_line(i) for i in row.items))
    console.print(table)


def _display_week(grid) -> None:
    from facility_calendar.scheduling.dates import format_week_header

    table = Table(title=f"Week of {format_week_header(grid.start_date)}")
    table.add_column("Facility")
    for day in grid.dates:
        table.add_column(format_week_header(day))
    for section in grid.sections:
        table.add_row(f"[bold]{section.group.name}[/bold]", *[""] * len(grid.dates))
        for row in section.rows:
            table.add_row(
                f"  {row.facility}",
                *["\n".join(_item_line(i) for i in cell.items) for cell in row.cells],
            )
    console.print(table)


def _display_month(grid) -> None:
    table = Table(title=f"{grid.year}-{grid.month:02d}")
    for label in grid.weekday_labels:
        table.add_column(label)

    def render_cell(cell) -> str:
        day = f"[dim]{cell.date.day}[/dim]" if not cell.in_current_month else str(cell.date.day)
        if cell.is_today:
            day = f"[reverse]{day}[/reverse]"
        lines = [day]
        lines += [f"{b.type} {b.count}" for b in cell.badges]
        if cell.hidden_type_count:
            lines.append(f"+{cell.hidden_type_count} types")
        lines += cell.summaries
        if cell.hidden_summary_count:
            lines.append(f"+{cell.hidden_summary_count} more")
        return "\n".join(lines)

    for week_start in range(0, len(grid.cells), 7):
        table.add_row(*[render_cell(c) for c in grid.cells[week_start : week_start + 7]])
    console.print(table)


def _display_warnings(warnings: list[str]) -> None:
    if warnings:
        console.print("\n[bold yellow]Data warnings:[/bold yellow]")
        for warning in warnings:
            console.print(f"  - {warning}")


@app.command()
def show(
    view: str = typer.Argument("week", help="View: day, week, month"),
    day: Optional[str] = typer.Option(None, "--date", "-d", help="Date to show (YYYY-MM-DD)"),
    data: Optional[Path] = typer.Option(None, "--data", help="Board JSON file"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Lay out a board as a day, week or month grid."""
    from facility_calendar.scheduling.models import CalendarView

    try:
        calendar_view = CalendarView(view)
    except ValueError:
        console.print(f"[red]Invalid view: {view}. Use day, week, or month[/red]")
        raise typer.Exit(1)

    board = load_board(data)
    anchor = parse_day(day)
    if anchor is not None:
        board.go_to(anchor)
    grid = board.render(calendar_view)

    if output_json:
        console.print_json(grid.model_dump_json())
        return

    if calendar_view == CalendarView.DAY:
        _display_day(grid)
    elif calendar_view == CalendarView.WEEK:
        _display_week(grid)
    else:
        _display_month(grid)
    _display_warnings(grid.warnings)


@app.command()
def move(
    appointment_id: str = typer.Argument(..., help="Appointment to move"),
    facility: str = typer.Argument(..., help="Target facility"),
    day: str = typer.Argument(..., help="Target date (YYYY-MM-DD)"),
    slot: int = typer.Option(..., "--slot", "-s", min=0, max=23, help="Target hour slot (0-23)"),
    data: Optional[Path] = typer.Option(None, "--data", help="Board JSON file"),
    save: bool = typer.Option(False, "--save", help="Write the updated board back to the file"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Drop an appointment onto a facility cell and hour slot."""
    from facility_calendar.interaction.reschedule import reschedule_to_slot

    board = load_board(data)
    target_day = parse_day(day)
    appointment = board.find_appointment(appointment_id)
    if appointment is None:
        console.print(f"[red]Appointment not found: {appointment_id}[/red]")
        raise typer.Exit(1)

    command = reschedule_to_slot(appointment, facility, target_day, slot)
    board.apply(command)

    if output_json:
        console.print_json(command.model_dump_json())
    else:
        console.print(
            Panel.fit(
                f"[bold]{appointment.title}[/bold]\n"
                f"{appointment.facility} → {command.new_facility}\n"
                f"{_format_span(appointment.start_time, appointment.end_time)} → "
                f"{_format_span(command.new_start, command.new_end)}",
                title="Rescheduled",
            )
        )
    if save:
        save_board(board, data)


def _format_span(start: datetime, end: datetime) -> str:
    return f"{start:%Y-%m-%d %H:%M} - {end:%Y-%m-%d %H:%M}"


@app.command()
def reorder(
    dragged_id: str = typer.Argument(..., help="Group being moved"),
    target_id: str = typer.Argument(..., help="Group it is dropped on"),
    position: str = typer.Option("above", "--position", "-p", help="above or below the target"),
    data: Optional[Path] = typer.Option(None, "--data", help="Board JSON file"),
    save: bool = typer.Option(False, "--save", help="Write the updated board back to the file"),
):
    """Move one facility group above or below another."""
    from facility_calendar.interaction.reorder import reorder_groups
    from facility_calendar.interaction.state import DropPosition

    try:
        drop = DropPosition(position)
    except ValueError:
        console.print(f"[red]Invalid position: {position}. Use above or below[/red]")
        raise typer.Exit(1)

    board = load_board(data)
    known = {g.id for g in board.groups}
    for group_id in (dragged_id, target_id):
        if group_id not in known:
            console.print(f"[red]Group not found: {group_id}[/red]")
            raise typer.Exit(1)

    reordered = reorder_groups(board.groups, dragged_id, target_id, drop)
    if reordered is None:
        console.print("[yellow]Group order unchanged[/yellow]")
        return

    board.groups = tuple(reordered)
    _display_groups(board.groups)
    if save:
        save_board(board, data)


def _display_groups(groups) -> None:
    table = Table(title="Facility Groups")
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Facilities")
    for index, group in enumerate(groups, start=1):
        table.add_row(str(index), group.id, group.name, ", ".join(group.facilities))
    console.print(table)


@app.command()
def groups(
    data: Optional[Path] = typer.Option(None, "--data", help="Board JSON file"),
):
    """List facility groups in display order."""
    board = load_board(data)
    _display_groups(board.groups)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the REST API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(f"Starting Facility Calendar API server on {host}:{port}")
    uvicorn.run(
        "facility_calendar.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version():
    """Show version information."""
    from facility_calendar import __version__

    console.print(f"Facility Calendar v{__version__}")
