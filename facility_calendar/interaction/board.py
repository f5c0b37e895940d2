"""CalendarBoard: the one owner of calendar application state.

Holds the current date and view, the facility list and groups, the
appointment snapshot and the interaction state. Every change replaces a
value rather than mutating it, so a grid rendered from one snapshot never
sees half of an update.
"""

import json
import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from facility_calendar.config import Settings, get_settings
from facility_calendar.interaction import reorder, reschedule
from facility_calendar.interaction.state import IDLE, InteractionState
from facility_calendar.observability import EventType, ObservabilityLogger, get_observability_logger
from facility_calendar.scheduling.composer import compose_day, compose_month, compose_week
from facility_calendar.scheduling.dates import add_months, as_date
from facility_calendar.scheduling.groups import find_group, resolve_groups
from facility_calendar.scheduling.models import (
    Appointment,
    Board,
    CalendarView,
    DayGrid,
    FacilityGroup,
    MonthGrid,
    RescheduleCommand,
    WeekGrid,
)

logger = logging.getLogger(__name__)

RescheduleCallback = Callable[[str, datetime, datetime, str], None]
ReorderCallback = Callable[[list[FacilityGroup]], None]
Grid = Union[DayGrid, WeekGrid, MonthGrid]


class CalendarBoard:
    """Calendar state plus the transitions that change it."""

    def __init__(
        self,
        facilities: Sequence[str],
        appointments: Sequence[Appointment] = (),
        groups: Optional[Sequence[FacilityGroup]] = None,
        current_date: Optional[date] = None,
        view: CalendarView = CalendarView.WEEK,
        on_reschedule: Optional[RescheduleCallback] = None,
        on_group_reorder: Optional[ReorderCallback] = None,
        settings: Optional[Settings] = None,
        observability: Optional[ObservabilityLogger] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.facilities: tuple[str, ...] = tuple(facilities)
        self.appointments: tuple[Appointment, ...] = tuple(appointments)
        self.groups: tuple[FacilityGroup, ...] = tuple(
            resolve_groups(self.facilities, groups, self.settings.on_call_suffix_pattern)
        )
        self.current_date: date = current_date or date.today()
        self.view = view
        self.interaction: InteractionState = IDLE
        self.on_reschedule = on_reschedule
        self.on_group_reorder = on_group_reorder
        self.obs = observability or get_observability_logger()

    @classmethod
    def from_board(cls, board: Board, **kwargs) -> "CalendarBoard":
        return cls(
            facilities=board.facilities,
            appointments=board.appointments,
            groups=board.facility_groups or None,
            **kwargs,
        )

    @classmethod
    def from_file(cls, path: Path, **kwargs) -> "CalendarBoard":
        """Load a board JSON file: facilities, optional facility_groups, appointments."""
        board = Board.model_validate(json.loads(Path(path).read_text()))
        logger.info(
            f"Loaded board from {path}: {len(board.facilities)} facilities, "
            f"{len(board.appointments)} appointments"
        )
        return cls.from_board(board, **kwargs)

    def to_board(self) -> Board:
        return Board(
            facilities=list(self.facilities),
            facility_groups=list(self.groups),
            appointments=list(self.appointments),
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def set_view(self, view: CalendarView) -> None:
        self.view = CalendarView(view)

    def go_to(self, day: date | datetime) -> None:
        self.current_date = as_date(day)

    def today(self) -> None:
        self.current_date = date.today()

    def _step(self, direction: int) -> None:
        if self.view == CalendarView.DAY:
            self.current_date += timedelta(days=direction)
        elif self.view == CalendarView.WEEK:
            self.current_date += timedelta(days=7 * direction)
        else:
            self.current_date = add_months(self.current_date, direction)

    def next(self) -> None:
        self._step(1)

    def previous(self) -> None:
        self._step(-1)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, view: Optional[CalendarView] = None) -> Grid:
        """Compose the grid for *view* (default: the current view)."""
        view = CalendarView(view) if view is not None else self.view
        with self.obs.layout_run(
            view.value,
            self.current_date,
            facility_count=len(self.facilities),
            appointment_count=len(self.appointments),
        ) as event:
            if view == CalendarView.DAY:
                grid: Grid = compose_day(
                    self.current_date,
                    self.appointments,
                    self.facilities,
                    settings=self.settings,
                    interaction=self.interaction,
                )
                event.lane_count_max = max((r.lane_count for r in grid.rows), default=0)
            elif view == CalendarView.WEEK:
                grid = compose_week(
                    self.current_date,
                    self.appointments,
                    self.facilities,
                    groups=self.groups,
                    settings=self.settings,
                    interaction=self.interaction,
                )
                event.lane_count_max = max(
                    (c.lane_count for s in grid.sections for r in s.rows for c in r.cells),
                    default=0,
                )
            else:
                grid = compose_month(self.current_date, self.appointments, settings=self.settings)
            event.warnings = list(grid.warnings)
        return grid

    # ------------------------------------------------------------------
    # Appointment drag
    # ------------------------------------------------------------------

    def find_appointment(self, appointment_id: str) -> Optional[Appointment]:
        return next((apt for apt in self.appointments if apt.id == appointment_id), None)

    def begin_appointment_drag(self, appointment_id: str, pointer_x: float = 0.0, pointer_y: float = 0.0) -> bool:
        """Start dragging an appointment. Returns False when the drag is refused."""
        appointment = self.find_appointment(appointment_id)
        if appointment is None:
            return False
        next_state = reschedule.start_appointment_drag(self.interaction, appointment, pointer_x, pointer_y)
        if next_state is self.interaction:
            self.obs.log_interaction(
                EventType.DRAG_REFUSED,
                drag_mode="appointment",
                entity_id=appointment_id,
                reason=f"{self.interaction.mode.value} drag in progress",
            )
            return False
        self.interaction = next_state
        self.obs.log_interaction(EventType.DRAG_STARTED, drag_mode="appointment", entity_id=appointment_id)
        return True

    def move_pointer(self, pointer_x: float, pointer_y: float) -> None:
        self.interaction = reschedule.track_pointer(self.interaction, pointer_x, pointer_y)

    def hover_cell(self, facility: str, day: date | datetime, pointer_x: float, cell_width: float) -> None:
        self.interaction = reschedule.hover_cell(
            self.interaction, facility, day, pointer_x, cell_width, self.settings.slot_count
        )

    def leave_cell(self, facility: str, day: date | datetime) -> None:
        self.interaction = reschedule.leave_cell(self.interaction, facility, day)

    def drop_on_cell(
        self,
        facility: str,
        day: date | datetime,
        pointer_x: float,
        cell_width: float,
    ) -> Optional[RescheduleCommand]:
        """Release over a cell; applies and reports the reschedule, if any."""
        self.interaction, command = reschedule.drop_on_cell(
            self.interaction,
            self.appointments,
            facility,
            day,
            pointer_x,
            cell_width,
            self.settings.slot_count,
        )
        if command is not None:
            self.apply(command)
        return command

    def apply(self, command: RescheduleCommand) -> None:
        """Merge a reschedule into a new appointment snapshot and notify the owner."""
        self.appointments = reschedule.apply_reschedule(self.appointments, command)
        self.obs.log_interaction(
            EventType.APPOINTMENT_RESCHEDULED,
            drag_mode="appointment",
            entity_id=command.appointment_id,
            target_facility=command.new_facility,
            target_day=command.new_start.date(),
            slot=command.new_start.hour,
            new_start=command.new_start,
            new_end=command.new_end,
        )
        if self.on_reschedule is not None:
            self.on_reschedule(
                command.appointment_id, command.new_start, command.new_end, command.new_facility
            )

    def end_drag(self) -> None:
        """Drag ended outside any cell or group: nothing is emitted."""
        if not self.interaction.is_idle:
            self.obs.log_interaction(
                EventType.DRAG_CANCELLED,
                drag_mode=self.interaction.mode.value,
                entity_id=self.interaction.dragged_appointment_id or self.interaction.dragged_group_id,
            )
        if self.interaction.dragging_group:
            self.interaction = reorder.end_group_drag(self.interaction)
        else:
            self.interaction = reschedule.end_drag(self.interaction)

    # ------------------------------------------------------------------
    # Group drag
    # ------------------------------------------------------------------

    def begin_group_drag(self, group_id: str) -> bool:
        """Start dragging a facility group. Returns False when the drag is refused."""
        if find_group(self.groups, group_id) is None:
            return False
        next_state = reorder.start_group_drag(self.interaction, group_id)
        if next_state is self.interaction:
            self.obs.log_interaction(
                EventType.DRAG_REFUSED,
                drag_mode="group",
                entity_id=group_id,
                reason=f"{self.interaction.mode.value} drag in progress",
            )
            return False
        self.interaction = next_state
        self.obs.log_interaction(EventType.DRAG_STARTED, drag_mode="group", entity_id=group_id)
        return True

    def hover_group(self, group_id: str, pointer_y: float, header_height: float) -> None:
        self.interaction = reorder.hover_group(self.interaction, group_id, pointer_y, header_height)

    def leave_group(self, group_id: str) -> None:
        self.interaction = reorder.leave_group(self.interaction, group_id)

    def drop_on_group(
        self,
        target_id: str,
        pointer_y: Optional[float] = None,
        header_height: Optional[float] = None,
    ) -> Optional[list[FacilityGroup]]:
        """Release a dragged group over another; applies and reports the new order."""
        dragged_id = self.interaction.dragged_group_id
        self.interaction, reordered = reorder.drop_on_group(
            self.interaction, self.groups, target_id, pointer_y, header_height
        )
        if reordered is None:
            return None

        self.groups = tuple(reordered)
        order = [g.id for g in reordered]
        position = "above" if order.index(dragged_id) < order.index(target_id) else "below"
        self.obs.log_interaction(
            EventType.GROUPS_REORDERED,
            drag_mode="group",
            entity_id=dragged_id,
            target_group_id=target_id,
            position=position,
            group_order=order,
        )
        if self.on_group_reorder is not None:
            self.on_group_reorder(list(reordered))
        return reordered
