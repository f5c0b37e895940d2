"""Pydantic models for the facility calendar."""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CalendarView(str, Enum):
    """Calendar layouts the composer can build."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class Appointment(BaseModel):
    """A booked appointment at a facility.

    Times are naive local datetimes. An appointment whose end is not after
    its start is accepted; the layout engine renders it at minimum size.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    provider: str
    facility: str
    type: str = ""
    start_time: datetime = Field(validation_alias=AliasChoices("start_time", "startTime"))
    end_time: datetime = Field(validation_alias=AliasChoices("end_time", "endTime"))
    color: str = ""

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def is_malformed(self) -> bool:
        """True when the interval is empty or inverted."""
        return self.end_time <= self.start_time


class FacilityGroup(BaseModel):
    """A named, ordered cluster of facility rows reordered as a unit."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    facilities: list[str] = Field(default_factory=list)
    color: Optional[str] = None

    @field_validator("facilities")
    @classmethod
    def _unique_facilities(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        for facility in value:
            if facility in seen:
                raise ValueError(f"Facility listed twice in group: {facility!r}")
            seen.add(facility)
        return value


class Board(BaseModel):
    """Everything the composer needs: facilities, optional groups, appointments."""

    facilities: list[str]
    facility_groups: list[FacilityGroup] = Field(
        default_factory=list,
        validation_alias=AliasChoices("facility_groups", "facilityGroups"),
    )
    appointments: list[Appointment] = Field(default_factory=list)


class RescheduleCommand(BaseModel):
    """Proposed move of an appointment produced by a drop."""

    model_config = ConfigDict(frozen=True)

    appointment_id: str
    new_start: datetime
    new_end: datetime
    new_facility: str


# ---------------------------------------------------------------------------
# Layout output
# ---------------------------------------------------------------------------


class DaySegment(BaseModel):
    """Horizontal extent of one appointment within one visible day."""

    appointment_id: str
    day: date
    left: float = Field(description="Offset from the start of the day axis, in percent")
    width: float = Field(description="Extent along the day axis, in percent")
    is_first_day: bool
    is_last_day: bool
    is_middle_day: bool
    is_multi_day: bool
    rounded_start: bool
    rounded_end: bool
    label: Optional[str] = None


class PlacedAppointment(BaseModel):
    """An appointment positioned inside a facility row or cell."""

    appointment: Appointment
    lane: int
    segment: DaySegment
    top: int
    height: int
    draggable: bool = True
    is_dragging: bool = False


class SlotHighlight(BaseModel):
    """Drop-zone highlight for the hovered hour slot."""

    slot: int
    left: float
    width: float


class FacilityRow(BaseModel):
    """Day view row: one facility across the 24-hour axis."""

    facility: str
    lane_count: int
    height: int
    items: list[PlacedAppointment] = Field(default_factory=list)
    accepts_drop: bool = True
    highlight: Optional[SlotHighlight] = None


class DayGrid(BaseModel):
    view: CalendarView = CalendarView.DAY
    date: date
    title: str
    time_markers: list[int]
    rows: list[FacilityRow] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class WeekCell(BaseModel):
    """Week view cell: one facility on one day."""

    date: date
    lane_count: int
    height: int
    items: list[PlacedAppointment] = Field(default_factory=list)
    accepts_drop: bool = True
    is_drag_source: bool = False
    highlight: Optional[SlotHighlight] = None


class WeekRow(BaseModel):
    facility: str
    cells: list[WeekCell] = Field(default_factory=list)


class GroupSection(BaseModel):
    """A facility group header followed by its facility rows."""

    group: FacilityGroup
    rows: list[WeekRow] = Field(default_factory=list)
    is_dragged: bool = False
    is_drop_target: bool = False
    drop_position: Optional[str] = None


class DragPreview(BaseModel):
    """Floating copy of the dragged appointment, one segment per spanned date."""

    appointment_id: str
    left: float
    top: float
    segments: list[DaySegment] = Field(default_factory=list)


class WeekGrid(BaseModel):
    view: CalendarView = CalendarView.WEEK
    start_date: date
    dates: list[date]
    day_labels: list[str]
    time_markers: list[int]
    sections: list[GroupSection] = Field(default_factory=list)
    drag_preview: Optional[DragPreview] = None
    warnings: list[str] = Field(default_factory=list)


class TypeBadge(BaseModel):
    type: str
    count: int
    color: str = ""


class MonthCell(BaseModel):
    date: date
    in_current_month: bool
    is_today: bool
    appointment_count: int
    badges: list[TypeBadge] = Field(default_factory=list)
    hidden_type_count: int = 0
    summaries: list[str] = Field(default_factory=list)
    hidden_summary_count: int = 0


class MonthGrid(BaseModel):
    view: CalendarView = CalendarView.MONTH
    year: int
    month: int
    weekday_labels: list[str]
    cells: list[MonthCell] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
