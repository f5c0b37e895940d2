"""Structured observability events for layout runs and drag interactions."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Types of observability events."""

    LAYOUT_START = "layout_start"
    LAYOUT_SUCCESS = "layout_success"
    LAYOUT_ERROR = "layout_error"
    LAYOUT_WARNING = "layout_warning"
    DRAG_STARTED = "drag_started"
    DRAG_CANCELLED = "drag_cancelled"
    DRAG_REFUSED = "drag_refused"
    APPOINTMENT_RESCHEDULED = "appointment_rescheduled"
    GROUPS_REORDERED = "groups_reordered"


class ObservabilityEvent(BaseModel):
    """Base class for all observability events."""

    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: Optional[str] = None
    request_id: Optional[str] = None
    duration_ms: Optional[float] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class LayoutEvent(ObservabilityEvent):
    """Event for one composition of a day, week or month grid."""

    view: str
    anchor_date: date
    facility_count: int = 0
    appointment_count: int = 0

    # Populated on success
    lane_count_max: Optional[int] = None
    warnings: list[str] = Field(default_factory=list)

    # Error fields (populated on error)
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class InteractionEvent(ObservabilityEvent):
    """Event for appointment drags and group reorders."""

    drag_mode: str
    entity_id: Optional[str] = None

    # Appointment drops
    target_facility: Optional[str] = None
    target_day: Optional[date] = None
    slot: Optional[int] = None
    new_start: Optional[datetime] = None
    new_end: Optional[datetime] = None

    # Group drops
    target_group_id: Optional[str] = None
    position: Optional[str] = None
    group_order: list[str] = Field(default_factory=list)

    reason: Optional[str] = None
