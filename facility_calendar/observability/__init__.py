"""Observability module for layout and interaction telemetry."""

from facility_calendar.observability.events import (
    EventType,
    InteractionEvent,
    LayoutEvent,
    ObservabilityEvent,
)
from facility_calendar.observability.logger import LogStream, ObservabilityLogger, get_observability_logger

__all__ = [
    "EventType",
    "InteractionEvent",
    "LayoutEvent",
    "LogStream",
    "ObservabilityEvent",
    "ObservabilityLogger",
    "get_observability_logger",
]
