"""Observability logger for structured calendar telemetry."""

import json
import logging
import time
import uuid
from collections import Counter, deque
from contextlib import contextmanager
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from facility_calendar.observability.events import (
    EventType,
    InteractionEvent,
    LayoutEvent,
    ObservabilityEvent,
)

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = Path("data/logs")


class LogStream(str, Enum):
    """The JSON Lines files events are appended to."""

    LAYOUT = "layout"
    INTERACTION = "interaction"

    @property
    def filename(self) -> str:
        return {"layout": "layout_runs.jsonl", "interaction": "interactions.jsonl"}[self.value]


EventCallback = Callable[[ObservabilityEvent], None]


class ObservabilityLogger:
    """Central logger for layout and interaction events.

    Every grid composition and every drag transition that changes the board
    is appended as one JSON object per line, under ``log_dir``. Registered
    callbacks see each event as it is written.
    """

    _instance: Optional["ObservabilityLogger"] = None

    def __init__(self, log_dir: Optional[Path] = None, enabled: bool = True):
        self.enabled = enabled
        self.log_dir = Path(log_dir) if log_dir is not None else DEFAULT_LOG_DIR
        if enabled:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._subscribers: list[EventCallback] = []
        self._session_id: Optional[str] = None

    @classmethod
    def get_instance(cls) -> "ObservabilityLogger":
        """Return the process-wide logger, building it from settings on first use."""
        if cls._instance is None:
            from facility_calendar.config import get_settings

            settings = get_settings()
            cls._instance = cls(
                log_dir=settings.observability_log_dir,
                enabled=settings.observability_enabled,
            )
        return cls._instance

    def path_for(self, stream: LogStream | str) -> Path:
        return self.log_dir / LogStream(stream).filename

    def set_session_id(self, session_id: str) -> None:
        """Stamp subsequent events with *session_id* unless they carry their own."""
        self._session_id = session_id

    @staticmethod
    def new_request_id() -> str:
        return uuid.uuid4().hex[:8]

    def add_callback(self, callback: EventCallback) -> None:
        self._subscribers.append(callback)

    def _emit(self, event: ObservabilityEvent, stream: LogStream) -> None:
        if not self.enabled:
            return

        if event.session_id is None:
            event.session_id = self._session_id

        try:
            with self.path_for(stream).open("a") as fh:
                fh.write(event.model_dump_json() + "\n")
        except OSError as e:
            logger.warning(f"Could not append to {stream.value} log: {e}")

        for subscriber in self._subscribers:
            try:
                subscriber(event)
            except Exception as e:
                logger.warning(f"Observability callback {subscriber!r} failed: {e}")

    @contextmanager
    def layout_run(
        self,
        view: str,
        anchor_date: date,
        facility_count: int = 0,
        appointment_count: int = 0,
        request_id: Optional[str] = None,
    ) -> Iterator[LayoutEvent]:
        """Time one grid composition.

        The yielded event can be filled in by the caller (``lane_count_max``,
        ``warnings``). On exit a ``layout_success`` or ``layout_error`` record
        is written, followed by one ``layout_warning`` record per warning.

        Usage:
            with obs.layout_run("week", day, len(facilities), len(appointments)) as event:
                grid = compose_week(...)
                event.warnings = grid.warnings
        """
        event = LayoutEvent(
            event_type=EventType.LAYOUT_START,
            view=view,
            anchor_date=anchor_date,
            facility_count=facility_count,
            appointment_count=appointment_count,
            request_id=request_id or self.new_request_id(),
        )
        started = time.perf_counter()

        try:
            yield event
        except Exception as e:
            event.event_type = EventType.LAYOUT_ERROR
            event.error_type = type(e).__name__
            event.error_message = str(e)[:200]
            raise
        else:
            event.event_type = EventType.LAYOUT_SUCCESS
        finally:
            event.duration_ms = (time.perf_counter() - started) * 1000
            self._emit(event, LogStream.LAYOUT)

        for warning in event.warnings:
            self._emit(
                LayoutEvent(
                    event_type=EventType.LAYOUT_WARNING,
                    view=view,
                    anchor_date=anchor_date,
                    warnings=[warning],
                    request_id=event.request_id,
                ),
                LogStream.LAYOUT,
            )

    def log_interaction(
        self,
        event_type: EventType,
        drag_mode: str,
        entity_id: Optional[str] = None,
        request_id: Optional[str] = None,
        **details: Any,
    ) -> InteractionEvent:
        """Record a drag start, cancel, refusal or applied drop."""
        event = InteractionEvent(
            event_type=event_type,
            drag_mode=drag_mode,
            entity_id=entity_id,
            request_id=request_id,
            **details,
        )
        self._emit(event, LogStream.INTERACTION)
        return event

    def get_recent_events(self, stream: LogStream | str, limit: int = 100) -> list[dict[str, Any]]:
        """Return the last *limit* parseable records of a stream, oldest first."""
        try:
            path = self.path_for(stream)
        except ValueError:
            return []
        if not path.exists():
            return []

        tail: deque[dict[str, Any]] = deque(maxlen=limit)
        with path.open() as fh:
            for line in fh:
                try:
                    tail.append(json.loads(line))
                except json.JSONDecodeError:
                    logger.debug(f"Skipping unreadable line in {path}")
        return list(tail)

    def get_stats(self, stream: LogStream | str) -> dict[str, Any]:
        """Summarise the last thousand records of a stream."""
        events = self.get_recent_events(stream, limit=1000)
        if not events:
            return {"total": 0}

        by_type = Counter(e.get("event_type", "") for e in events)
        errors = by_type[EventType.LAYOUT_ERROR.value]
        timed = [e["duration_ms"] for e in events if e.get("duration_ms") is not None]

        return {
            "total": len(events),
            "by_type": dict(by_type),
            "errors": errors,
            "warnings": by_type[EventType.LAYOUT_WARNING.value],
            "error_rate": errors / len(events),
            "avg_duration_ms": sum(timed) / len(timed) if timed else 0.0,
            "views": dict(Counter(e["view"] for e in events if "view" in e)),
        }


def get_observability_logger() -> ObservabilityLogger:
    """Get the global observability logger instance."""
    return ObservabilityLogger.get_instance()
