"""Tests for observability logger."""

import json
from datetime import date
from unittest.mock import MagicMock

import pytest

from facility_calendar.observability import (
    EventType,
    InteractionEvent,
    LayoutEvent,
    LogStream,
    ObservabilityLogger,
    get_observability_logger,
)


@pytest.fixture
def temp_log_dir(tmp_path):
    """Create temporary log directory."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return log_dir


@pytest.fixture
def obs(temp_log_dir):
    """Create observability logger with temp directory."""
    return ObservabilityLogger(log_dir=temp_log_dir, enabled=True)


def _read(path):
    return [json.loads(line) for line in path.read_text().strip().split("\n")]


class TestObservabilityLogger:
    """Tests for ObservabilityLogger."""

    def test_init_creates_log_directory(self, tmp_path):
        """Test that init creates log directory if needed."""
        log_dir = tmp_path / "new_logs"
        ObservabilityLogger(log_dir=log_dir)

        assert log_dir.exists()

    def test_disabled_logger_writes_nothing(self, tmp_path):
        """Test that disabled logger doesn't write or create its directory."""
        log_dir = tmp_path / "disabled"
        logger = ObservabilityLogger(log_dir=log_dir, enabled=False)

        with logger.layout_run("week", date(2025, 6, 23)):
            pass
        logger.log_interaction(EventType.DRAG_STARTED, drag_mode="appointment", entity_id="1")

        assert not log_dir.exists()

    def test_layout_run_success(self, obs, temp_log_dir):
        """Test logging a successful layout run."""
        with obs.layout_run("week", date(2025, 6, 23), facility_count=7, appointment_count=6) as event:
            event.lane_count_max = 2

        events = _read(temp_log_dir / "layout_runs.jsonl")
        assert len(events) == 1
        assert events[0]["event_type"] == "layout_success"
        assert events[0]["view"] == "week"
        assert events[0]["facility_count"] == 7
        assert events[0]["lane_count_max"] == 2
        assert events[0]["duration_ms"] is not None

    def test_layout_run_error(self, obs, temp_log_dir):
        """Test logging a failed layout run."""
        with pytest.raises(RuntimeError):
            with obs.layout_run("day", date(2025, 6, 23)):
                raise RuntimeError("composer exploded")

        (event,) = _read(temp_log_dir / "layout_runs.jsonl")
        assert event["event_type"] == "layout_error"
        assert event["error_type"] == "RuntimeError"
        assert event["error_message"] == "composer exploded"

    def test_layout_warnings_emitted_separately(self, obs, temp_log_dir):
        """Test that each data-quality warning becomes its own event."""
        with obs.layout_run("day", date(2025, 6, 23)) as event:
            event.warnings = ["Appointment 7 ends at or before its start", "Appointment 8 ends at or before its start"]

        events = _read(temp_log_dir / "layout_runs.jsonl")
        assert [e["event_type"] for e in events] == ["layout_success", "layout_warning", "layout_warning"]
        assert events[1]["warnings"] == ["Appointment 7 ends at or before its start"]
        assert events[1]["request_id"] == events[0]["request_id"]

    def test_log_interaction(self, obs, temp_log_dir):
        """Test logging an applied reschedule."""
        event = obs.log_interaction(
            EventType.APPOINTMENT_RESCHEDULED,
            drag_mode="appointment",
            entity_id="3",
            target_facility="Kappu Hospital",
            slot=12,
        )

        assert isinstance(event, InteractionEvent)
        (logged,) = _read(temp_log_dir / "interactions.jsonl")
        assert logged["event_type"] == "appointment_rescheduled"
        assert logged["entity_id"] == "3"
        assert logged["target_facility"] == "Kappu Hospital"
        assert logged["slot"] == 12

    def test_session_id_attached(self, obs, temp_log_dir):
        """Test that the current session id is stamped on events."""
        obs.set_session_id("session-1")

        obs.log_interaction(EventType.DRAG_CANCELLED, drag_mode="group", entity_id="paras-group")

        (logged,) = _read(temp_log_dir / "interactions.jsonl")
        assert logged["session_id"] == "session-1"

    def test_callbacks_receive_events(self, obs):
        """Test real-time callbacks."""
        callback = MagicMock()
        obs.add_callback(callback)

        obs.log_interaction(EventType.DRAG_STARTED, drag_mode="appointment", entity_id="1")

        callback.assert_called_once()
        assert callback.call_args[0][0].event_type == EventType.DRAG_STARTED

    def test_failing_callback_does_not_break_logging(self, obs, temp_log_dir):
        """Test that a broken callback is only warned about."""
        obs.add_callback(MagicMock(side_effect=RuntimeError("boom")))

        obs.log_interaction(EventType.DRAG_STARTED, drag_mode="appointment", entity_id="1")

        assert len(_read(temp_log_dir / "interactions.jsonl")) == 1

    def test_get_recent_events_and_stats(self, obs):
        """Test reading back events and summarising them."""
        with obs.layout_run("week", date(2025, 6, 23)):
            pass
        with pytest.raises(ValueError):
            with obs.layout_run("week", date(2025, 6, 30)):
                raise ValueError("bad")

        events = obs.get_recent_events("layout")
        stats = obs.get_stats("layout")

        assert len(events) == 2
        assert stats["total"] == 2
        assert stats["errors"] == 1
        assert stats["error_rate"] == 0.5
        assert stats["avg_duration_ms"] >= 0

    def test_stats_break_down_by_view_and_type(self, obs):
        """Test that layout stats count views and event types."""
        with obs.layout_run("week", date(2025, 6, 23)) as event:
            event.warnings = ["Appointment 9 ends at or before its start"]
        with obs.layout_run("month", date(2025, 6, 1)):
            pass

        stats = obs.get_stats(LogStream.LAYOUT)

        assert stats["views"] == {"week": 2, "month": 1}
        assert stats["by_type"] == {"layout_success": 2, "layout_warning": 1}
        assert stats["warnings"] == 1

    def test_recent_events_keeps_the_tail(self, obs):
        for slot in range(5):
            obs.log_interaction(EventType.APPOINTMENT_RESCHEDULED, drag_mode="appointment", slot=slot)

        events = obs.get_recent_events("interaction", limit=2)

        assert [e["slot"] for e in events] == [3, 4]

    def test_stats_for_empty_log(self, obs):
        assert obs.get_stats("interaction") == {"total": 0}
        assert obs.get_recent_events("unknown") == []


class TestEvents:
    def test_layout_event_defaults(self):
        event = LayoutEvent(event_type=EventType.LAYOUT_START, view="month", anchor_date=date(2025, 6, 1))

        assert event.warnings == []
        assert event.timestamp is not None


class TestGlobalLogger:
    def test_singleton(self, isolated_observability):
        assert get_observability_logger() is isolated_observability
        assert get_observability_logger() is get_observability_logger()
