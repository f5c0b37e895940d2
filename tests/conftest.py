"""Pytest configuration and fixtures."""

import json
from datetime import date
from pathlib import Path

import pytest

from facility_calendar.config import Settings
from facility_calendar.interaction.board import CalendarBoard
from facility_calendar.observability import ObservabilityLogger
from facility_calendar.scheduling.models import Board, FacilityGroup

SEED_PATH = Path(__file__).resolve().parent.parent / "facility_calendar" / "data" / "sample_board.json"


@pytest.fixture(autouse=True)
def isolated_observability(tmp_path, monkeypatch):
    """Route the global observability logger into a temp directory."""
    obs = ObservabilityLogger(log_dir=tmp_path / "obs_logs", enabled=True)
    monkeypatch.setattr(ObservabilityLogger, "_instance", obs)
    return obs


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def seed_data() -> dict:
    """Raw JSON of the bundled sample board."""
    return json.loads(SEED_PATH.read_text())


@pytest.fixture
def sample_board(seed_data) -> Board:
    return Board.model_validate(seed_data)


@pytest.fixture
def groups_abc():
    return [
        FacilityGroup(id="A", name="Group A", facilities=["a1", "a2"]),
        FacilityGroup(id="B", name="Group B", facilities=["b1"]),
        FacilityGroup(id="C", name="Group C", facilities=["c1", "c2"]),
    ]


@pytest.fixture
def obs_logger(tmp_path):
    """Observability logger writing into a temp directory."""
    return ObservabilityLogger(log_dir=tmp_path / "logs", enabled=True)


@pytest.fixture
def calendar_board(sample_board, settings, obs_logger):
    """Board seeded with the sample data, anchored on Wednesday 2025-06-25."""
    board = CalendarBoard.from_board(sample_board, settings=settings, observability=obs_logger)
    board.go_to(date(2025, 6, 25))
    return board
