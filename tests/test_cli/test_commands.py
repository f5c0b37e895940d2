"""Tests for CLI commands."""

import json
import shutil

import pytest
from typer.testing import CliRunner

from facility_calendar.cli.commands import app


runner = CliRunner()


@pytest.fixture
def board_file(tmp_path, settings):
    """Writable copy of the bundled sample board."""
    path = tmp_path / "board.json"
    shutil.copy(settings.board_seed_path, path)
    return path


class TestShowCommand:
    """Tests for show command."""

    def test_week_table(self, board_file):
        result = runner.invoke(app, ["show", "week", "--date", "2025-06-25", "--data", str(board_file)])

        assert result.exit_code == 0
        assert "Week of Mon, 06/23/2025" in result.stdout

    def test_day_json(self, board_file):
        result = runner.invoke(
            app, ["show", "day", "--date", "2025-06-25", "--data", str(board_file), "--json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["view"] == "day"
        assert len(data["rows"]) == 7

    def test_month_table(self, board_file):
        result = runner.invoke(app, ["show", "month", "--date", "2025-06-25", "--data", str(board_file)])

        assert result.exit_code == 0
        assert "2025-06" in result.stdout

    def test_defaults_to_bundled_board(self):
        result = runner.invoke(app, ["show", "day", "--date", "2025-06-25", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["date"] == "2025-06-25"

    def test_invalid_view(self, board_file):
        result = runner.invoke(app, ["show", "year", "--data", str(board_file)])

        assert result.exit_code == 1
        assert "Invalid view" in result.stdout

    def test_invalid_date(self, board_file):
        result = runner.invoke(app, ["show", "week", "--date", "25/06/2025", "--data", str(board_file)])

        assert result.exit_code == 1
        assert "Invalid date" in result.stdout

    def test_missing_board_file(self, tmp_path):
        result = runner.invoke(app, ["show", "week", "--data", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Board file not found" in result.stdout


class TestMoveCommand:
    """Tests for move command."""

    def test_move_json(self, board_file):
        result = runner.invoke(
            app,
            ["move", "3", "Kappu Hospital", "2025-06-24", "--slot", "12", "--data", str(board_file), "--json"],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["new_start"] == "2025-06-24T12:00:00"
        assert data["new_end"] == "2025-06-25T08:00:00"

    def test_move_without_save_leaves_file(self, board_file):
        before = board_file.read_text()

        result = runner.invoke(
            app, ["move", "3", "Kappu Hospital", "2025-06-24", "--slot", "12", "--data", str(board_file)]
        )

        assert result.exit_code == 0
        assert "Rescheduled" in result.stdout
        assert board_file.read_text() == before

    def test_move_and_save(self, board_file):
        result = runner.invoke(
            app,
            ["move", "3", "Kappu Hospital", "2025-06-24", "--slot", "12", "--data", str(board_file), "--save"],
        )

        assert result.exit_code == 0
        saved = json.loads(board_file.read_text())
        moved = next(a for a in saved["appointments"] if a["id"] == "3")
        assert moved["facility"] == "Kappu Hospital"
        assert moved["start_time"] == "2025-06-24T12:00:00"

    def test_unknown_appointment(self, board_file):
        result = runner.invoke(
            app, ["move", "99", "Kappu Hospital", "2025-06-24", "--slot", "12", "--data", str(board_file)]
        )

        assert result.exit_code == 1
        assert "Appointment not found" in result.stdout

    def test_slot_out_of_range(self, board_file):
        result = runner.invoke(
            app, ["move", "3", "Kappu Hospital", "2025-06-24", "--slot", "24", "--data", str(board_file)]
        )

        assert result.exit_code != 0


class TestGroupCommands:
    """Tests for groups and reorder commands."""

    def test_groups(self, board_file):
        result = runner.invoke(app, ["groups", "--data", str(board_file)])

        assert result.exit_code == 0
        assert "Facility Groups" in result.stdout

    def test_reorder_and_save(self, board_file):
        result = runner.invoke(
            app,
            ["reorder", "other-group", "paras-group", "--position", "above", "--data", str(board_file), "--save"],
        )

        assert result.exit_code == 0
        saved = json.loads(board_file.read_text())
        assert [g["id"] for g in saved["facility_groups"]] == ["other-group", "paras-group", "kappu-group"]

    def test_reorder_onto_itself(self, board_file):
        result = runner.invoke(app, ["reorder", "paras-group", "paras-group", "--data", str(board_file)])

        assert result.exit_code == 0
        assert "unchanged" in result.stdout

    def test_reorder_unknown_group(self, board_file):
        result = runner.invoke(app, ["reorder", "missing", "paras-group", "--data", str(board_file)])

        assert result.exit_code == 1
        assert "Group not found" in result.stdout

    def test_reorder_invalid_position(self, board_file):
        result = runner.invoke(
            app, ["reorder", "other-group", "paras-group", "--position", "left", "--data", str(board_file)]
        )

        assert result.exit_code == 1
        assert "Invalid position" in result.stdout


class TestVersionCommand:
    """Tests for version command."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "Facility Calendar v0.1.0" in result.stdout


class TestProgrammaticAPI:
    """Tests for the programmatic entry point."""

    def test_render_board(self):
        from datetime import date

        from facility_calendar.main import render_board

        grid = render_board("day", date(2025, 6, 25))

        assert grid.date == date(2025, 6, 25)
        assert len(grid.rows) == 7

    def test_render_board_rejects_unknown_view(self):
        from facility_calendar.main import render_board

        with pytest.raises(ValueError):
            render_board("year")
