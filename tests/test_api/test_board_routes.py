"""Tests for the seeded board endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from facility_calendar.api.middleware import APIKeyMiddleware
from facility_calendar.api.routes import board, health


@pytest.fixture
def app(calendar_board):
    app = FastAPI()
    app.include_router(board.router, prefix="/api/v1")
    app.state.board = calendar_board
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestBoardViews:
    def test_week_view(self, client):
        response = client.get("/api/v1/board/week", params={"day": "2025-06-25"})

        assert response.status_code == 200
        assert response.json()["start_date"] == "2025-06-23"

    def test_view_defaults_to_current_date(self, client):
        response = client.get("/api/v1/board/day")

        assert response.json()["date"] == "2025-06-25"

    def test_month_view(self, client):
        response = client.get("/api/v1/board/month", params={"day": "2025-07-10"})

        assert response.json()["month"] == 7

    def test_unknown_view(self, client):
        assert client.get("/api/v1/board/quarter").status_code == 404

    def test_board_not_loaded(self):
        app = FastAPI()
        app.include_router(board.router, prefix="/api/v1")

        response = TestClient(app).get("/api/v1/board/week")

        assert response.status_code == 503


class TestAppointmentDrop:
    def test_drop_moves_appointment(self, client, calendar_board):
        response = client.post(
            "/api/v1/board/appointments/3/drop",
            json={"facility": "Kappu Hospital", "day": "2025-06-24", "pointer_x": 600, "cell_width": 1200},
        )

        assert response.status_code == 200
        assert response.json()["new_start"] == "2025-06-24T12:00:00"
        assert response.json()["new_end"] == "2025-06-25T08:00:00"
        assert calendar_board.find_appointment("3").facility == "Kappu Hospital"
        assert calendar_board.interaction.is_idle

    def test_drop_unknown_appointment(self, client):
        response = client.post(
            "/api/v1/board/appointments/nope/drop",
            json={"facility": "Kappu Hospital", "day": "2025-06-24", "pointer_x": 600, "cell_width": 1200},
        )

        assert response.status_code == 404

    def test_drop_refused_while_group_dragged(self, client, calendar_board):
        calendar_board.begin_group_drag("paras-group")

        response = client.post(
            "/api/v1/board/appointments/3/drop",
            json={"facility": "Kappu Hospital", "day": "2025-06-24", "pointer_x": 600, "cell_width": 1200},
        )

        assert response.status_code == 409


class TestGroupDrop:
    def test_drop_reorders_groups(self, client, calendar_board):
        response = client.post(
            "/api/v1/board/groups/other-group/drop",
            json={"target_id": "paras-group", "pointer_y": 2, "header_height": 40},
        )

        assert response.status_code == 200
        assert response.json()["changed"] is True
        assert [g.id for g in calendar_board.groups] == ["other-group", "paras-group", "kappu-group"]

        snapshot = client.get("/api/v1/board").json()
        assert [g["id"] for g in snapshot["facility_groups"]] == ["other-group", "paras-group", "kappu-group"]

    def test_drop_onto_itself(self, client):
        response = client.post(
            "/api/v1/board/groups/paras-group/drop",
            json={"target_id": "paras-group", "pointer_y": 2, "header_height": 40},
        )

        assert response.json()["changed"] is False

    def test_unknown_group(self, client):
        response = client.post(
            "/api/v1/board/groups/paras-group/drop",
            json={"target_id": "missing", "pointer_y": 2, "header_height": 40},
        )

        assert response.status_code == 404


class TestAPIKey:
    @pytest.fixture
    def secured_client(self, calendar_board):
        app = FastAPI()
        app.include_router(health.router)
        app.include_router(board.router, prefix="/api/v1")
        app.add_middleware(APIKeyMiddleware, api_key="secret")
        app.state.board = calendar_board
        return TestClient(app)

    def test_missing_key_rejected(self, secured_client):
        assert secured_client.get("/api/v1/board/week").status_code == 401

    def test_header_key_accepted(self, secured_client):
        response = secured_client.get("/api/v1/board/week", headers={"X-API-Key": "secret"})

        assert response.status_code == 200

    def test_bearer_key_accepted(self, secured_client):
        response = secured_client.get("/api/v1/board/week", headers={"Authorization": "Bearer secret"})

        assert response.status_code == 200

    def test_health_skips_auth(self, secured_client):
        assert secured_client.get("/health").status_code == 200
