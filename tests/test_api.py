"""
Tests for the availability HTTP endpoint.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from spacebook.application.exceptions import CheckTimeout, DataSourceError
from spacebook.application.ports.availability_source import AvailabilitySource
from spacebook.application.use_cases.availability_oracle import AvailabilityOracle
from spacebook.application.use_cases.check_availability import CheckAvailabilityUseCase
from spacebook.domain.entities.time_interval import OperatingWindow, TimeInterval
from spacebook.domain.entities.verdict import PartialConflict
from spacebook.infrastructure.availability.http_source import HttpAvailabilitySource
from spacebook.infrastructure.availability.memory_source import InMemoryAvailabilitySource
from spacebook.main import app
from spacebook.wiring import dependencies
from spacebook.wiring.dependencies import get_check_availability_use_case


class FailingSource(AvailabilitySource):
    async def query_booked_intervals(self, space_id: str, date: str) -> set[TimeInterval]:
        raise DataSourceError("backend down")


class HangingSource(AvailabilitySource):
    async def query_booked_intervals(self, space_id: str, date: str) -> set[TimeInterval]:
        await asyncio.sleep(10)
        return set()


@pytest.fixture
def source() -> InMemoryAvailabilitySource:
    source = InMemoryAvailabilitySource()
    source.add_booking("1", "2024-12-25", TimeInterval(600, 720))
    source.add_booking("1", "2024-12-27", TimeInterval(660, 780))
    return source


@pytest.fixture
def client(source):
    oracle = AvailabilityOracle(operating_window=OperatingWindow(9 * 60, 18 * 60))
    app.dependency_overrides[get_check_availability_use_case] = lambda: CheckAvailabilityUseCase(oracle, source)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_full_conflict_response(client):
    response = client.post(
        "/api/v1/availability/check",
        json={"space_id": "1", "date": "2024-12-25", "start_time": "10:00", "duration_hours": 2},
    )

    assert response.status_code == 200
    assert response.json() == {
        "space_id": "1",
        "date": "2024-12-25",
        "has_conflict": True,
        "conflict_type": "full",
        "message": "This space was just booked for your selected time.",
        "available_slots": [{"start": "09:00", "end": "10:00"}, {"start": "12:00", "end": "18:00"}],
    }


def test_partial_conflict_response(client):
    response = client.post(
        "/api/v1/availability/check",
        json={"space_id": "1", "date": "2024-12-27", "start_time": "09:00", "duration_hours": 3},
    )

    body = response.json()
    assert body["conflict_type"] == "partial"
    assert {"start": "09:00", "end": "11:00"} in body["available_slots"]


def test_free_slot_response(client):
    response = client.post(
        "/api/v1/availability/check",
        json={"space_id": "1", "date": "2024-12-30", "start_time": "13:00", "duration_hours": 1},
    )

    assert response.json() == {
        "space_id": "1",
        "date": "2024-12-30",
        "has_conflict": False,
        "conflict_type": None,
        "message": None,
        "available_slots": [],
    }


@pytest.mark.parametrize(
    "payload",
    [
        {"space_id": "1", "date": "2024-12-25", "start_time": "25:00", "duration_hours": 1},
        {"space_id": "1", "date": "2024-12-25", "start_time": "10:00", "duration_hours": 0},
        {"space_id": "1", "date": "25/12/2024", "start_time": "10:00", "duration_hours": 1},
    ],
)
def test_invalid_input_is_400(client, payload):
    assert client.post("/api/v1/availability/check", json=payload).status_code == 400


def test_source_failure_is_502():
    app.dependency_overrides[get_check_availability_use_case] = lambda: CheckAvailabilityUseCase(
        AvailabilityOracle(), FailingSource()
    )
    try:
        response = TestClient(app).post(
            "/api/v1/availability/check",
            json={"space_id": "1", "date": "2024-12-25", "start_time": "10:00", "duration_hours": 1},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 502
    assert response.json()["detail"] == "backend down"


def test_use_case_times_out():
    use_case = CheckAvailabilityUseCase(AvailabilityOracle(), HangingSource(), timeout_seconds=0.01)

    with pytest.raises(CheckTimeout):
        asyncio.run(use_case.execute("1", "2024-12-25", "10:00", 1))


def test_use_case_returns_normalized_request(source):
    use_case = CheckAvailabilityUseCase(AvailabilityOracle(), source)

    request, verdict = asyncio.run(use_case.execute("1", "2024-12-27", "10:00", 2))

    assert request.interval == TimeInterval(600, 720)
    assert isinstance(verdict, PartialConflict)


def test_use_case_checks_next_day_for_overnight_request():
    source = InMemoryAvailabilitySource()
    source.add_booking("1", "2025-01-01", TimeInterval(30, 90))
    use_case = CheckAvailabilityUseCase(AvailabilityOracle(), source)

    _, verdict = asyncio.run(use_case.execute("1", "2024-12-31", "23:00", 3))

    assert verdict.has_conflict
    assert isinstance(verdict, PartialConflict)


def test_slot_ending_at_midnight_renders_as_24_00():
    source = InMemoryAvailabilitySource()
    source.add_booking("1", "2024-12-25", TimeInterval(600, 720))
    app.dependency_overrides[get_check_availability_use_case] = lambda: CheckAvailabilityUseCase(
        AvailabilityOracle(), source
    )
    try:
        response = TestClient(app).post(
            "/api/v1/availability/check",
            json={"space_id": "1", "date": "2024-12-25", "start_time": "10:00", "duration_hours": 2},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.json()["available_slots"] == [
        {"start": "00:00", "end": "10:00"},
        {"start": "12:00", "end": "24:00"},
    ]


def test_shutdown_closes_http_client(monkeypatch):
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    source = HttpAvailabilitySource(base_url="https://bookings.test/api/", client=client)
    monkeypatch.setattr(dependencies, "_availability_source", source)

    with TestClient(app) as test_client:
        assert test_client.get("/health").status_code == 200
        assert not client.is_closed

    assert client.is_closed
    assert dependencies._availability_source is None
