"""Tests for the HTTP routes and their error envelopes.

Store calls are monkeypatched; the lifespan (pool open/close) is not entered.
"""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient

from coursequest.api.main import create_api
from coursequest.db.query import StoreError
from coursequest.intent.schema import DeliveryMode, Level, SearchRequest
from coursequest.search.compare import build_comparison
from coursequest.search.formatter import format_search_response
from coursequest.search.pagination import paginate

_ROW = {
    "course_id": "MGT501",
    "course_name": "Strategic Management",
    "department": "Management",
    "level": "PG",
    "delivery_mode": "online",
    "credits": 4,
    "duration_weeks": 10,
    "rating": Decimal("4.6"),
    "tuition_fee_inr": 120000,
    "year_offered": 2023,
}


def _client(*, production: bool = False) -> TestClient:
    app = SimpleNamespace(
        settings=SimpleNamespace(
            is_production=production,
            app_env="production" if production else "test",
        ),
        pool=object(),
    )
    return TestClient(create_api(app), raise_server_exceptions=False)  # type: ignore[arg-type]


def _capture_search(monkeypatch: pytest.MonkeyPatch) -> list[SearchRequest]:
    seen: list[SearchRequest] = []

    async def _fake_search(_pool: Any, request: SearchRequest):
        seen.append(request)
        return format_search_response([_ROW], paginate(request.page, request.per_page, 1))

    monkeypatch.setattr("coursequest.api.routes.search_courses", _fake_search)
    return seen


def test_ask_runs_extracted_filters(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _capture_search(monkeypatch)

    resp = _client().post(
        "/api/ask",
        json={"question": "online postgraduate management courses rated above 4", "page": 1},
    )

    assert resp.status_code == 200
    assert seen[0].filters.as_dict() == {
        "delivery_mode": DeliveryMode.online,
        "level": Level.PG,
        "department": "Management",
        "min_rating": 4.0,
    }
    body = resp.json()
    assert body["data"][0]["course_id"] == "MGT501"
    assert body["data"][0]["rating"] == "4.6"
    assert body["meta"] == {
        "total_count": 1,
        "page": 1,
        "per_page": 10,
        "total_pages": 1,
        "has_next_page": False,
        "has_prev_page": False,
    }


def test_ask_rejects_blank_question() -> None:
    resp = _client().post("/api/ask", json={"question": "  "})

    assert resp.status_code == 400
    assert resp.json() == {
        "error": "Validation Error",
        "message": "Invalid question: must not be empty",
    }


def test_ask_rejects_missing_body_field() -> None:
    resp = _client().post("/api/ask", json={})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Validation Error"


def test_courses_validates_explicit_params(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _capture_search(monkeypatch)

    resp = _client().get("/api/courses", params={"min_credits": "10", "max_credits": "4"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid min_credits: must be <= max_credits"
    assert seen == []


def test_courses_normalizes_params(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _capture_search(monkeypatch)

    resp = _client().get(
        "/api/courses",
        params={"level": "pg", "per_page": "500", "sort_by": "credits", "sort_dir": "desc"},
    )

    assert resp.status_code == 200
    request = seen[0]
    assert request.filters.level == Level.PG
    assert request.per_page == 100
    assert [key.column.value for key in request.sort] == ["credits", "course_id"]


def test_compare_passes_parsed_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[list[str]] = []

    async def _fake_compare(_pool: Any, course_ids: list[str]):
        seen.append(list(course_ids))
        return build_comparison(course_ids, [_ROW])

    monkeypatch.setattr("coursequest.api.routes.compare_courses", _fake_compare)

    resp = _client().get("/api/compare", params={"ids": "MGT501, X1,MGT501"})

    assert resp.status_code == 200
    assert seen == [["MGT501", "X1"]]
    body = resp.json()
    assert body["missing_ids"] == ["X1"]
    assert body["courses"][0]["rating"] == 4.6
    assert "insights" not in body


def test_compare_requires_ids() -> None:
    resp = _client().get("/api/compare")

    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required parameter"


def test_compare_caps_ids() -> None:
    resp = _client().get("/api/compare", params={"ids": "a,b,c,d,e"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Too many course IDs"


@pytest.mark.parametrize(("production", "leaks"), [(True, False), (False, True)])
def test_store_errors_are_opaque_in_production(
        monkeypatch: pytest.MonkeyPatch, production: bool, leaks: bool
) -> None:
    async def _failing_search(_pool: Any, _request: SearchRequest):
        raise StoreError("row query failed")

    monkeypatch.setattr("coursequest.api.routes.search_courses", _failing_search)

    resp = _client(production=production).get("/api/courses")

    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Internal Server Error"
    assert ("row query failed" in body["message"]) is leaks


def test_unexpected_errors_return_500(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _broken_search(_pool: Any, _request: SearchRequest):
        raise KeyError("boom")

    monkeypatch.setattr("coursequest.api.routes.search_courses", _broken_search)

    resp = _client(production=True).get("/api/courses")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal Server Error", "message": "Unexpected server error"}


@pytest.mark.parametrize(
    ("reachable", "status", "body"),
    [
        (True, 200, {"status": "healthy", "database": "connected"}),
        (False, 503, {"status": "unhealthy", "database": "disconnected"}),
    ],
)
def test_health(monkeypatch: pytest.MonkeyPatch, reachable: bool, status: int, body: dict) -> None:
    async def _fake_ping(_pool: Any) -> bool:
        return reachable

    monkeypatch.setattr("coursequest.api.routes.ping", _fake_ping)

    resp = _client().get("/health")

    assert resp.status_code == status
    assert resp.json() == body
