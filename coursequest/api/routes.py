"""HTTP routes: free-text search, explicit search, comparison and health."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from coursequest.app import App
from coursequest.db.pool import ping
from coursequest.intent.parser import parse_params, parse_question
from coursequest.search.compare import parse_compare_ids
from coursequest.search.service import compare_courses, search_courses

router = APIRouter()


class AskRequest(BaseModel):
    question: str
    page: int | str | None = None
    per_page: int | str | None = None


def get_app(request: Request) -> App:
    return request.app.state.app


@router.post("/api/ask")
async def ask(body: AskRequest, app: App = Depends(get_app)) -> dict[str, Any]:
    parsed = parse_question(body.question, page=body.page, per_page=body.per_page)
    response = await search_courses(app.pool, parsed.request)
    return response.to_payload()


@router.get("/api/courses")
async def list_courses(
        app: App = Depends(get_app),
        q: str | None = None,
        department: str | None = None,
        level: str | None = None,
        delivery_mode: str | None = None,
        min_fee: str | None = None,
        max_fee: str | None = None,
        min_rating: str | None = None,
        max_rating: str | None = None,
        min_credits: str | None = None,
        max_credits: str | None = None,
        min_duration_weeks: str | None = None,
        max_duration_weeks: str | None = None,
        year_offered: str | None = None,
        page: str | None = None,
        per_page: str | None = None,
        sort_by: str | None = None,
        sort_dir: str | None = None,
) -> dict[str, Any]:
    # Values stay raw strings; the filter validator coerces them.
    params = {
        "q": q,
        "department": department,
        "level": level,
        "delivery_mode": delivery_mode,
        "min_fee": min_fee,
        "max_fee": max_fee,
        "min_rating": min_rating,
        "max_rating": max_rating,
        "min_credits": min_credits,
        "max_credits": max_credits,
        "min_duration_weeks": min_duration_weeks,
        "max_duration_weeks": max_duration_weeks,
        "year_offered": year_offered,
        "page": page,
        "per_page": per_page,
        "sort_by": sort_by,
        "sort_dir": sort_dir,
    }
    parsed = parse_params(params)
    response = await search_courses(app.pool, parsed.request)
    return response.to_payload()


@router.get("/api/compare")
async def compare(
        app: App = Depends(get_app),
        ids: str | None = Query(default=None, description="Comma-separated course ids, at most 4."),
) -> dict[str, Any]:
    course_ids = parse_compare_ids(ids)
    result = await compare_courses(app.pool, course_ids)
    return result.to_payload()


@router.get("/health")
async def health(app: App = Depends(get_app)) -> JSONResponse:
    if await ping(app.pool):
        return JSONResponse({"status": "healthy", "database": "connected"})
    return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "disconnected"})
