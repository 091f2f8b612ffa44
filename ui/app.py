from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from northstar import (
    Config,
    StructuredContent,
    Task,
    build_goal_tree,
    child_periods,
    create_default_goal,
    create_reflection,
    current_goals,
    current_period,
    data_root,
    ensure_data_dirs,
    find_linked_reflection,
    goal_frontmatter_for_write,
    goals_for_year,
    all_reflections,
    period_for,
    period_hierarchy,
    period_to_path,
    read_goal,
    read_reflection,
    recent_reflections,
    reflection_questions,
    reflections_for_year,
    save_goal_structure,
    save_goal_tasks,
    today,
    toggle_task,
    vision_for_year,
    write_goal,
    write_reflection,
    yearly_reflection_blocks,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    created = ensure_data_dirs(data_root())
    for path in created:
        logger.info("Created %s", path)
    yield


app = FastAPI(title="NorthStar API", version="0.1.0", lifespan=lifespan)


# ── Envelope ──────────────────────────────────────────────────

def _ok(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


@app.exception_handler(StarletteHTTPException)
async def http_error(request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"success": False, "error": str(exc.detail)}, status_code=exc.status_code)


@app.exception_handler(ValueError)
async def value_error(request, exc: ValueError) -> JSONResponse:
    return JSONResponse({"success": False, "error": str(exc)}, status_code=400)


def _period_from_payload(payload: dict[str, Any]):
    period_type = payload.get("periodType")
    year = payload.get("year")
    if not period_type or year is None:
        raise HTTPException(status_code=400, detail="Missing periodType or year")
    return period_for(
        str(period_type),
        int(year),
        payload.get("quarter"),
        payload.get("month"),
        payload.get("week"),
    )


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


# ── Goals ─────────────────────────────────────────────────────

@app.get("/api/goals")
def api_get_goals(
    path: str | None = None,
    year: int | None = None,
    current: bool = False,
    vision: int | None = None,
) -> dict[str, Any]:
    """Current goals, the vision covering a year, one goal by path, or a year's goals."""
    if current:
        goals = current_goals()
        return _ok({k: g.to_dict() if g else None for k, g in goals.items()})

    if vision is not None:
        goal = vision_for_year(vision)
        return _ok(goal.to_dict() if goal else None)

    if path:
        goal = read_goal(path)
        if goal is None:
            raise HTTPException(status_code=404, detail="Goal not found")
        return _ok(goal.to_dict())

    if year is not None:
        return _ok([g.to_dict() for g in goals_for_year(year)])

    raise HTTPException(status_code=400, detail="Missing path or year parameter")


@app.post("/api/goals")
def api_write_goal(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Write a goal by path, or for a period.

    Without content a period goal gets the starter body, unless it already exists.
    """
    path = payload.get("path")
    frontmatter = payload.get("frontmatter")
    content = payload.get("content")

    if not path:
        period = _period_from_payload(payload)
        path = period_to_path(period)
        if not content:
            existing = read_goal(path)
            if existing is not None:
                return _ok(existing.to_dict())
            frontmatter, content = create_default_goal(period)
        else:
            frontmatter = goal_frontmatter_for_write(period)

    if not frontmatter or not content:
        raise HTTPException(status_code=400, detail="Missing required fields")

    if not write_goal(path, frontmatter, content):
        raise HTTPException(status_code=500, detail="Failed to write goal")
    return _ok(read_goal(path).to_dict())


@app.patch("/api/goals")
def api_update_goal(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Toggle one task, or replace the task list / focus areas of a goal."""
    path = payload.get("path")
    if not path:
        raise HTTPException(status_code=400, detail="Missing required fields")
    if read_goal(path) is None:
        raise HTTPException(status_code=404, detail="Goal not found")

    if "tasks" in payload:
        tasks = [Task.from_dict(t) for t in payload.get("tasks") or []]
        ok = save_goal_tasks(path, tasks)
    elif "focusAreas" in payload or "expectations" in payload:
        ok = save_goal_structure(
            path,
            StructuredContent.from_dict(payload),
            emoji=payload.get("emoji"),
            theme=payload.get("theme"),
        )
    else:
        task_id = payload.get("taskId")
        completed = payload.get("completed")
        if not task_id or completed is None:
            raise HTTPException(status_code=400, detail="Missing required fields")
        ok = toggle_task(path, str(task_id), bool(completed), payload.get("expectedText"))

    if not ok:
        raise HTTPException(status_code=500, detail="Failed to update goal")
    return _ok(read_goal(path).to_dict())


@app.get("/api/tree")
def api_tree(year: int | None = None) -> dict[str, Any]:
    if year is None:
        year = today().year
    return _ok(build_goal_tree(year).to_dict())


# ── Periods ───────────────────────────────────────────────────

@app.get("/api/periods/{period_type}")
def api_period(period_type: str, date: date | None = None) -> dict[str, Any]:
    """The period containing ``date`` with its path, hierarchy and children."""
    period = current_period(period_type, date)
    return _ok({
        "period": period.to_dict(),
        "path": period_to_path(period),
        "hierarchy": [p.to_dict() for p in period_hierarchy(period)],
        "children": [p.to_dict() for p in child_periods(period)],
    })


# ── Reflections ───────────────────────────────────────────────

@app.get("/api/reflections/questions/{period_type}")
def api_reflection_questions(period_type: str) -> dict[str, Any]:
    data: dict[str, Any] = {"questions": [q.to_dict() for q in reflection_questions(period_type)]}
    if period_type == "yearly":
        data["blocks"] = {
            name: [q.to_dict() for q in questions]
            for name, questions in yearly_reflection_blocks().items()
        }
    return _ok(data)


@app.get("/api/reflections")
def api_get_reflections(
    path: str | None = None,
    year: int | None = None,
    recent: int | None = None,
    goal: str | None = None,
) -> dict[str, Any]:
    """Recent reflections, one by path, the one linked to a goal, a year's, or all."""
    if recent is not None:
        return _ok([r.to_dict() for r in recent_reflections(recent or 5)])

    if path:
        reflection = read_reflection(path)
        if reflection is None:
            raise HTTPException(status_code=404, detail="Reflection not found")
        return _ok(reflection.to_dict())

    if goal:
        linked_goal = read_goal(goal)
        if linked_goal is None:
            raise HTTPException(status_code=404, detail="Goal not found")
        reflection = find_linked_reflection(linked_goal)
        return _ok(reflection.to_dict() if reflection else None)

    if year is not None:
        return _ok([r.to_dict() for r in reflections_for_year(year)])

    return _ok([r.to_dict() for r in all_reflections()])


@app.post("/api/reflections")
def api_write_reflection(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Write a reflection by path, or create one for a period from answers."""
    path = payload.get("path")
    if path:
        frontmatter = payload.get("frontmatter")
        content = payload.get("content")
        if not frontmatter or not content:
            raise HTTPException(status_code=400, detail="Missing required fields")
        if not write_reflection(path, frontmatter, content):
            raise HTTPException(status_code=500, detail="Failed to write reflection")
        return _ok(read_reflection(path).to_dict())

    period = _period_from_payload(payload)
    sections = payload.get("sections") or {}
    if not isinstance(sections, dict):
        raise HTTPException(status_code=400, detail="sections must be an object")
    reflection = create_reflection(period, sections, payload.get("linkedGoalPath"))
    if reflection is None:
        raise HTTPException(status_code=500, detail="Failed to write reflection")
    return _ok(reflection.to_dict())


def run(config: Config) -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    logger.info("Starting API server on port %s...", config.api_port)
    uvicorn.run(app, host="0.0.0.0", port=config.api_port)
