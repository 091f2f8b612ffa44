"""Goal documents: reading, writing, task toggles and starter templates."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

from northstar.checkbox import (
    build_task_list,
    extract_title,
    parse_tasks,
    task_list_header,
    update_task_in_content,
)
from northstar.documents import list_documents, read_document, write_document
from northstar.focus_content import build_structured_content, parse_structured_content
from northstar.models import (
    GOAL_STATUSES,
    FocusArea,
    Goal,
    GoalFrontmatter,
    Period,
    StructuredContent,
    Task,
    document_id,
)
from northstar.periods import current_period, period_to_path
from northstar.workspace import now_local, today as local_today

logger = logging.getLogger(__name__)

FOCUS_PERIODS = ("vision", "yearly", "quarterly")
TASK_PERIODS = ("monthly", "weekly")

DEFAULT_FOCUS_AREAS = (
    ("🏆", "Personlig udvikling / mindset"),
    ("💻", "Arbejde / Indkomst"),
    ("💙", "Relationer"),
    ("🧠", "Læring"),
    ("💪🏼", "Fitness og sundhed"),
)


def _stamp(now: datetime | None, root: Path | None) -> str:
    if now is None:
        now = now_local(root)
    return now.isoformat(timespec="seconds")


# ── Read / write ──────────────────────────────────────────────

def read_goal(path: str, root: Path | None = None) -> Goal | None:
    doc = read_document(path, root)
    if doc is None:
        return None
    fm = GoalFrontmatter.from_dict(doc.metadata)
    goal = Goal(
        id=document_id(path),
        path=path,
        frontmatter=fm,
        content=doc.body,
        title=extract_title(doc.body),
        tasks=parse_tasks(doc.body),
    )
    if fm.period in FOCUS_PERIODS:
        structured = parse_structured_content(doc.body, is_vision=fm.period == "vision")
        goal.expectations = structured.expectations
        goal.focus_areas = structured.focus_areas
    return goal


def write_goal(
    path: str,
    frontmatter: GoalFrontmatter | dict[str, Any],
    content: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> bool:
    """Write a goal, refreshing ``updated`` (and ``created`` on first write)."""
    if isinstance(frontmatter, dict):
        frontmatter = GoalFrontmatter.from_dict(frontmatter)
    if frontmatter.status not in GOAL_STATUSES:
        raise ValueError(f"Invalid goal status: {frontmatter.status!r}")
    stamp = _stamp(now, root)
    frontmatter.updated = stamp
    if not frontmatter.created:
        frontmatter.created = stamp
    return write_document(path, frontmatter.to_dict(), content, root)


# ── Lookups ───────────────────────────────────────────────────

def goal_for_period(period: Period, root: Path | None = None) -> Goal | None:
    return read_goal(period_to_path(period), root)


def current_goals(today: date | None = None, root: Path | None = None) -> dict[str, Goal | None]:
    """The goals of every period type containing ``today``."""
    if today is None:
        today = local_today(root)
    return {
        period_type: goal_for_period(current_period(period_type, today, today), root)
        for period_type in ("weekly", "monthly", "quarterly", "yearly", "vision")
    }


def goals_for_year(year: int, root: Path | None = None) -> list[Goal]:
    goals = [read_goal(p, root) for p in list_documents(f"goals/{year}", root)]
    return [g for g in goals if g is not None]


def vision_for_year(year: int, root: Path | None = None) -> Goal | None:
    """The vision whose startYear..endYear range covers ``year``.

    Visions without a range match on their own ``year``.
    """
    for path in list_documents("vision", root):
        vision = read_goal(path, root)
        if vision is None or vision.frontmatter.period != "vision":
            continue
        fm = vision.frontmatter
        if fm.start_year and fm.end_year and fm.start_year <= year <= fm.end_year:
            return vision
        if not fm.start_year and not fm.end_year and fm.year == year:
            return vision
    return None


# ── Updates ───────────────────────────────────────────────────

def toggle_task(
    path: str,
    task_id: str,
    completed: bool,
    expected_text: str | None = None,
    root: Path | None = None,
    now: datetime | None = None,
) -> bool:
    """Check or uncheck one task. Completing a task marks the goal in-progress.

    Returns False when the goal is missing or the write fails. An id that no
    longer matches (or whose text differs from ``expected_text``) is a no-op.
    """
    goal = read_goal(path, root)
    if goal is None:
        return False
    target = next((t for t in goal.tasks if t.id == task_id), None)
    if target is None or (expected_text is not None and target.text != expected_text.strip()):
        logger.info("Task %s in %s no longer matches, nothing to update", task_id, path)
        return True
    content = update_task_in_content(goal.content, task_id, completed)
    if completed:
        goal.frontmatter.status = "in-progress"
    return write_goal(path, goal.frontmatter, content, root, now)


def save_goal_tasks(
    path: str,
    tasks: list[Task],
    root: Path | None = None,
    now: datetime | None = None,
) -> bool:
    """Replace a monthly/weekly goal body with the given task list."""
    goal = read_goal(path, root)
    if goal is None:
        return False
    fm = goal.frontmatter
    if fm.period not in TASK_PERIODS:
        raise ValueError(f"{path} is a {fm.period} goal, not a task list")
    content = build_task_list(tasks, task_list_header(fm.period, fm.month))
    return write_goal(path, fm, content, root, now)


def save_goal_structure(
    path: str,
    structured: StructuredContent,
    root: Path | None = None,
    now: datetime | None = None,
    emoji: str | None = None,
    theme: str | None = None,
) -> bool:
    """Replace a vision/yearly/quarterly goal body with expectations + focus areas."""
    goal = read_goal(path, root)
    if goal is None:
        return False
    fm = goal.frontmatter
    content = build_structured_content(structured, fm.period, fm.year, fm.quarter)
    if fm.period == "yearly":
        if emoji is not None:
            fm.emoji = emoji or None
        if theme is not None:
            fm.theme = theme or None
    return write_goal(path, fm, content, root, now)


# ── Templates ─────────────────────────────────────────────────

def goal_frontmatter_for_period(
    period: Period,
    now: datetime | None = None,
    root: Path | None = None,
) -> GoalFrontmatter:
    fm = GoalFrontmatter(
        period=period.type,
        year=period.year,
        quarter=period.quarter,
        month=period.month,
        week=period.week,
        start=period.start.isoformat(),
        end=period.end.isoformat(),
        status="not-started",
        created=_stamp(now, root),
    )
    if period.type == "vision":
        fm.start_year = period.start.year
        fm.end_year = period.start.year + 5
    return fm


def goal_frontmatter_for_write(
    period: Period,
    now: datetime | None = None,
    root: Path | None = None,
) -> GoalFrontmatter:
    """Frontmatter for (re)writing the goal of ``period``.

    Period fields are always recomputed. When the goal already exists its
    status, creation time, emoji, theme, vision span and unknown keys are kept.
    """
    fm = goal_frontmatter_for_period(period, now, root)
    existing = goal_for_period(period, root)
    if existing is None:
        return fm
    old = existing.frontmatter
    fm.status = old.status
    fm.created = old.created or fm.created
    fm.emoji = old.emoji
    fm.theme = old.theme
    fm.start_year = old.start_year or fm.start_year
    fm.end_year = old.end_year or fm.end_year
    fm.extra = dict(old.extra)
    return fm


def create_default_goal(
    period: Period,
    now: datetime | None = None,
    root: Path | None = None,
) -> tuple[GoalFrontmatter, str]:
    """Frontmatter and starter body for a new goal of ``period``."""
    fm = goal_frontmatter_for_period(period, now, root)

    if period.type in TASK_PERIODS:
        content = task_list_header(period.type, period.month) + "- [ ] Add your first task"
        return fm, content

    if period.type == "vision":
        areas = [
            FocusArea(emoji=e, name=n, goal="Define your goal here", reason="Why this matters")
            for e, n in DEFAULT_FOCUS_AREAS
        ]
        structured = StructuredContent(focus_areas=areas)
    else:
        areas = [FocusArea(emoji=e, name=n, points=["Add focus points here"]) for e, n in DEFAULT_FOCUS_AREAS]
        structured = StructuredContent(expectations=["Add your main expectations here"], focus_areas=areas)

    return fm, build_structured_content(structured, period.type, period.year, period.quarter)
