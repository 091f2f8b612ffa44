"""MCP tools for the NorthStar coaching agent.

Read tools:
- get_current_goals: goals of every period type containing today
- get_reflections: recent reflections, optionally filtered by year/period type
- get_goal_hierarchy: the goal tree for a year
- read_goal_file: one goal document by path

Write tools (not registered in read-only mode):
- write_goal: write a goal body for an explicit period
- write_reflection: write a reflection body for an explicit period

The tool bodies are plain functions taking the data root, so they can be
called without a running server.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from northstar.checkbox import calculate_progress, task_counts
from northstar.config import Config
from northstar.goals import current_goals, goal_frontmatter_for_write, read_goal, write_goal
from northstar.models import PERIOD_TYPES, Goal
from northstar.periods import period_for, period_to_path
from northstar.reflections import (
    create_default_reflection,
    read_reflection,
    recent_reflections,
    reflection_path,
    reflections_for_year,
    write_reflection,
)
from northstar.tree import build_goal_tree

logger = logging.getLogger(__name__)


def _goal_summary(goal: Goal) -> dict[str, Any]:
    completed, total = task_counts(goal.tasks)
    fm = goal.frontmatter
    return {
        "path": goal.path,
        "title": goal.title,
        "content": goal.content,
        "tasksCompleted": completed,
        "tasksTotal": total,
        "progress": calculate_progress(goal.tasks),
        "status": fm.status,
        "period": fm.period,
        "year": fm.year,
        "quarter": fm.quarter,
        "month": fm.month,
        "week": fm.week,
    }


# ── Read tools ────────────────────────────────────────────────

def get_current_goals(root: Path | None = None) -> dict[str, Any]:
    return {
        key: _goal_summary(goal) if goal else None
        for key, goal in current_goals(root=root).items()
    }


def get_reflections(
    year: int | None = None,
    limit: int | None = None,
    period_type: str | None = None,
    root: Path | None = None,
) -> list[dict[str, Any]]:
    if year:
        reflections = reflections_for_year(year, root)
    else:
        reflections = recent_reflections(limit or 5, root)
    if period_type:
        reflections = [r for r in reflections if r.frontmatter.period == period_type]
    if limit:
        reflections = reflections[:limit]

    out = []
    for r in reflections:
        fm = r.frontmatter
        out.append({
            "path": r.path,
            "title": r.title,
            "period": fm.period,
            "year": fm.year,
            "quarter": fm.quarter,
            "month": fm.month,
            "week": fm.week,
            "date": fm.date,
            "goalsCompleted": fm.goals_completed,
            "goalsTotal": fm.goals_total,
            "content": r.content,
        })
    return out


def get_goal_hierarchy(year: int, root: Path | None = None) -> dict[str, Any]:
    return build_goal_tree(year, root).to_dict()


def read_goal_file(path: str, root: Path | None = None) -> dict[str, Any]:
    try:
        goal = read_goal(path, root)
    except ValueError as e:
        return {"success": False, "error": str(e), "path": path}
    if goal is None:
        return {"success": False, "error": "File not found", "path": path}
    return {
        "success": True,
        "path": goal.path,
        "title": goal.title,
        "content": goal.content,
        "frontmatter": goal.frontmatter.to_dict(),
        "tasks": [t.to_dict() for t in goal.tasks],
    }


# ── Write tools ───────────────────────────────────────────────

def write_goal_for_period(
    period_type: str,
    year: int,
    content: str,
    quarter: int | None = None,
    month: int | None = None,
    week: int | None = None,
    root: Path | None = None,
) -> dict[str, Any]:
    """Write a goal body at the canonical path for the given period.

    An existing goal keeps its status and creation time.
    """
    try:
        period = period_for(period_type, year, quarter, month, week)
    except ValueError as e:
        return {"success": False, "error": str(e)}
    path = period_to_path(period)

    fm = goal_frontmatter_for_write(period, root=root)

    logger.info("Agent writing goal %s", path)
    if not write_goal(path, fm, content, root):
        return {"success": False, "error": "Failed to write goal file"}
    return {"success": True, "path": path, "message": f"Goal written to {path}"}


def write_reflection_for_period(
    period_type: str,
    year: int,
    content: str,
    quarter: int | None = None,
    month: int | None = None,
    week: int | None = None,
    root: Path | None = None,
) -> dict[str, Any]:
    """Write a reflection body for the given period.

    A new reflection records the stats of the period's goal; an existing one
    keeps the stats it was created with.
    """
    try:
        period = period_for(period_type, year, quarter, month, week)
    except ValueError as e:
        return {"success": False, "error": str(e)}
    path = reflection_path(period)

    existing = read_reflection(path, root)
    if existing is not None:
        fm = existing.frontmatter
    else:
        goal_path = period_to_path(period)
        goal = read_goal(goal_path, root)
        completed, total = task_counts(goal.tasks) if goal else (0, 0)
        fm, _ = create_default_reflection(period, completed, total, root=root)
        if goal is not None:
            fm.linked_goal_path = goal_path

    logger.info("Agent writing reflection %s", path)
    if not write_reflection(path, fm, content, root):
        return {"success": False, "error": "Failed to write reflection file"}
    return {"success": True, "path": path, "message": f"Reflection written to {path}"}


# ── Registration ──────────────────────────────────────────────

def register_tools(mcp: FastMCP, config: Config) -> None:
    """Register the read tools, and the write tools unless read-only.

    Args:
        mcp: FastMCP server instance
        config: Configuration (data root, read-only flag)
    """
    root = config.data_root

    @mcp.tool(name="get_current_goals")
    def current_goals_tool() -> dict:
        """Returns all current goals (weekly, monthly, quarterly, yearly, vision)
        with their tasks and completion status. Use this to understand where
        the user currently is."""
        return get_current_goals(root)

    @mcp.tool(name="get_reflections")
    def reflections_tool(
        year: int | None = None,
        limit: int | None = None,
        period_type: str | None = None,
    ) -> list[dict]:
        """Returns reflections for context, newest first.

        Args:
            year: Filter reflections by year
            limit: Maximum number of reflections to return (default: 5)
            period_type: Filter by period type (vision, yearly, quarterly, monthly, weekly)
        """
        return get_reflections(year, limit, period_type, root)

    @mcp.tool(name="get_goal_hierarchy")
    def hierarchy_tool(year: int) -> dict:
        """Returns the full goal tree for a given year, from vision down to
        weekly goals with progress at each level."""
        return get_goal_hierarchy(year, root)

    @mcp.tool(name="read_goal_file")
    def read_goal_tool(path: str) -> dict:
        """Read a specific goal or vision file by its path relative to the data directory."""
        return read_goal_file(path, root)

    if config.read_only:
        logger.info("Read-only mode, write tools not registered")
        return

    @mcp.tool(name="write_goal")
    def write_goal_tool(
        period_type: str,
        year: int,
        content: str,
        quarter: int | None = None,
        month: int | None = None,
        week: int | None = None,
    ) -> dict:
        """Writes a goal file with correct frontmatter and path structure.
        Only use after the user has approved the suggested goals.

        Args:
            period_type: One of vision, yearly, quarterly, monthly, weekly
            year: The year
            content: The full markdown body (headings and task lists)
            quarter: Quarter number (1-4)
            month: Month number (1-12)
            week: Week number
        """
        return write_goal_for_period(period_type, year, content, quarter, month, week, root)

    @mcp.tool(name="write_reflection")
    def write_reflection_tool(
        period_type: str,
        year: int,
        content: str,
        quarter: int | None = None,
        month: int | None = None,
        week: int | None = None,
    ) -> dict:
        """Writes a reflection file with correct frontmatter and path structure.

        Args:
            period_type: One of vision, yearly, quarterly, monthly, weekly
            year: The year
            content: The full markdown body of the reflection
            quarter: Quarter number (1-4)
            month: Month number (1-12)
            week: Week number
        """
        return write_reflection_for_period(period_type, year, content, quarter, month, week, root)


def create_server(config: Config) -> FastMCP:
    """Create the MCP server with all tools registered."""
    mcp = FastMCP(
        name="northstar",
        instructions=(
            "NorthStar holds the user's goals (vision, yearly, quarterly, monthly, "
            "weekly) and periodic reflections. Read current goals and reflections "
            "before suggesting goals for the next period. Period types: "
            + ", ".join(PERIOD_TYPES)
        ),
    )
    register_tools(mcp, config)
    logger.info("MCP server configured (read_only=%s)", config.read_only)
    return mcp
