"""Typed dataclasses for the NorthStar data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON and frontmatter is mapped to snake_case in Python.
Unknown keys are ignored (goal and reflection frontmatter keep them in
``extra`` so a rewrite does not drop them); None fields are omitted on output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

PERIOD_TYPES = ("vision", "yearly", "quarterly", "monthly", "weekly")
GOAL_STATUSES = ("not-started", "in-progress", "completed", "abandoned")


def _int_or_none(v: Any) -> int | None:
    if v is None or v == "":
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _iso_or_none(v: Any) -> str | None:
    """YAML turns unquoted dates into date objects; keep them as ISO strings."""
    if v is None:
        return None
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    return str(v)


def _drop_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


# ── Periods ───────────────────────────────────────────────────


@dataclass
class Period:
    """A typed calendar span with its label and inclusive bounds."""

    type: str
    year: int
    label: str
    start: date
    end: date
    quarter: int | None = None
    month: int | None = None
    week: int | None = None
    is_current: bool = False

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Period:
        return cls(
            type=str(d.get("type", "")),
            year=int(d.get("year", 0)),
            label=str(d.get("label", "")),
            start=date.fromisoformat(str(d["start"])),
            end=date.fromisoformat(str(d["end"])),
            quarter=_int_or_none(d.get("quarter")),
            month=_int_or_none(d.get("month")),
            week=_int_or_none(d.get("week")),
            is_current=bool(d.get("isCurrent", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "type": self.type,
            "year": self.year,
            "quarter": self.quarter,
            "month": self.month,
            "week": self.week,
            "label": self.label,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "isCurrent": self.is_current,
        })


# ── Goal content ──────────────────────────────────────────────


@dataclass
class Task:
    id: str = ""
    text: str = ""
    completed: bool = False
    section: str | None = None  # nearest preceding ### heading

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Task:
        return cls(
            id=str(d.get("id", "")),
            text=str(d.get("text", "")),
            completed=bool(d.get("completed", False)),
            section=d.get("section") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "section": self.section,
        })


@dataclass
class FocusArea:
    emoji: str = ""
    name: str = ""
    goal: str | None = None  # vision only
    reason: str | None = None  # vision only
    points: list[str] = field(default_factory=list)  # sub-points carry a "  " prefix

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> FocusArea:
        return cls(
            emoji=str(d.get("emoji", "")),
            name=str(d.get("name", "")),
            goal=d.get("goal") or None,
            reason=d.get("reason") or None,
            points=[str(p) for p in (d.get("points") or [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "emoji": self.emoji,
            "name": self.name,
            "goal": self.goal,
            "reason": self.reason,
            "points": list(self.points),
        })


@dataclass
class StructuredContent:
    expectations: list[str] = field(default_factory=list)
    focus_areas: list[FocusArea] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> StructuredContent:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            expectations=[str(e) for e in (d.get("expectations") or [])],
            focus_areas=[FocusArea.from_dict(a) for a in (d.get("focusAreas") or [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "expectations": list(self.expectations),
            "focusAreas": [a.to_dict() for a in self.focus_areas],
        }


# ── Goals ─────────────────────────────────────────────────────

_GOAL_KEYS = {
    "type", "period", "year", "quarter", "month", "week", "start", "end",
    "status", "emoji", "theme", "startYear", "endYear", "created", "updated",
}


@dataclass
class GoalFrontmatter:
    period: str = ""
    status: str = "not-started"
    year: int | None = None
    quarter: int | None = None
    month: int | None = None
    week: int | None = None
    start: str | None = None
    end: str | None = None
    emoji: str | None = None  # yearly
    theme: str | None = None  # yearly
    start_year: int | None = None  # vision
    end_year: int | None = None  # vision
    created: str | None = None
    updated: str | None = None
    type: str = "goal"
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GoalFrontmatter:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            type=str(d.get("type", "goal")),
            period=str(d.get("period", "")),
            status=str(d.get("status") or "not-started"),
            year=_int_or_none(d.get("year")),
            quarter=_int_or_none(d.get("quarter")),
            month=_int_or_none(d.get("month")),
            week=_int_or_none(d.get("week")),
            start=_iso_or_none(d.get("start")),
            end=_iso_or_none(d.get("end")),
            emoji=d.get("emoji") or None,
            theme=d.get("theme") or None,
            start_year=_int_or_none(d.get("startYear")),
            end_year=_int_or_none(d.get("endYear")),
            created=_iso_or_none(d.get("created")),
            updated=_iso_or_none(d.get("updated")),
            extra={k: v for k, v in d.items() if k not in _GOAL_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        d = _drop_none({
            "type": self.type,
            "period": self.period,
            "year": self.year,
            "quarter": self.quarter,
            "month": self.month,
            "week": self.week,
            "start": self.start,
            "end": self.end,
            "status": self.status,
            "emoji": self.emoji,
            "theme": self.theme,
            "startYear": self.start_year,
            "endYear": self.end_year,
            "created": self.created,
            "updated": self.updated,
        })
        for k, v in self.extra.items():
            d.setdefault(k, v)
        return d


@dataclass
class Goal:
    id: str
    path: str
    frontmatter: GoalFrontmatter
    content: str = ""
    title: str = "Untitled"
    tasks: list[Task] = field(default_factory=list)
    expectations: list[str] = field(default_factory=list)
    focus_areas: list[FocusArea] = field(default_factory=list)

    @property
    def tasks_completed(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "frontmatter": self.frontmatter.to_dict(),
            "content": self.content,
            "title": self.title,
            "tasks": [t.to_dict() for t in self.tasks],
            "expectations": list(self.expectations),
            "focusAreas": [a.to_dict() for a in self.focus_areas],
        }


# ── Reflections ───────────────────────────────────────────────

_REFLECTION_KEYS = {
    "type", "period", "year", "quarter", "month", "week", "date",
    "goalsCompleted", "goalsTotal", "completionRate", "linkedGoalPath",
    "created", "updated",
}


@dataclass
class ReflectionFrontmatter:
    period: str = ""
    year: int = 0
    date: str = ""
    quarter: int | None = None
    month: int | None = None
    week: int | None = None
    goals_completed: int | None = None
    goals_total: int | None = None
    completion_rate: float | None = None
    linked_goal_path: str | None = None
    created: str | None = None
    updated: str | None = None
    type: str = "reflection"
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ReflectionFrontmatter:
        if not d or not isinstance(d, dict):
            return cls()
        rate = d.get("completionRate")
        return cls(
            type=str(d.get("type", "reflection")),
            period=str(d.get("period", "")),
            year=_int_or_none(d.get("year")) or 0,
            date=_iso_or_none(d.get("date")) or "",
            quarter=_int_or_none(d.get("quarter")),
            month=_int_or_none(d.get("month")),
            week=_int_or_none(d.get("week")),
            goals_completed=_int_or_none(d.get("goalsCompleted")),
            goals_total=_int_or_none(d.get("goalsTotal")),
            completion_rate=float(rate) if rate is not None else None,
            linked_goal_path=d.get("linkedGoalPath") or None,
            created=_iso_or_none(d.get("created")),
            updated=_iso_or_none(d.get("updated")),
            extra={k: v for k, v in d.items() if k not in _REFLECTION_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        d = _drop_none({
            "type": self.type,
            "period": self.period,
            "year": self.year,
            "quarter": self.quarter,
            "month": self.month,
            "week": self.week,
            "date": self.date,
            "goalsCompleted": self.goals_completed,
            "goalsTotal": self.goals_total,
            "completionRate": self.completion_rate,
            "linkedGoalPath": self.linked_goal_path,
            "created": self.created,
            "updated": self.updated,
        })
        for k, v in self.extra.items():
            d.setdefault(k, v)
        return d


@dataclass
class ReflectionSection:
    question: str
    answer: str = ""
    question_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "question": self.question,
            "answer": self.answer,
            "questionId": self.question_id,
        })


@dataclass
class Reflection:
    id: str
    path: str
    frontmatter: ReflectionFrontmatter
    content: str = ""
    title: str = ""
    sections: list[ReflectionSection] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "frontmatter": self.frontmatter.to_dict(),
            "content": self.content,
            "title": self.title,
            "sections": [s.to_dict() for s in self.sections],
        }


# ── Goal tree ─────────────────────────────────────────────────


@dataclass
class GoalTreeNode:
    id: str
    title: str
    period: str
    status: str = "not-started"
    progress: int = 0
    path: str = ""
    children: list[GoalTreeNode] = field(default_factory=list)
    tasks_completed: int = 0
    tasks_total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "period": self.period,
            "status": self.status,
            "progress": self.progress,
            "path": self.path,
            "children": [c.to_dict() for c in self.children],
            "tasksCompleted": self.tasks_completed,
            "tasksTotal": self.tasks_total,
        }


def document_id(path: str) -> str:
    """Stable id for a stored document: path with '/' and '.' replaced by '-'."""
    return path.replace("/", "-").replace(".", "-")
