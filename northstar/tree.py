"""Goal tree: vision -> year -> quarters -> months -> weeks, rebuilt on every call."""

from __future__ import annotations

from pathlib import Path

from northstar.checkbox import calculate_progress, task_counts
from northstar.goals import goals_for_year, read_goal
from northstar.models import Goal, GoalTreeNode
from northstar.periods import quarter_months


def _node(goal: Goal | None, node_id: str, title: str, period: str, path: str) -> GoalTreeNode:
    """A tree node whose progress comes from the goal's own checkbox tasks."""
    if goal is None:
        return GoalTreeNode(id=node_id, title=title, period=period, path=path)
    completed, total = task_counts(goal.tasks)
    return GoalTreeNode(
        id=node_id,
        title=title,
        period=period,
        status=goal.frontmatter.status,
        progress=calculate_progress(goal.tasks),
        path=goal.path,
        tasks_completed=completed,
        tasks_total=total,
    )


def _find(goals: list[Goal], period: str, **fields: int) -> Goal | None:
    for g in goals:
        if g.frontmatter.period != period:
            continue
        if all(getattr(g.frontmatter, k) == v for k, v in fields.items()):
            return g
    return None


def build_goal_tree(year: int, root: Path | None = None) -> GoalTreeNode:
    """Assemble the goal tree for ``year``.

    The vision stored for ``year + 2`` becomes the root when present, with the
    year as its only child. Quarters appear when they have a document or at
    least one month; months only when they have a document.
    """
    yearly_path = f"goals/{year}/yearly.md"
    year_node = _node(read_goal(yearly_path, root), f"year-{year}", str(year), "yearly", yearly_path)

    goals = goals_for_year(year, root)
    for q in range(1, 5):
        quarter_goal = _find(goals, "quarterly", quarter=q)
        quarter_node = _node(
            quarter_goal, f"q{q}-{year}", f"Q{q}", "quarterly", f"goals/{year}/q{q}/quarterly.md"
        )

        for m in quarter_months(q):
            month_goal = _find(goals, "monthly", month=m)
            if month_goal is None:
                continue
            title = month_goal.title if month_goal.title != "Untitled" else f"Month {m}"
            month_node = _node(month_goal, f"m{m}-{year}", title, "monthly", month_goal.path)

            weeks = [g for g in goals if g.frontmatter.period == "weekly" and g.frontmatter.month == m]
            weeks.sort(key=lambda g: (g.frontmatter.week or 0, g.path))
            for week_goal in weeks:
                month_node.children.append(
                    _node(week_goal, week_goal.id, f"Week {week_goal.frontmatter.week}", "weekly", week_goal.path)
                )
            quarter_node.children.append(month_node)

        if quarter_goal is not None or quarter_node.children:
            year_node.children.append(quarter_node)

    vision_path = f"vision/{year + 2}.md"
    vision = read_goal(vision_path, root)
    if vision is None:
        return year_node
    vision_node = _node(vision, vision.id, f"Vision {year + 2}", "vision", vision_path)
    vision_node.children.append(year_node)
    return vision_node
