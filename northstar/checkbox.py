"""Checkbox task list parsing and serialization for monthly/weekly goals."""

from __future__ import annotations

import math
import re

from northstar.models import Task

_TASK_RE = re.compile(r"^[-*]\s*\[([ xX])\]\s*(.+)$")
_TASK_PARTS_RE = re.compile(r"^([-*]\s*\[)([ xX])(\]\s*.+)$")
_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)

DANISH_MONTHS = (
    "januar", "februar", "marts", "april", "maj", "juni",
    "juli", "august", "september", "oktober", "november", "december",
)


def parse_tasks(content: str) -> list[Task]:
    """Extract checkbox tasks from markdown.

    Recognizes:
        ### Section          (applies to the tasks below it)
        - [ ] Task text
        - [x] Task text
        * [X] Task text

    Ids are ``task-{n}`` by occurrence order among checkbox lines.
    """
    tasks = []
    section = ""
    for line in content.split("\n"):
        if line.startswith("### "):
            section = line[4:].strip()
            continue
        m = _TASK_RE.match(line)
        if not m:
            continue
        tasks.append(Task(
            id=f"task-{len(tasks)}",
            text=m.group(2).strip(),
            completed=m.group(1).lower() == "x",
            section=section or None,
        ))
    return tasks


def update_task_in_content(
    content: str,
    task_id: str,
    completed: bool,
    expected_text: str | None = None,
) -> str:
    """Rewrite the checkbox character of one task, leaving everything else intact.

    Unknown ids leave the content unchanged. With ``expected_text`` the update
    only applies when the targeted line still carries that text.
    """
    lines = content.split("\n")
    index = 0
    for i, line in enumerate(lines):
        m = _TASK_PARTS_RE.match(line)
        if not m:
            continue
        if f"task-{index}" == task_id:
            if expected_text is not None:
                text = m.group(3)[1:].strip()
                if text != expected_text.strip():
                    return content
            lines[i] = f"{m.group(1)}{'x' if completed else ' '}{m.group(3)}"
            return "\n".join(lines)
        index += 1
    return content


def task_counts(tasks: list[Task]) -> tuple[int, int]:
    """(completed, total)."""
    return sum(1 for t in tasks if t.completed), len(tasks)


def calculate_progress(tasks: list[Task]) -> int:
    """Percentage of completed tasks, rounded half up. 0 for an empty list."""
    completed, total = task_counts(tasks)
    if total == 0:
        return 0
    return math.floor(completed / total * 100 + 0.5)


def extract_title(content: str) -> str:
    m = _TITLE_RE.search(content)
    return m.group(1).strip() if m else "Untitled"


def task_list_header(period_type: str, month: int | None = None) -> str:
    if period_type == "monthly" and month and 1 <= month <= 12:
        return f"## {DANISH_MONTHS[month - 1].capitalize()} mål\n\n"
    if period_type == "weekly":
        return "## Ugens mål\n\n"
    return ""


def build_task_list(tasks: list[Task], header: str | None = None) -> str:
    lines: list[str] = []
    section = None
    for t in tasks:
        if t.section and t.section != section:
            if lines:
                lines.append("")
            lines.append(f"### {t.section}")
            section = t.section
        lines.append(f"- [{'x' if t.completed else ' '}] {t.text}")
    return (header or "") + "\n".join(lines)
