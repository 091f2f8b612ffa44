"""Tests for northstar/checkbox.py."""

from northstar.checkbox import (
    build_task_list,
    calculate_progress,
    extract_title,
    parse_tasks,
    task_counts,
    task_list_header,
    update_task_in_content,
)
from northstar.models import Task

WEEK = """## Ugens mål

### Work
- [x] Write draft
- [ ] Review PR
Some note between tasks
### Health
* [X] Gym twice
"""


def test_parse_tasks_ids_and_sections():
    tasks = parse_tasks(WEEK)
    assert [t.id for t in tasks] == ["task-0", "task-1", "task-2"]
    assert [t.text for t in tasks] == ["Write draft", "Review PR", "Gym twice"]
    assert [t.completed for t in tasks] == [True, False, True]
    assert [t.section for t in tasks] == ["Work", "Work", "Health"]


def test_parse_tasks_empty():
    assert parse_tasks("") == []
    assert parse_tasks("# Heading\nJust prose.") == []


def test_update_task_changes_only_the_checkbox():
    updated = update_task_in_content(WEEK, "task-1", True)
    assert "- [x] Review PR" in updated
    assert updated.replace("- [x] Review PR", "- [ ] Review PR") == WEEK


def test_update_task_keeps_bullet_style():
    updated = update_task_in_content(WEEK, "task-2", False)
    assert "* [ ] Gym twice" in updated


def test_update_unknown_task_is_noop():
    assert update_task_in_content(WEEK, "task-9", True) == WEEK
    assert update_task_in_content(WEEK, "nonsense", True) == WEEK


def test_update_with_stale_text_is_noop():
    assert update_task_in_content(WEEK, "task-1", True, expected_text="Something else") == WEEK
    assert "- [x] Review PR" in update_task_in_content(WEEK, "task-1", True, expected_text="Review PR")


def test_progress_rounds_half_up():
    def tasks(done, total):
        return [Task(id=f"task-{i}", text=str(i), completed=i < done) for i in range(total)]

    assert calculate_progress([]) == 0
    assert calculate_progress(tasks(1, 3)) == 33
    assert calculate_progress(tasks(2, 3)) == 67
    assert calculate_progress(tasks(1, 8)) == 13
    assert calculate_progress(tasks(4, 4)) == 100
    assert task_counts(tasks(2, 5)) == (2, 5)


def test_extract_title():
    assert extract_title("# Januar\n\nText") == "Januar"
    assert extract_title("## Only a subheading") == "Untitled"
    assert extract_title("") == "Untitled"


def test_task_list_header():
    assert task_list_header("monthly", 3) == "## Marts mål\n\n"
    assert task_list_header("weekly") == "## Ugens mål\n\n"
    assert task_list_header("yearly") == ""


def test_build_task_list_groups_sections():
    tasks = [
        Task(text="a", section="Work"),
        Task(text="b", completed=True, section="Work"),
        Task(text="c", section="Health"),
    ]
    out = build_task_list(tasks, task_list_header("weekly"))
    assert out == "## Ugens mål\n\n### Work\n- [ ] a\n- [x] b\n\n### Health\n- [ ] c"

    parsed = parse_tasks(out)
    assert [(t.text, t.completed, t.section) for t in parsed] == [
        ("a", False, "Work"),
        ("b", True, "Work"),
        ("c", False, "Health"),
    ]
