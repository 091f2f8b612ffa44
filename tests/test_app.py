"""Tests for the HTTP JSON API in ui/app.py."""

from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from ui.app import app

WEEK_3 = "goals/2025/q1/january/week-03.md"


@pytest.fixture
def client(workspace: Path):
    with TestClient(app) as c:
        yield c


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_get_goal_by_path(client):
    body = client.get("/api/goals", params={"path": "goals/2025/yearly.md"}).json()
    assert body["success"] is True
    assert body["data"]["frontmatter"]["theme"] == "Growth"
    assert body["data"]["expectations"] == ["Ship the product", "Stay healthy"]


def test_get_goal_errors(client):
    r = client.get("/api/goals", params={"path": "goals/1999/yearly.md"})
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Goal not found"}

    r = client.get("/api/goals")
    assert r.status_code == 400
    assert r.json()["error"] == "Missing path or year parameter"

    r = client.get("/api/goals", params={"path": "../outside.md"})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_get_goals_for_year_and_vision(client):
    goals = client.get("/api/goals", params={"year": 2025}).json()["data"]
    assert len(goals) == 5
    vision = client.get("/api/goals", params={"vision": 2026}).json()["data"]
    assert vision["path"] == "vision/2027.md"
    assert client.get("/api/goals", params={"vision": 2040}).json() == {"success": True, "data": None}


def test_get_current_goals(client, monkeypatch):
    monkeypatch.setattr("northstar.goals.local_today", lambda root=None: date(2025, 1, 15))
    data = client.get("/api/goals", params={"current": "true"}).json()["data"]
    assert data["weekly"]["path"] == WEEK_3
    assert data["yearly"]["path"] == "goals/2025/yearly.md"


def test_post_goal_by_path(client):
    payload = {
        "path": "goals/2025/q2/quarterly.md",
        "frontmatter": {"period": "quarterly", "year": 2025, "quarter": 2},
        "content": "## Q2 Største forventninger\n\n- Launch",
    }
    body = client.post("/api/goals", json=payload).json()
    assert body["success"] is True
    assert body["data"]["expectations"] == ["Launch"]
    assert body["data"]["frontmatter"]["status"] == "not-started"

    r = client.post("/api/goals", json={"path": "goals/2025/q2/quarterly.md"})
    assert r.status_code == 400
    assert r.json()["error"] == "Missing required fields"


def test_post_goal_for_period_uses_template(client, workspace: Path):
    body = client.post("/api/goals", json={"periodType": "weekly", "year": 2025, "week": 5}).json()
    assert body["data"]["path"] == "goals/2025/q1/january/week-05.md"
    assert body["data"]["content"].startswith("## Ugens mål")
    assert (workspace / "goals/2025/q1/january/week-05.md").is_file()


def test_post_goal_for_existing_period_keeps_frontmatter(client, workspace: Path):
    payload = {"periodType": "monthly", "year": 2025, "month": 1, "content": "## Januar mål\n\n- [ ] Read"}
    data = client.post("/api/goals", json=payload).json()["data"]
    assert data["path"] == "goals/2025/q1/january/monthly.md"
    assert data["frontmatter"]["status"] == "in-progress"
    assert [t["text"] for t in data["tasks"]] == ["Read"]

    payload = {"periodType": "yearly", "year": 2025, "content": "## 2025 Største forventninger\n\n- Rest"}
    fm = client.post("/api/goals", json=payload).json()["data"]["frontmatter"]
    assert (fm["status"], fm["emoji"], fm["theme"]) == ("in-progress", "🚀", "Growth")

    # no content: the stored goal is returned untouched
    before = (workspace / "goals/2025/q1/january/week-03.md").read_text(encoding="utf-8")
    data = client.post("/api/goals", json={"periodType": "weekly", "year": 2025, "week": 3}).json()["data"]
    assert data["tasks"][0]["text"] == "Write draft"
    assert (workspace / "goals/2025/q1/january/week-03.md").read_text(encoding="utf-8") == before


def test_post_goal_invalid_status(client):
    payload = {"path": "goals/2025/yearly.md", "frontmatter": {"period": "yearly", "status": "done"}, "content": "x"}
    r = client.post("/api/goals", json=payload)
    assert r.status_code == 400


def test_patch_toggles_task(client):
    body = client.patch("/api/goals", json={"path": WEEK_3, "taskId": "task-1", "completed": True}).json()
    assert body["data"]["tasks"][1]["completed"] is True
    assert body["data"]["frontmatter"]["status"] == "in-progress"


def test_patch_errors(client):
    r = client.patch("/api/goals", json={"path": WEEK_3})
    assert r.status_code == 400
    r = client.patch("/api/goals", json={"path": "goals/1999/yearly.md", "taskId": "task-0", "completed": True})
    assert r.status_code == 404


def test_patch_replaces_tasks(client):
    payload = {"path": "goals/2025/q1/january/monthly.md", "tasks": [{"text": "Only task", "completed": True}]}
    data = client.patch("/api/goals", json=payload).json()["data"]
    assert [t["text"] for t in data["tasks"]] == ["Only task"]
    assert data["content"].startswith("## Januar mål")


def test_patch_replaces_focus_areas(client):
    payload = {
        "path": "goals/2025/yearly.md",
        "expectations": ["Focus"],
        "focusAreas": [{"emoji": "💙", "name": "Relationer", "points": ["Call home"]}],
        "theme": "Connection",
    }
    data = client.patch("/api/goals", json=payload).json()["data"]
    assert data["expectations"] == ["Focus"]
    assert data["focusAreas"][0]["name"] == "Relationer"
    assert data["frontmatter"]["theme"] == "Connection"


def test_tree(client):
    data = client.get("/api/tree", params={"year": 2025}).json()["data"]
    assert data["id"] == "vision-2027-md"
    assert data["children"][0]["children"][0]["id"] == "q1-2025"


def test_period_endpoint(client):
    data = client.get("/api/periods/weekly", params={"date": "2025-01-15"}).json()["data"]
    assert data["path"] == WEEK_3
    assert data["period"]["week"] == 3
    assert [p["type"] for p in data["hierarchy"]] == ["vision", "yearly", "quarterly", "monthly", "weekly"]
    assert data["children"] == []

    r = client.get("/api/periods/daily")
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_reflection_questions(client):
    data = client.get("/api/reflections/questions/quarterly").json()["data"]
    assert len(data["questions"]) == 7
    assert data["questions"][0]["id"] == "goals"

    yearly = client.get("/api/reflections/questions/yearly").json()["data"]
    assert set(yearly["blocks"]) == {"reflection", "growth", "affirmations"}


def test_get_reflections(client):
    assert len(client.get("/api/reflections").json()["data"]) == 2
    assert len(client.get("/api/reflections", params={"recent": 1}).json()["data"]) == 1
    assert len(client.get("/api/reflections", params={"year": 2024}).json()["data"]) == 1

    linked = client.get("/api/reflections", params={"goal": "goals/2025/q1/january/week-02.md"}).json()
    assert linked["data"]["title"] == "Week 2"

    r = client.get("/api/reflections", params={"path": "reflections/2025/nope.md"})
    assert r.status_code == 404
    assert r.json()["error"] == "Reflection not found"


def test_post_reflection_for_period(client):
    payload = {"periodType": "weekly", "year": 2025, "week": 3, "sections": {"goals": "Ja"}}
    data = client.post("/api/reflections", json=payload).json()["data"]
    assert data["path"] == "reflections/2025/q1/january/week-03-reflection.md"
    assert data["frontmatter"]["goalsTotal"] == 3
    assert data["sections"][0]["answer"] == "Ja"


def test_post_reflection_clears_existing_answer(client):
    payload = {"periodType": "weekly", "year": 2025, "week": 2, "sections": {"Har jeg nået mine mål": ""}}
    data = client.post("/api/reflections", json=payload).json()["data"]
    assert data["path"] == "reflections/2025/q1/january/week-02-reflection.md"
    assert data["sections"][0]["answer"] == ""
    assert data["sections"][1]["answer"] == "Start earlier."
    assert data["frontmatter"]["goalsTotal"] == 2


def test_post_reflection_by_path(client):
    payload = {
        "path": "reflections/2025/q1/quarterly-reflection.md",
        "frontmatter": {"period": "quarterly", "year": 2025, "quarter": 1},
        "content": "## Har jeg nået mine kvartårlige mål?\n\nJa",
    }
    data = client.post("/api/reflections", json=payload).json()["data"]
    assert data["title"] == "Q1 2025"
    assert data["sections"][0]["questionId"] == "goals"

    r = client.post("/api/reflections", json={"path": "reflections/2025/x.md"})
    assert r.status_code == 400
