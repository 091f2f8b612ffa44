"""Shared test fixtures for NorthStar tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest


VISION = """---
type: goal
period: vision
year: 2027
startYear: 2025
endYear: 2030
status: in-progress
---

# Vision 2027

## Største målsætninger

- Live with intention

## 🏆 Personlig udvikling / mindset

**Mål:** Become calmer
*Årsag: Better decisions*

## 💪🏼 Fitness og sundhed

**Mål:** Run a marathon
*Årsag: Health*
"""

YEARLY = """---
type: goal
period: yearly
year: 2025
status: in-progress
emoji: "🚀"
theme: Growth
---

## 2025 Største forventninger

- Ship the product
- Stay healthy

## 💻 Arbejde / Indkomst

- Launch v1
    - Beta in March
- Hire first employee
"""

QUARTERLY = """---
type: goal
period: quarterly
year: 2025
quarter: 1
status: not-started
---

### Q1 Største forventninger

- Finish MVP

### 🧠 Læring
- Fokuspunkter
- Read two books
"""

MONTHLY = """---
type: goal
period: monthly
year: 2025
quarter: 1
month: 1
status: in-progress
---

# Januar

## Januar mål

- [x] Set up budget
- [ ] Plan trip
"""

WEEK_2 = """---
type: goal
period: weekly
year: 2025
quarter: 1
month: 1
week: 2
status: completed
---

## Ugens mål

- [x] Kickoff
- [x] Inbox zero
"""

WEEK_3 = """---
type: goal
period: weekly
year: 2025
quarter: 1
month: 1
week: 3
status: not-started
---

## Ugens mål

### Work
- [x] Write draft
- [ ] Review PR
### Health
- [ ] Gym twice
"""

WEEK_2_REFLECTION = """---
type: reflection
period: weekly
year: 2025
quarter: 1
month: 1
week: 2
date: '2025-01-12'
goalsCompleted: 2
goalsTotal: 2
completionRate: 1.0
linkedGoalPath: goals/2025/q1/january/week-02.md
---

## Har jeg nået mine mål?

Yes, all of them.

## Hvad vil jeg gøre anderledes næste gang?

Start earlier.

## Hvad skal jeg fortsætte med?

## Hvad har jeg lært?

Focus beats volume.
"""

DECEMBER_REFLECTION = """---
type: reflection
period: monthly
year: 2024
quarter: 4
month: 12
date: '2024-12-31'
goalsCompleted: 3
goalsTotal: 4
completionRate: 0.75
---

## Har jeg nået mine mål?

Mostly.
"""


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary data root with one year of goals and two reflections."""
    root = tmp_path / "data"
    files = {
        "vision/2027.md": VISION,
        "goals/2025/yearly.md": YEARLY,
        "goals/2025/q1/quarterly.md": QUARTERLY,
        "goals/2025/q1/january/monthly.md": MONTHLY,
        "goals/2025/q1/january/week-02.md": WEEK_2,
        "goals/2025/q1/january/week-03.md": WEEK_3,
        "reflections/2025/q1/january/week-02-reflection.md": WEEK_2_REFLECTION,
        "reflections/2024/q4/december/monthly-reflection.md": DECEMBER_REFLECTION,
    }
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    (root / "settings.yaml").write_text("timezone: UTC\n", encoding="utf-8")

    # Set env var
    os.environ["NORTHSTAR_ROOT"] = str(root)
    yield root
    # Cleanup
    if "NORTHSTAR_ROOT" in os.environ:
        del os.environ["NORTHSTAR_ROOT"]
