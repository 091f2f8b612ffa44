"""Reflection question catalog, Q&A document building/parsing and storage.

Answers are stored in plain markdown under ``## {question}`` headings. On
parse each heading is resolved back to a stable question id, so answers can be
carried over by id even when the heading wording (or its year/quarter
interpolation) differs from the catalog text.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from northstar.checkbox import task_counts
from northstar.documents import list_documents, read_document, write_document
from northstar.goals import read_goal
from northstar.models import (
    Goal,
    Period,
    Reflection,
    ReflectionFrontmatter,
    ReflectionSection,
    document_id,
)
from northstar.periods import month_name, period_for, period_to_path, quarter_of
from northstar.workspace import now_local, today

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReflectionQuestion:
    """A catalog question.

    ``heading`` is the text written into documents; it may interpolate
    ``{year}``, ``{prev_year}`` or ``{quarter}``. It defaults to ``question``.
    """

    id: str
    question: str
    placeholder: str
    heading: str = ""

    def heading_for(self, year: int, quarter: int) -> str:
        template = self.heading or self.question
        return template.format(year=year, prev_year=year - 1, quarter=quarter)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "question": self.question, "placeholder": self.placeholder}


# ── Catalog ───────────────────────────────────────────────────

WEEKLY_MONTHLY_QUESTIONS = (
    ReflectionQuestion("goals", "Har jeg nået mine mål?",
                       "Beskriv om du har nået dine mål og hvorfor/hvorfor ikke..."),
    ReflectionQuestion("do-differently", "Hvad vil jeg gøre anderledes næste gang?",
                       "Hvad kan forbedres eller gøres anderledes..."),
    ReflectionQuestion("continue", "Hvad skal jeg fortsætte med?",
                       "Hvad fungerer godt og skal fortsættes..."),
    ReflectionQuestion("learned", "Hvad har jeg lært?",
                       "Indsigter, færdigheder eller viden opnået..."),
)

QUARTERLY_QUESTIONS = (
    ReflectionQuestion("goals", "Har jeg nået mine kvartårlige mål?",
                       "Gennemgå dine mål og beskriv fremskridt..."),
    ReflectionQuestion("favorites", "3 yndlingsdele af dette kvartal",
                       "Hvad var de bedste øjeblikke...", "3 yndlingsdele af Q{quarter}"),
    ReflectionQuestion("proud", "Hvad er jeg mest stolt af?",
                       "Beskriv dine største præstationer..."),
    ReflectionQuestion("challenged", "Hvad udfordrede mig mest?",
                       "Hvilke udfordringer mødte du..."),
    ReflectionQuestion("scared", "Hvornår følte jeg mig mest skræmt?",
                       "Beskriv situationer der var skræmmende..."),
    ReflectionQuestion("learned", "Hvad lærte jeg om mig selv?",
                       "Indsigter om dig selv...", "Hvad lærte jeg om mig selv i Q{quarter}?"),
    ReflectionQuestion("moment", "Beskriv dit yndlingsøjeblik",
                       "Det mest mindeværdige øjeblik..."),
)

YEARLY_REFLECTION_QUESTIONS = (
    ReflectionQuestion("favorites", "3 yndlingsdele af året",
                       "Hvad var årets bedste øjeblikke...", "3 yndlingsdele af {prev_year}"),
    ReflectionQuestion("proud", "Hvad er jeg mest stolt af?",
                       "Beskriv dine største præstationer..."),
    ReflectionQuestion("challenged", "Hvad udfordrede mig mest?",
                       "Hvilke udfordringer mødte du..."),
    ReflectionQuestion("scared", "Hvornår følte jeg mig mest skræmt?",
                       "Beskriv situationer der var skræmmende..."),
    ReflectionQuestion("learned", "Hvad lærte jeg om mig selv?",
                       "Indsigter om dig selv...", "Hvad lærte jeg om mig selv i {prev_year}?"),
    ReflectionQuestion("moment", "Beskriv dit yndlingsøjeblik",
                       "Det mest mindeværdige øjeblik..."),
)

YEARLY_GROWTH_QUESTIONS = (
    ReflectionQuestion("feeling", "Hvordan vil du gerne have det i dette år?",
                       "Beskriv hvordan du vil føle dig...", "Hvordan vil du gerne have det i {year}?"),
    ReflectionQuestion("meaning", "Hvad betyder dette år for dig?",
                       "Hvad er betydningen af dette år..."),
    ReflectionQuestion("looking-forward", "Hvad ser du frem til?",
                       "Hvad glæder du dig til..."),
    ReflectionQuestion("worried", "Hvad er du bekymret for?",
                       "Hvad bekymrer dig..."),
    ReflectionQuestion("learn-develop", "Hvad vil du gerne lære mere om eller udvikle?",
                       "Områder for læring og udvikling..."),
    ReflectionQuestion("committed", "Hvad er du forpligtet til i år?",
                       "Hvad forpligter du dig til...", "Hvad er du forpligtet til i {year}?"),
    ReflectionQuestion("one-year", "Hvordan ser denne dag om præcis et år ud?",
                       "Visualiser din fremtid..."),
)

YEARLY_AFFIRMATION_QUESTIONS = (
    ReflectionQuestion("open-to", "Dette år vil jeg åbne mig op for",
                       "Hvad vil du åbne dig op for..."),
    ReflectionQuestion("learn-more", "Jeg vil lære mere omkring",
                       "Hvad vil du lære mere om..."),
    ReflectionQuestion("say-no", "Jeg vil sige NEJ til",
                       "Hvad vil du sige nej til..."),
    ReflectionQuestion("say-yes", "Jeg vil sige JA til",
                       "Hvad vil du sige ja til..."),
)

# (block heading, questions) in document order
_YEARLY_BLOCKS = (
    ("{prev_year} Refleksioner", YEARLY_REFLECTION_QUESTIONS),
    ("{year} Vækst", YEARLY_GROWTH_QUESTIONS),
    ("Affirmationer", YEARLY_AFFIRMATION_QUESTIONS),
)


def reflection_questions(period_type: str = "weekly") -> list[ReflectionQuestion]:
    if period_type == "quarterly":
        return list(QUARTERLY_QUESTIONS)
    if period_type == "yearly":
        return [q for _, block in _YEARLY_BLOCKS for q in block]
    return list(WEEKLY_MONTHLY_QUESTIONS)


def yearly_reflection_blocks() -> dict[str, list[ReflectionQuestion]]:
    return {
        "reflection": list(YEARLY_REFLECTION_QUESTIONS),
        "growth": list(YEARLY_GROWTH_QUESTIONS),
        "affirmations": list(YEARLY_AFFIRMATION_QUESTIONS),
    }


# ── Question resolution ───────────────────────────────────────

def _normalize(text: str) -> str:
    return text.strip().rstrip("?").strip()


def _heading_pattern(q: ReflectionQuestion) -> re.Pattern[str]:
    template = _normalize(q.heading or q.question)
    parts = re.split(r"(\{year\}|\{prev_year\}|\{quarter\})", template)
    regex = ""
    for part in parts:
        if part in ("{year}", "{prev_year}"):
            regex += r"\d{4}"
        elif part == "{quarter}":
            regex += r"[1-4]"
        else:
            regex += re.escape(part)
    return re.compile(regex)


def resolve_question_id(question: str, period_type: str = "weekly") -> str | None:
    """Map a stored heading to its catalog question id, or None."""
    text = _normalize(question)
    for q in reflection_questions(period_type):
        if text == _normalize(q.question) or _heading_pattern(q).fullmatch(text):
            return q.id
    return None


def sections_by_key(sections: list[ReflectionSection]) -> dict[str, str]:
    """Answers keyed by question id and by the literal heading text."""
    out: dict[str, str] = {}
    for s in sections:
        out[s.question] = s.answer
        if s.question_id:
            out[s.question_id] = s.answer
    return out


# ── Building / parsing ────────────────────────────────────────

def _answer(sections: dict[str, str], q: ReflectionQuestion, heading: str) -> str:
    """Answer stored under the id, then heading text, then catalog text.

    The first key present wins, so an empty string clears the answer.
    """
    candidates = [q.id]
    for text in (heading, q.question):
        key = _normalize(text)
        candidates += [key, key + "?"]
    for key in candidates:
        if key in sections:
            return sections[key] or ""
    return ""


def _qa_block(questions, sections: dict[str, str], year: int, quarter: int) -> str:
    parts = []
    for q in questions:
        heading = q.heading_for(year, quarter)
        parts.append(f"## {heading}\n\n{_answer(sections, q, heading)}\n")
    return "\n".join(parts)


def build_content_from_sections(
    period_type: str,
    sections: dict[str, str],
    year: int | None = None,
    quarter: int | None = None,
) -> str:
    """Render a reflection body from answers keyed by question id or text."""
    if year is None:
        year = today().year
    quarter = quarter or 1

    if period_type == "quarterly":
        return _qa_block(QUARTERLY_QUESTIONS, sections, year, quarter)
    if period_type == "yearly":
        blocks = []
        for title, questions in _YEARLY_BLOCKS:
            heading = title.format(year=year, prev_year=year - 1)
            blocks.append(f"# {heading}\n\n" + _qa_block(questions, sections, year, quarter))
        return "\n---\n\n".join(blocks)
    return _qa_block(WEEKLY_MONTHLY_QUESTIONS, sections, year, quarter)


def parse_reflection_sections(content: str, period_type: str | None = None) -> list[ReflectionSection]:
    """Split a body into question/answer pairs.

    ``## `` opens a question; a ``# `` heading or a ``---`` rule closes it.
    """
    sections: list[ReflectionSection] = []
    question = ""
    answer: list[str] = []

    def flush() -> None:
        if question:
            qid = resolve_question_id(question, period_type) if period_type else None
            sections.append(ReflectionSection(question, "\n".join(answer).strip(), qid))

    for line in content.split("\n"):
        if line.startswith("## "):
            flush()
            question = line[3:].strip()
            answer = []
        elif line.startswith("# ") or line.startswith("---"):
            flush()
            question = ""
            answer = []
        elif question:
            answer.append(line)
    flush()
    return sections


def generate_reflection_title(fm: ReflectionFrontmatter) -> str:
    if fm.period == "weekly":
        return f"Week {fm.week}"
    if fm.period == "monthly" and fm.month:
        return month_name(fm.month)
    if fm.period == "quarterly":
        return f"Q{fm.quarter} {fm.year}"
    if fm.period == "yearly":
        return str(fm.year)
    return f"{fm.period} Reflection"


def reflection_path(period: Period) -> str:
    year = period.year
    quarter = period.quarter or quarter_of(period.month or 1)
    if period.type == "yearly":
        return f"reflections/{year}/yearly-reflection.md"
    if period.type == "quarterly":
        return f"reflections/{year}/q{quarter}/quarterly-reflection.md"
    if period.type in ("monthly", "weekly"):
        month_dir = month_name(period.month or 1).lower()
        if period.type == "monthly":
            return f"reflections/{year}/q{quarter}/{month_dir}/monthly-reflection.md"
        return f"reflections/{year}/q{quarter}/{month_dir}/week-{period.week or 0:02d}-reflection.md"
    return f"reflections/{year}/reflection.md"


def create_default_reflection(
    period: Period,
    goals_completed: int = 0,
    goals_total: int = 0,
    now: datetime | None = None,
    root: Path | None = None,
) -> tuple[ReflectionFrontmatter, str]:
    if now is None:
        now = now_local(root)
    rate = goals_completed / goals_total if goals_total > 0 else 0
    fm = ReflectionFrontmatter(
        period=period.type,
        year=period.year,
        quarter=period.quarter,
        month=period.month,
        week=period.week,
        date=now.date().isoformat(),
        goals_completed=goals_completed,
        goals_total=goals_total,
        completion_rate=math.floor(rate * 100 + 0.5) / 100,
        created=now.isoformat(timespec="seconds"),
    )
    return fm, build_content_from_sections(period.type, {}, period.year, period.quarter)


# ── Storage ───────────────────────────────────────────────────

def read_reflection(path: str, root: Path | None = None) -> Reflection | None:
    doc = read_document(path, root)
    if doc is None:
        return None
    fm = ReflectionFrontmatter.from_dict(doc.metadata)
    return Reflection(
        id=document_id(path),
        path=path,
        frontmatter=fm,
        content=doc.body,
        title=generate_reflection_title(fm),
        sections=parse_reflection_sections(doc.body, fm.period or None),
    )


def write_reflection(
    path: str,
    frontmatter: ReflectionFrontmatter | dict[str, Any],
    content: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> bool:
    if isinstance(frontmatter, dict):
        frontmatter = ReflectionFrontmatter.from_dict(frontmatter)
    if now is None:
        now = now_local(root)
    stamp = now.isoformat(timespec="seconds")
    frontmatter.updated = stamp
    if not frontmatter.created:
        frontmatter.created = stamp
    if not frontmatter.date:
        frontmatter.date = now.date().isoformat()
    return write_document(path, frontmatter.to_dict(), content, root)


def _newest_first(paths: list[str], root: Path | None) -> list[Reflection]:
    found = [read_reflection(p, root) for p in paths]
    reflections = [r for r in found if r is not None]
    return sorted(reflections, key=lambda r: r.frontmatter.date, reverse=True)


def all_reflections(root: Path | None = None) -> list[Reflection]:
    return _newest_first(list_documents("reflections", root), root)


def reflections_for_year(year: int, root: Path | None = None) -> list[Reflection]:
    return _newest_first(list_documents(f"reflections/{year}", root), root)


def recent_reflections(limit: int = 5, root: Path | None = None) -> list[Reflection]:
    return all_reflections(root)[:limit]


def update_reflection_answers(
    path: str,
    sections: dict[str, str],
    root: Path | None = None,
    now: datetime | None = None,
) -> Reflection | None:
    """Rewrite the answers of an existing reflection; its goal stats stay as they were."""
    existing = read_reflection(path, root)
    if existing is None:
        return None
    fm = existing.frontmatter
    merged = sections_by_key(existing.sections)
    for key, value in sections.items():
        merged[key] = value
        qid = resolve_question_id(key, fm.period)
        if qid:
            merged[qid] = value
    content = build_content_from_sections(fm.period, merged, fm.year, fm.quarter)
    if not write_reflection(path, fm, content, root, now):
        return None
    return read_reflection(path, root)


def create_reflection(
    period: Period,
    sections: dict[str, str],
    linked_goal_path: str | None = None,
    root: Path | None = None,
    now: datetime | None = None,
) -> Reflection | None:
    """Create the reflection for ``period``.

    Goal stats are taken once from the linked goal (default: the period's own
    goal). An existing reflection only gets its answers updated.
    """
    path = reflection_path(period)
    if read_document(path, root) is not None:
        return update_reflection_answers(path, sections, root, now)

    goal_path = linked_goal_path or period_to_path(period)
    goal = read_goal(goal_path, root)
    completed, total = task_counts(goal.tasks) if goal else (0, 0)

    fm, _ = create_default_reflection(period, completed, total, now, root)
    if goal is not None:
        fm.linked_goal_path = goal_path
    content = build_content_from_sections(period.type, sections, period.year, period.quarter)
    if not write_reflection(path, fm, content, root, now):
        return None
    logger.info("Created reflection %s", path)
    return read_reflection(path, root)


def find_linked_reflection(goal: Goal, root: Path | None = None) -> Reflection | None:
    """The reflection linked to ``goal``, falling back to the one for its period."""
    for r in all_reflections(root):
        if r.frontmatter.linked_goal_path == goal.path:
            return r
    fm = goal.frontmatter
    if fm.year is None:
        return None
    try:
        period = period_for(fm.period, fm.year, fm.quarter, fm.month, fm.week)
    except ValueError:
        return None
    return read_reflection(reflection_path(period), root)
