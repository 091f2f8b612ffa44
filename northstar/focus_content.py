"""Expectations + focus-area parsing for vision, yearly and quarterly goals.

Two historical layouts are accepted:

    ## 🏆 Personlig udvikling        ### 🏆 Personlig udvikling
    - Point                          - Fokuspunkter
        - Sub-point                  - Point

Both parse into the same structure; the serializer always writes the first.
Sub-points are kept in the flat ``points`` list with a two-space prefix.
"""

from __future__ import annotations

import re

from northstar.models import FocusArea, StructuredContent

DEFAULT_EMOJI = "📌"
SUB_POINT_PREFIX = "  "

_EMOJI_CHAR = (
    "[\u00a9\u00ae\u203c\u2049\u2122\u2139\u2194-\u2199\u21a9\u21aa\u231a\u231b"
    "\u2328\u23cf\u23e9-\u23f3\u23f8-\u23fa\u24c2\u25aa\u25ab\u25b6\u25c0"
    "\u25fb-\u25fe\u2600-\u27bf\u2934\u2935\u2b05-\u2b07\u2b1b\u2b1c\u2b50"
    "\u2b55\u3030\u303d\u3297\u3299\U0001F000-\U0001FAFF]"
)
_KEYCAP = "[0-9#*]\uFE0F?\u20E3"
_FLAG = "[\U0001F1E6-\U0001F1FF]{2}"
_MODIFIER = "[\U0001F3FB-\U0001F3FF\uFE0F\u20E3\U000E0020-\U000E007F]"
_EMOJI_RE = re.compile(
    rf"^((?:{_KEYCAP}|{_FLAG}|{_EMOJI_CHAR})(?:{_MODIFIER}|\u200D{_EMOJI_CHAR})*)"
)

_HEADER_RE = re.compile(r"^(#{2,3})\s+(.+)$")
_SEPARATOR_RE = re.compile(r"-{3,}")
_EXPECTATION_MARKERS = ("Største målsætninger", "Største forventninger")
_FOCUS_MARKER = "Fokuspunkter"


def extract_emoji(text: str) -> tuple[str, str]:
    """Split a leading emoji sequence (with modifiers and ZWJ joins) off ``text``."""
    m = _EMOJI_RE.match(text)
    if m:
        return m.group(1), text[m.end():].strip()
    return DEFAULT_EMOJI, text.strip()


def _strip_goal(line: str) -> str:
    s = re.sub(r"^\*\*Mål:\s*", "", line, count=1)
    s = re.sub(r"^\*\*Mål\s*", "", s, count=1)
    s = s.replace("**", "")
    s = re.sub(r"Mål:\s*", "", s, count=1)
    return s.strip()


def _strip_reason(line: str) -> str:
    s = re.sub(r"^\*Årsag:\s*", "", line, count=1)
    s = s.replace("*", "")
    s = re.sub(r"Årsag:\s*", "", s, count=1)
    return s.strip()


def parse_structured_content(content: str, is_vision: bool = False) -> StructuredContent:
    """Parse expectations and focus areas out of a goal body.

    Goal (``**Mål:**``) and reason (``*Årsag:*``) lines are only recognized
    when ``is_vision`` is set, and only when the label starts the line.
    Level-1 headings and plain prose are ignored.
    """
    result = StructuredContent()
    area: FocusArea | None = None
    in_expectations = False
    in_points = False

    for line in content.split("\n"):
        trimmed = line.strip()

        if _SEPARATOR_RE.fullmatch(trimmed):
            continue

        header = _HEADER_RE.match(trimmed)
        if header:
            text = header.group(2).replace("**", "").strip()
            if area is not None:
                result.focus_areas.append(area)
                area = None
            if any(marker in text for marker in _EXPECTATION_MARKERS):
                in_expectations = True
                in_points = False
                continue
            in_expectations = False
            in_points = True
            emoji, name = extract_emoji(text)
            area = FocusArea(emoji=emoji, name=name)
            continue

        if is_vision and area is not None:
            if trimmed.startswith(("**Mål", "Mål:")):
                area.goal = _strip_goal(trimmed) or None
                continue
            if trimmed.startswith(("*Årsag", "Årsag:")):
                area.reason = _strip_reason(trimmed) or None
                continue

        if trimmed in ("- " + _FOCUS_MARKER, _FOCUS_MARKER):
            in_points = True
            continue

        if not trimmed.startswith("- "):
            continue
        bullet = trimmed[2:].strip()
        if bullet == _FOCUS_MARKER:
            in_points = True
            continue
        if not bullet:
            continue

        if in_expectations:
            result.expectations.append(bullet)
        elif area is not None and in_points:
            indent = len(line) - len(line.lstrip())
            area.points.append(SUB_POINT_PREFIX + bullet if indent >= 4 else bullet)

    if area is not None:
        result.focus_areas.append(area)
    return result


def expectations_label(
    period_type: str,
    year: int | None = None,
    quarter: int | None = None,
) -> str:
    if period_type == "vision":
        return "Største målsætninger"
    if period_type == "yearly":
        return f"{year} Største forventninger" if year else "Største forventninger"
    if period_type == "quarterly":
        return f"Q{quarter} Største forventninger" if quarter else "Største forventninger"
    raise ValueError(f"No focus-area layout for period type {period_type!r}")


def build_structured_content(
    content: StructuredContent,
    period_type: str,
    year: int | None = None,
    quarter: int | None = None,
) -> str:
    """Render expectations and focus areas in the canonical layout."""
    label = expectations_label(period_type, year, quarter)
    out = ""

    if content.expectations:
        out += f"## {label}\n\n"
        for expectation in content.expectations:
            out += f"- {expectation}\n"
        out += "\n"

    for area in content.focus_areas:
        out += f"## {area.emoji or DEFAULT_EMOJI} {area.name}\n\n"
        if period_type == "vision" and (area.goal or area.reason):
            if area.goal:
                out += f"**Mål:** {area.goal}\n"
            if area.reason:
                out += f"*Årsag: {area.reason}*\n\n"
        for point in area.points:
            if point.startswith(SUB_POINT_PREFIX):
                out += f"    - {point.strip()}\n"
            else:
                out += f"- {point}\n"
        out += "\n"

    return out.strip()
