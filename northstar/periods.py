"""Period calendar: boundaries, labels, parent/child links and storage paths.

Weeks start on Monday. Week 1 is the week containing 1 January, so the last
days of December can already belong to week 1 of the next year.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from northstar.models import PERIOD_TYPES, Period
from northstar import workspace

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


# ── Calendar arithmetic ───────────────────────────────────────

def _check_type(period_type: str) -> None:
    if period_type not in PERIOD_TYPES:
        raise ValueError(f"Unknown period type: {period_type!r}")


def _check_quarter(quarter: int | None) -> int:
    if quarter is None or not 1 <= int(quarter) <= 4:
        raise ValueError(f"Quarter must be between 1 and 4, got {quarter!r}")
    return int(quarter)


def _check_month(month: int | None) -> int:
    if month is None or not 1 <= int(month) <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month!r}")
    return int(month)


def _end_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def start_of_week(d: date) -> date:
    return d - timedelta(days=d.weekday())


def add_months(d: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length."""
    idx = d.year * 12 + (d.month - 1) + months
    year, month = divmod(idx, 12)
    month += 1
    return date(year, month, min(d.day, calendar.monthrange(year, month)[1]))


def add_years(d: date, years: int) -> date:
    return add_months(d, years * 12)


def week_year(d: date) -> int:
    """The year whose week numbering ``d`` falls in."""
    if d >= start_of_week(date(d.year + 1, 1, 1)):
        return d.year + 1
    return d.year


def week_number(d: date) -> int:
    first = start_of_week(date(week_year(d), 1, 1))
    return (start_of_week(d) - first).days // 7 + 1


def weeks_in_year(year: int) -> int:
    """52 or 53; the week holding 31 Dec may already be next year's week 1."""
    last = date(year, 12, 31)
    if week_year(last) != year:
        last -= timedelta(weeks=1)
    return week_number(last)


def quarter_of(month: int) -> int:
    return (_check_month(month) - 1) // 3 + 1


def month_name(month: int) -> str:
    return MONTH_NAMES[_check_month(month) - 1]


def quarter_months(quarter: int) -> list[int]:
    first = (_check_quarter(quarter) - 1) * 3 + 1
    return [first, first + 1, first + 2]


# ── Period construction ───────────────────────────────────────

def _period_at(period_type: str, d: date, today: date) -> Period:
    year = d.year
    if period_type == "vision":
        p = Period(
            type="vision",
            year=year + 2,
            label=f"Vision {year + 2}",
            start=date(year, 1, 1),
            end=date(year + 2, 12, 31),
        )
    elif period_type == "yearly":
        p = Period(
            type="yearly",
            year=year,
            label=str(year),
            start=date(year, 1, 1),
            end=date(year, 12, 31),
        )
    elif period_type == "quarterly":
        q = quarter_of(d.month)
        months = quarter_months(q)
        p = Period(
            type="quarterly",
            year=year,
            quarter=q,
            label=f"Q{q} {year}",
            start=date(year, months[0], 1),
            end=_end_of_month(year, months[-1]),
        )
    elif period_type == "monthly":
        p = Period(
            type="monthly",
            year=year,
            quarter=quarter_of(d.month),
            month=d.month,
            label=f"{month_name(d.month)} {year}",
            start=date(year, d.month, 1),
            end=_end_of_month(year, d.month),
        )
    elif period_type == "weekly":
        week = week_number(d)
        start = start_of_week(d)
        p = Period(
            type="weekly",
            year=year,
            quarter=quarter_of(d.month),
            month=d.month,
            week=week,
            label=f"Week {week}, {year}",
            start=start,
            end=start + timedelta(days=6),
        )
    else:
        raise ValueError(f"Unknown period type: {period_type!r}")
    p.is_current = p.contains(today)
    return p


def current_period(
    period_type: str,
    anchor: date | None = None,
    today: date | None = None,
) -> Period:
    """The period of ``period_type`` containing ``anchor`` (default: today).

    A vision period is labelled two years ahead of the anchor and spans from
    the anchor's year to that label year.
    """
    _check_type(period_type)
    if today is None:
        today = workspace.today()
    if anchor is None:
        anchor = today
    return _period_at(period_type, anchor, today)


def period_for(
    period_type: str,
    year: int,
    quarter: int | None = None,
    month: int | None = None,
    week: int | None = None,
    today: date | None = None,
) -> Period:
    """Build a period from explicit fields.

    ``year`` is the period's own year, so ``period_for("vision", 2027)`` is the
    vision stored at ``vision/2027.md``.
    """
    _check_type(period_type)
    if today is None:
        today = workspace.today()

    if period_type == "vision":
        return _period_at("vision", date(year - 2, 1, 1), today)
    if period_type == "yearly":
        return _period_at("yearly", date(year, 1, 1), today)
    if period_type == "quarterly":
        if quarter is None and month is not None:
            quarter = quarter_of(month)
        q = _check_quarter(quarter)
        return _period_at("quarterly", date(year, quarter_months(q)[0], 1), today)
    if period_type == "monthly":
        m = _check_month(month)
        if quarter is not None and _check_quarter(quarter) != quarter_of(m):
            raise ValueError(f"Month {m} is not in Q{quarter}")
        return _period_at("monthly", date(year, m, 1), today)

    # weekly
    count = weeks_in_year(year)
    if week is None or not 1 <= int(week) <= count:
        raise ValueError(f"Week must be between 1 and {count} in {year}, got {week!r}")
    start = start_of_week(date(year, 1, 1)) + timedelta(weeks=int(week) - 1)
    if month is None:
        month = max(start, date(year, 1, 1)).month
    m = _check_month(month)
    if quarter is not None and _check_quarter(quarter) != quarter_of(m):
        raise ValueError(f"Month {m} is not in Q{quarter}")
    p = Period(
        type="weekly",
        year=year,
        quarter=quarter_of(m),
        month=m,
        week=int(week),
        label=f"Week {int(week)}, {year}",
        start=start,
        end=start + timedelta(days=6),
    )
    p.is_current = p.contains(today)
    return p


def periods_for_year(period_type: str, year: int, today: date | None = None) -> list[Period]:
    _check_type(period_type)
    if today is None:
        today = workspace.today()

    if period_type == "quarterly":
        return [_period_at("quarterly", date(year, (q - 1) * 3 + 1, 1), today) for q in range(1, 5)]
    if period_type == "monthly":
        return [_period_at("monthly", date(year, m, 1), today) for m in range(1, 13)]
    if period_type == "yearly":
        return [_period_at("yearly", date(year, 1, 1), today)]
    if period_type == "weekly":
        out = []
        d = date(year, 1, 1)
        while d.year == year:
            # the last anchor of the year may already sit in next year's week 1
            if week_year(d) == year:
                out.append(_period_at("weekly", d, today))
            d += timedelta(weeks=1)
        return out
    return []


# ── Hierarchy ─────────────────────────────────────────────────

def parent_period(period: Period, today: date | None = None) -> Period | None:
    if today is None:
        today = workspace.today()
    if period.type == "weekly":
        return _period_at("monthly", date(period.year, _check_month(period.month), 1), today)
    if period.type == "monthly":
        return _period_at("quarterly", date(period.year, _check_month(period.month), 1), today)
    if period.type == "quarterly":
        return _period_at("yearly", date(period.year, 1, 1), today)
    if period.type == "yearly":
        return _period_at("vision", date(period.year, 1, 1), today)
    if period.type == "vision":
        return None
    raise ValueError(f"Unknown period type: {period.type!r}")


def child_periods(period: Period, today: date | None = None) -> list[Period]:
    if today is None:
        today = workspace.today()

    if period.type == "vision":
        out = []
        d = period.start
        while d <= period.end:
            out.append(_period_at("yearly", d, today))
            d = add_years(d, 1)
        return out
    if period.type == "yearly":
        return periods_for_year("quarterly", period.year, today)
    if period.type == "quarterly":
        out = []
        d = period.start
        while d <= period.end:
            out.append(_period_at("monthly", d, today))
            d = add_months(d, 1)
        return out
    if period.type == "monthly":
        out = []
        d = period.start
        while d <= period.end:
            week = _period_at("weekly", d, today)
            if week.start >= period.start or week.end <= period.end:
                out.append(week)
            d += timedelta(weeks=1)
        return out
    if period.type == "weekly":
        return []
    raise ValueError(f"Unknown period type: {period.type!r}")


def period_hierarchy(period: Period, today: date | None = None) -> list[Period]:
    """The chain from the vision down to ``period`` (inclusive)."""
    if today is None:
        today = workspace.today()
    chain = [period]
    parent = parent_period(period, today)
    while parent is not None:
        chain.insert(0, parent)
        parent = parent_period(parent, today)
    return chain


# ── Paths ─────────────────────────────────────────────────────

def period_to_path(period: Period) -> str:
    """Canonical storage path of the goal document for ``period``."""
    if period.type == "vision":
        return f"vision/{period.year}.md"
    if period.type == "yearly":
        return f"goals/{period.year}/yearly.md"
    q = _check_quarter(period.quarter)
    if period.type == "quarterly":
        return f"goals/{period.year}/q{q}/quarterly.md"
    month_dir = month_name(_check_month(period.month)).lower()
    if period.type == "monthly":
        return f"goals/{period.year}/q{q}/{month_dir}/monthly.md"
    if period.type == "weekly":
        if period.week is None:
            raise ValueError("Weekly period without a week number")
        return f"goals/{period.year}/q{q}/{month_dir}/week-{period.week:02d}.md"
    raise ValueError(f"Unknown period type: {period.type!r}")
