"""Tests for northstar/periods.py."""

from datetime import date

import pytest

from northstar.periods import (
    add_months,
    add_years,
    child_periods,
    current_period,
    parent_period,
    period_for,
    period_hierarchy,
    period_to_path,
    periods_for_year,
    week_number,
    week_year,
    weeks_in_year,
)

TODAY = date(2025, 1, 15)


def test_weekly_period_bounds():
    p = current_period("weekly", TODAY, today=TODAY)
    assert p.start == date(2025, 1, 13)
    assert p.end == date(2025, 1, 19)
    assert p.week == 3
    assert p.month == 1
    assert p.quarter == 1
    assert p.label == "Week 3, 2025"
    assert p.is_current is True


def test_week_one_contains_january_first():
    assert week_number(date(2025, 1, 1)) == 1
    assert week_number(date(2025, 1, 5)) == 1
    assert week_number(date(2025, 1, 6)) == 2
    # Monday 30 Dec 2024 already belongs to week 1 of 2025
    assert week_number(date(2024, 12, 31)) == 1
    assert week_year(date(2024, 12, 31)) == 2025
    assert week_year(date(2024, 12, 29)) == 2024


def test_monthly_period_leap_year():
    p = current_period("monthly", date(2024, 2, 10), today=TODAY)
    assert p.start == date(2024, 2, 1)
    assert p.end == date(2024, 2, 29)
    assert p.label == "February 2024"
    assert p.is_current is False


def test_quarterly_period():
    p = current_period("quarterly", date(2025, 5, 20), today=TODAY)
    assert p.quarter == 2
    assert p.start == date(2025, 4, 1)
    assert p.end == date(2025, 6, 30)
    assert p.label == "Q2 2025"


def test_vision_period_spans_three_years():
    p = current_period("vision", date(2025, 6, 1), today=TODAY)
    assert p.year == 2027
    assert p.label == "Vision 2027"
    assert p.start == date(2025, 1, 1)
    assert p.end == date(2027, 12, 31)
    assert p.is_current is True


def test_unknown_period_type():
    with pytest.raises(ValueError):
        current_period("daily", TODAY, today=TODAY)


def test_period_for_explicit_fields():
    assert period_for("vision", 2027, today=TODAY).start == date(2025, 1, 1)
    assert period_for("quarterly", 2025, quarter=3, today=TODAY).start == date(2025, 7, 1)
    assert period_for("monthly", 2025, month=11, today=TODAY).end == date(2025, 11, 30)

    week = period_for("weekly", 2025, week=3, today=TODAY)
    assert week.start == date(2025, 1, 13)
    assert week.month == 1

    first = period_for("weekly", 2025, week=1, today=TODAY)
    assert first.start == date(2024, 12, 30)
    assert first.month == 1


def test_period_for_rejects_inconsistent_fields():
    with pytest.raises(ValueError):
        period_for("monthly", 2025, quarter=2, month=1, today=TODAY)
    with pytest.raises(ValueError):
        period_for("quarterly", 2025, quarter=5, today=TODAY)
    with pytest.raises(ValueError):
        period_for("monthly", 2025, month=13, today=TODAY)
    with pytest.raises(ValueError):
        period_for("weekly", 2025, today=TODAY)


def test_periods_for_year_counts():
    assert len(periods_for_year("quarterly", 2025, TODAY)) == 4
    assert len(periods_for_year("monthly", 2025, TODAY)) == 12
    assert len(periods_for_year("yearly", 2025, TODAY)) == 1
    assert periods_for_year("vision", 2025, TODAY) == []


def test_weekly_periods_skip_next_years_week_one():
    weeks = periods_for_year("weekly", 2024, TODAY)
    assert [w.week for w in weeks] == list(range(1, 53))
    assert all(w.type == "weekly" for w in weeks)


def test_hierarchy_from_week_to_vision():
    week = current_period("weekly", TODAY, today=TODAY)
    chain = period_hierarchy(week, TODAY)
    assert [p.type for p in chain] == ["vision", "yearly", "quarterly", "monthly", "weekly"]
    assert chain[0].year == 2027
    assert chain[3].month == 1
    assert parent_period(chain[0], TODAY) is None


def test_child_periods():
    vision = period_for("vision", 2027, today=TODAY)
    assert [p.year for p in child_periods(vision, TODAY)] == [2025, 2026, 2027]

    year = current_period("yearly", TODAY, today=TODAY)
    assert [p.quarter for p in child_periods(year, TODAY)] == [1, 2, 3, 4]

    q1 = current_period("quarterly", TODAY, today=TODAY)
    assert [p.month for p in child_periods(q1, TODAY)] == [1, 2, 3]

    january = current_period("monthly", TODAY, today=TODAY)
    weeks = child_periods(january, TODAY)
    assert [w.week for w in weeks] == [1, 2, 3, 4, 5]
    assert weeks[0].start == date(2024, 12, 30)

    assert child_periods(weeks[0], TODAY) == []


def test_period_to_path():
    assert period_to_path(period_for("vision", 2027, today=TODAY)) == "vision/2027.md"
    assert period_to_path(current_period("yearly", TODAY, today=TODAY)) == "goals/2025/yearly.md"
    assert period_to_path(period_for("quarterly", 2025, quarter=3, today=TODAY)) == "goals/2025/q3/quarterly.md"
    assert period_to_path(current_period("monthly", TODAY, today=TODAY)) == "goals/2025/q1/january/monthly.md"
    assert period_to_path(current_period("weekly", TODAY, today=TODAY)) == "goals/2025/q1/january/week-03.md"


def test_add_months_clamps_day():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)
    assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)


def test_parent_of_each_child_is_the_period():
    periods = [period_for("yearly", 2025, today=TODAY)]
    periods += [period_for("quarterly", 2025, quarter=q, today=TODAY) for q in range(1, 5)]
    periods += [period_for("monthly", 2025, month=m, today=TODAY) for m in (1, 2, 6, 12)]
    periods.append(period_for("monthly", 2024, month=12, today=TODAY))
    for period in periods:
        children = child_periods(period, TODAY)
        assert children
        for child in children:
            assert period_to_path(parent_period(child, TODAY)) == period_to_path(period)


def test_january_week_one_belongs_to_january():
    january = period_for("monthly", 2025, month=1, today=TODAY)
    first = child_periods(january, TODAY)[0]
    assert first.start == date(2024, 12, 30)
    assert period_to_path(first) == "goals/2025/q1/january/week-01.md"
    assert period_to_path(parent_period(first, TODAY)) == "goals/2025/q1/january/monthly.md"


def test_weekly_period_rejects_week_past_year_end():
    assert weeks_in_year(2025) == 52
    assert weeks_in_year(2023) == 53
    assert period_for("weekly", 2025, week=52, today=TODAY).start == date(2025, 12, 22)
    assert period_for("weekly", 2023, week=53, today=TODAY).start == date(2023, 12, 25)
    with pytest.raises(ValueError):
        period_for("weekly", 2025, week=53, today=TODAY)
    assert weeks_in_year(2025) == len(periods_for_year("weekly", 2025, TODAY))
