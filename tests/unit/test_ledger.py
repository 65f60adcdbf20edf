"""Unit tests for ledger aggregation"""

import pytest
from datetime import date
from decimal import Decimal
from ledger_desk.domain.ledger import (
    entries_in_month,
    filter_entries,
    summarize_month,
    summarize_years,
    to_amount,
    total_paid,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1500.50", Decimal("1500.50")),
        (250, Decimal("250")),
        (Decimal("12.5"), Decimal("12.5")),
        (" 42 ", Decimal("42")),
        (None, Decimal("0")),
        ("", Decimal("0")),
        ("n/a", Decimal("0")),
        ("NaN", Decimal("0")),
        (float("inf"), Decimal("0")),
        ("1,000", Decimal("0")),
    ],
)
def test_to_amount(raw, expected):
    """Malformed amounts count as zero, never NaN"""
    assert to_amount(raw) == expected


def test_summarize_month_profit_is_income_minus_expense(sample_entries):
    summary = summarize_month(sample_entries)

    assert summary.income == Decimal("1750.50")
    assert summary.expense == Decimal("500.00")
    assert summary.profit == summary.income - summary.expense


def test_summarize_month_malformed_amounts_contribute_zero(entry_factory):
    entries = [
        entry_factory(1, date(2024, 5, 1), "income", "abc"),
        entry_factory(2, date(2024, 5, 1), "income", Decimal("100")),
        entry_factory(3, date(2024, 5, 1), "expense", None),
        entry_factory(4, date(2024, 5, 1), "expense", "NaN"),
    ]

    summary = summarize_month(entries)

    assert summary.income == Decimal("100")
    assert summary.expense == Decimal("0")
    assert summary.profit == Decimal("100")
    assert not summary.profit.is_nan()


def test_summarize_month_does_not_mutate_entries(sample_entries):
    before = [(e.id, e.amount) for e in sample_entries]
    summarize_month(sample_entries)
    assert [(e.id, e.amount) for e in sample_entries] == before


def test_summarize_month_empty():
    summary = summarize_month([])
    assert (summary.income, summary.expense, summary.profit) == (0, 0, 0)


def test_entries_in_month_keeps_order(sample_entries):
    may = entries_in_month(sample_entries, 2024, 5)
    assert [e.id for e in may] == [1, 2, 3]


def test_summarize_years_zero_fills_window(sample_entries):
    """Exactly five years, ascending, zeros where there are no entries"""
    summaries = summarize_years(sample_entries, current_year=2026)

    assert [s.year for s in summaries] == [2022, 2023, 2024, 2025, 2026]
    by_year = {s.year: s for s in summaries}
    assert by_year[2024].income == Decimal("1750.50")
    assert by_year[2024].expense == Decimal("500.00")
    assert by_year[2024].profit == Decimal("1250.50")
    for year in (2022, 2023, 2025, 2026):
        assert (by_year[year].income, by_year[year].expense, by_year[year].profit) == (0, 0, 0)


def test_summarize_years_ignores_entries_outside_window(entry_factory):
    entries = [
        entry_factory(1, date(2015, 1, 1), "income", Decimal("999")),
        entry_factory(2, date(2026, 3, 1), "income", Decimal("10")),
    ]

    summaries = summarize_years(entries, current_year=2026)

    assert len(summaries) == 5
    assert sum(s.income for s in summaries) == Decimal("10")


def test_summarize_years_with_no_entries():
    summaries = summarize_years([], current_year=2024)
    assert [s.year for s in summaries] == [2020, 2021, 2022, 2023, 2024]
    assert all(s.profit == 0 for s in summaries)


def test_filter_entries_by_year_and_month(sample_entries):
    filtered = filter_entries(sample_entries, year=2024, month=4)
    assert [e.id for e in filtered] == [4]


def test_filter_entries_search_fields(sample_entries):
    """Search matches description, client name, staff name and reference id"""
    assert [e.id for e in filter_entries(sample_entries, search="hosting")] == [3]
    assert [e.id for e in filter_entries(sample_entries, search="ACME")] == [1]
    assert [e.id for e in filter_entries(sample_entries, search="ravi")] == [2, 4]
    assert [e.id for e in filter_entries(sample_entries, search="inv-2")] == [3]


def test_filter_entries_blank_search_matches_all(sample_entries):
    assert filter_entries(sample_entries, search="   ") == sample_entries


def test_filter_entries_search_ignores_surrounding_whitespace(sample_entries):
    """Pasted queries with stray spaces still match"""
    assert [e.id for e in filter_entries(sample_entries, search="  acme ")] == [1]
    assert [e.id for e in filter_entries(sample_entries, search="\tMay salary\n")] == [2]


def test_filter_entries_is_subset_and_idempotent(sample_entries):
    once = filter_entries(sample_entries, year=2024, month=5, search="a")
    twice = filter_entries(once, year=2024, month=5, search="a")

    assert all(e in sample_entries for e in once)
    assert twice == once


def test_total_paid_skips_malformed_amounts():
    assert total_paid([Decimal("12000.00"), "3000.50", "oops", None]) == Decimal("15000.50")
