"""Unit tests for PCB summaries and gross income resolution."""

import logging
from decimal import Decimal

import pytest

from lhdncalc.sdk.income import resolve_gross_income
from lhdncalc.sdk.money import InvalidInputError
from lhdncalc.sdk.pcb import latest_by_month, summarize_pcb


def pcb(month, pcb_amount="300", gross="7000", year=2024, **extra):
    data = {"year": year, "month": month, "pcb_amount": pcb_amount, "gross_salary": gross}
    data.update(extra)
    return data


class TestLatestByMonth:
    """Tests for latest_by_month()."""

    def test_last_record_for_month_wins(self):
        records = latest_by_month([pcb(1, "100"), pcb(2), pcb(1, "450")])
        assert [(r.month, r.pcb_amount) for r in records] == [(1, Decimal("450.00")), (2, Decimal("300.00"))]

    def test_sorted_and_filtered_by_year(self):
        records = latest_by_month([pcb(3), pcb(1), pcb(12, year=2023)], year=2024)
        assert [r.month for r in records] == [1, 3]


class TestSummarizePcb:
    """Tests for summarize_pcb()."""

    def test_full_year(self):
        summary = summarize_pcb([pcb(m, epf_employee="770") for m in range(1, 13)], 2024)
        assert summary.total_pcb == Decimal("3600.00")
        assert summary.total_income == Decimal("84000.00")
        assert summary.total_epf == Decimal("9240.00")
        assert summary.months_missing == []

    def test_missing_months(self):
        summary = summarize_pcb([pcb(1), pcb(2, bonus="5000")], 2024)
        assert summary.total_income == Decimal("19000.00")
        assert summary.months_missing == list(range(3, 13))
        assert summary.to_dict()["months_recorded"] == 2

    def test_empty(self):
        summary = summarize_pcb([], 2024)
        assert summary.total_pcb == Decimal("0")
        assert summary.to_dict()["total_paid"] == "0.00"


class TestResolveGrossIncome:
    """Tests for gross income precedence."""

    def test_explicit_wins(self):
        income, source = resolve_gross_income(2024, "90000", [pcb(1)], {"income": {"annual_income": 1}})
        assert (income, source) == (Decimal("90000.00"), "explicit")

    def test_pcb_records(self):
        income, source = resolve_gross_income(2024, None, [pcb(1), pcb(2)], {"income": {"annual_income": 1}})
        assert (income, source) == (Decimal("14000.00"), "pcb_records")

    def test_pcb_records_for_other_year_ignored(self):
        _, source = resolve_gross_income(2024, None, [pcb(1, year=2023)], {"income": {"annual_income": 60000}})
        assert source == "profile_annual"

    def test_profile_annual(self):
        income, source = resolve_gross_income(2024, profile={"income": {"annual_income": 60000}})
        assert (income, source) == (Decimal("60000.00"), "profile_annual")

    def test_profile_monthly_salary(self):
        income, source = resolve_gross_income(2024, profile={"income": {"monthly_salary": 7000}})
        assert (income, source) == (Decimal("84000.00"), "profile_salary")

    def test_nothing_found(self, caplog):
        with caplog.at_level(logging.WARNING):
            income, source = resolve_gross_income(2024)
        assert (income, source) == (Decimal("0"), "none")
        assert "No income found" in caplog.text

    def test_invalid_explicit(self):
        with pytest.raises(InvalidInputError):
            resolve_gross_income(2024, "-1")
