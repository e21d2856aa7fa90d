"""Unit tests for relief category aggregation."""

from decimal import Decimal

import pytest

from lhdncalc.sdk.taxes.reliefs import (
    aggregate,
    over_limit_warnings,
    sort_for_display,
    summarize_by_type,
    unknown_categories,
)
from lhdncalc.sdk.taxes.schemas import ReliefCategory


@pytest.fixture
def categories():
    return [
        ReliefCategory(code="SELF", name="Self", annual_limit=9000, sort_order=1),
        ReliefCategory(code="LIFESTYLE", name="Lifestyle", annual_limit=2500, sort_order=2),
        ReliefCategory(code="MEDICAL", name="Medical", annual_limit=8000, sort_order=3),
        ReliefCategory(code="DONATION", name="Donation", annual_limit=None, relief_type="deduction", sort_order=4),
        ReliefCategory(code="ZAKAT", name="Zakat", annual_limit=None, relief_type="rebate", sort_order=5),
    ]


def claim(category, amount, year=2024):
    return {"category": category, "amount": amount, "year": year}


def by_code(breakdowns):
    return {b.code: b for b in breakdowns}


class TestAggregate:
    """Tests for aggregate()."""

    def test_over_limit_is_capped(self, categories):
        result = by_code(aggregate([claim("LIFESTYLE", "1000"), claim("LIFESTYLE", "2000")], categories))
        lifestyle = result["LIFESTYLE"]
        assert lifestyle.user_total == Decimal("3000")
        assert lifestyle.claimable == Decimal("2500")
        assert lifestyle.remaining == Decimal("0")
        assert lifestyle.excess == Decimal("500")
        assert lifestyle.percentage == Decimal("120.00")
        assert lifestyle.item_count == 2
        assert lifestyle.over_limit

    def test_under_limit(self, categories):
        medical = by_code(aggregate([claim("MEDICAL", "1500.50")], categories))["MEDICAL"]
        assert medical.claimable == Decimal("1500.50")
        assert medical.remaining == Decimal("6499.50")
        assert medical.excess == Decimal("0")
        assert not medical.over_limit

    def test_uncapped_passes_through(self, categories):
        donation = by_code(aggregate([claim("DONATION", "50000")], categories))["DONATION"]
        assert donation.claimable == Decimal("50000")
        assert donation.remaining is None
        assert donation.percentage == Decimal("0.00")
        assert donation.excess == Decimal("0")

    def test_every_category_present(self, categories):
        result = aggregate([], categories)
        assert [b.code for b in result] == ["SELF", "LIFESTYLE", "MEDICAL", "DONATION", "ZAKAT"]
        assert all(b.user_total == 0 and b.item_count == 0 for b in result)

    def test_unknown_category_ignored(self, categories):
        result = aggregate([claim("BOGUS", "100"), claim("SELF", "9000")], categories)
        assert sum(b.user_total for b in result) == Decimal("9000")
        assert unknown_categories([claim("BOGUS", "100"), claim("SELF", "1")], categories) == ["BOGUS"]

    def test_year_filter(self, categories):
        result = by_code(aggregate([claim("SELF", "9000", 2023), claim("SELF", "100")], categories, year=2024))
        assert result["SELF"].user_total == Decimal("100")

    def test_claimable_never_exceeds_limit(self, categories):
        deductions = [claim(code, amount) for code in ("SELF", "LIFESTYLE", "MEDICAL") for amount in ("4000", "7000")]
        for b in aggregate(deductions, categories):
            assert b.claimable <= b.user_total
            if b.annual_limit is not None:
                assert b.claimable <= b.annual_limit

    def test_idempotent(self, categories):
        deductions = [claim("SELF", "9000"), claim("LIFESTYLE", "3000"), claim("ZAKAT", "120")]
        assert aggregate(deductions, categories) == aggregate(deductions, categories)

    def test_to_dict(self, categories):
        data = by_code(aggregate([claim("LIFESTYLE", "3000")], categories))["LIFESTYLE"].to_dict()
        assert data["limit"] == "2500.00"
        assert data["claimable"] == "2500.00"
        assert data["excess"] == "500.00"
        assert data["percentage"] == "120.00"


class TestDisplayAndSummary:
    """Tests for sort_for_display, summarize_by_type and warnings."""

    def test_sort_for_display(self, categories):
        deductions = [claim("MEDICAL", "500"), claim("LIFESTYLE", "2500"), claim("ZAKAT", "500")]
        ordered = [b.code for b in sort_for_display(aggregate(deductions, categories))]
        # Claimed first by amount desc, ties by sort_order; then unclaimed by sort_order
        assert ordered == ["LIFESTYLE", "MEDICAL", "ZAKAT", "SELF", "DONATION"]

    def test_summarize_by_type(self, categories):
        deductions = [claim("SELF", "9000"), claim("LIFESTYLE", "3000"), claim("DONATION", "200"), claim("ZAKAT", "150")]
        totals = summarize_by_type(aggregate(deductions, categories))
        assert totals == {
            "relief": Decimal("11500"),
            "deduction": Decimal("200"),
            "rebate": Decimal("150"),
        }

    def test_over_limit_warnings(self, categories):
        warnings = over_limit_warnings(aggregate([claim("LIFESTYLE", "3000")], categories))
        assert warnings == ["LIFESTYLE: claimed RM 3,000.00 exceeds annual limit RM 2,500.00 by RM 500.00 (capped)"]
