"""Unit tests for progressive tax calculation."""

from decimal import Decimal

import pytest

from lhdncalc.sdk.taxes.brackets import compute_tax, iter_bands
from lhdncalc.sdk.taxes.rules import load_tax_rules


@pytest.fixture
def brackets():
    return load_tax_rules(2024).tax_brackets


class TestComputeTax:
    """Tests for compute_tax against the YA 2024 schedule."""

    @pytest.mark.parametrize("income,expected", [
        ("5000", "0.00"),
        ("20000", "150.00"),
        ("35000", "600.00"),
        ("50000", "1500.00"),
        ("60000", "2600.00"),
        ("70000", "3700.00"),
        ("100000", "9400.00"),
        ("400000", "84400.00"),
        ("600000", "136400.00"),
        ("2000000", "528400.00"),
        ("2100000", "558400.00"),
    ])
    def test_cumulative_tax(self, brackets, income, expected):
        assert compute_tax(Decimal(income), brackets).gross_tax == Decimal(expected)

    def test_zero_income(self, brackets):
        result = compute_tax(Decimal("0"), brackets)
        assert result.gross_tax == Decimal("0.00")
        assert result.effective_rate == Decimal("0.00")
        assert result.breakdown == ()

    def test_negative_income_treated_as_zero(self, brackets):
        result = compute_tax(Decimal("-100"), brackets)
        assert result.gross_tax == Decimal("0.00")
        assert result.chargeable_income == Decimal("0")

    def test_effective_rate(self, brackets):
        result = compute_tax(Decimal("60000"), brackets)
        assert result.effective_rate == Decimal("4.33")

    def test_rounds_to_sen(self, brackets):
        # 0.50 in the 3% band adds 0.015
        result = compute_tax(Decimal("20000.50"), brackets)
        assert result.gross_tax == Decimal("150.02")

    def test_top_rate_only_applies_to_slice(self, brackets):
        """Income just over a threshold is taxed at the higher rate only on the excess."""
        below = compute_tax(Decimal("50000"), brackets).gross_tax
        above = compute_tax(Decimal("50001"), brackets).gross_tax
        assert above - below == Decimal("0.11")

    def test_breakdown_slices(self, brackets):
        result = compute_tax(Decimal("60000"), brackets)
        assert [s.taxable_amount for s in result.breakdown] == [
            Decimal("5000"), Decimal("15000"), Decimal("15000"), Decimal("15000"), Decimal("10000"),
        ]
        assert sum(s.tax for s in result.breakdown) == result.gross_tax
        assert result.breakdown[-1].to_dict()["bracket"] == "RM 50,000.00 - RM 70,000.00"

    def test_top_band_label(self, brackets):
        result = compute_tax(Decimal("2500000"), brackets)
        assert result.breakdown[-1].upper is None
        assert result.breakdown[-1].label == "RM 2,000,000.00 and above"

    def test_accepts_string_income(self, brackets):
        assert compute_tax("50000", brackets).gross_tax == Decimal("1500.00")


class TestTaxProperties:
    """Properties that must hold across incomes."""

    def test_non_negative_and_monotonic(self, brackets):
        previous = Decimal("-1")
        for income in range(0, 2_200_000, 7_919):
            tax = compute_tax(Decimal(income), brackets).gross_tax
            assert tax >= 0
            assert tax >= previous
            previous = tax

    def test_bands_are_contiguous(self, brackets):
        bands = list(iter_bands(brackets))
        for (_, upper, _), (lower, _, _) in zip(bands, bands[1:]):
            assert upper == lower
        assert bands[0][0] == Decimal("0")
        assert bands[-1][1] is None
