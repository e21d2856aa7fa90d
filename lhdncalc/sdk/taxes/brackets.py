"""Progressive income tax calculation.

The schedule comes from the year's TaxRules; this module only knows how
to walk ascending bands and tax each slice of income at its marginal rate.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterator, Optional, Sequence

from ..money import ZERO, format_rm, money_str, percent, round_sen, to_decimal
from .schemas import TaxBracket


@dataclass(frozen=True)
class BracketSlice:
    """Portion of income taxed within one band."""
    lower: Decimal
    upper: Optional[Decimal]
    rate: Decimal
    taxable_amount: Decimal
    tax: Decimal

    @property
    def label(self) -> str:
        upper = "and above" if self.upper is None else f"- {format_rm(self.upper)}"
        return f"{format_rm(self.lower)} {upper}"

    def to_dict(self) -> dict:
        return {
            "bracket": self.label,
            "lower": money_str(self.lower),
            "upper": money_str(self.upper),
            "rate": str(self.rate),
            "taxable_amount": money_str(self.taxable_amount),
            "tax": money_str(self.tax),
        }


@dataclass(frozen=True)
class TaxComputation:
    """Result of applying the bracket schedule to an income."""
    chargeable_income: Decimal
    gross_tax: Decimal
    effective_rate: Decimal
    breakdown: tuple[BracketSlice, ...] = field(default_factory=tuple)


def iter_bands(brackets: Sequence[TaxBracket]) -> Iterator[tuple[Decimal, Optional[Decimal], Decimal]]:
    """Yield (lower, upper, rate) for each band; upper is None for the top band."""
    lower = ZERO
    for bracket in brackets:
        if bracket.up_to is not None:
            yield lower, bracket.up_to, bracket.rate
            lower = bracket.up_to
        else:
            yield bracket.over, None, bracket.rate


def compute_tax(chargeable_income, brackets: Sequence[TaxBracket]) -> TaxComputation:
    """Calculate progressive tax on chargeable income.

    Args:
        chargeable_income: Income after reliefs (Decimal or numeric)
        brackets: Ascending bracket schedule from TaxRules.tax_brackets

    Returns:
        TaxComputation with tax rounded to sen and effective rate in percent.
        Income of zero or less gives zero tax and a zero effective rate.
    """
    income = to_decimal(chargeable_income, "chargeable_income")

    if income <= 0:
        return TaxComputation(chargeable_income=ZERO, gross_tax=round_sen(ZERO), effective_rate=percent(ZERO, ZERO))

    total = ZERO
    slices = []

    for lower, upper, rate in iter_bands(brackets):
        if income <= lower:
            break
        top = income if upper is None else min(income, upper)
        taxable = top - lower
        tax = taxable * rate
        total += tax
        slices.append(BracketSlice(lower=lower, upper=upper, rate=rate, taxable_amount=taxable, tax=round_sen(tax)))

    gross_tax = round_sen(total)
    return TaxComputation(
        chargeable_income=income,
        gross_tax=gross_tax,
        effective_rate=percent(gross_tax, income),
        breakdown=tuple(slices),
    )
