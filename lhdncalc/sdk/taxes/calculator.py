"""Full tax position for a year of assessment.

Ties the pieces together: relief aggregation, progressive tax on gross and
chargeable income, rebates, PCB totals and the refund/owed outcome.
Everything here is pure computation over already-loaded inputs; callers
supply the TaxRules for the year (see rules.load_tax_rules).
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..money import ZERO, money_str, parse_amount, round_sen
from ..pcb import PcbSummary, summarize_pcb
from ..schemas import DeductionRecord, parse_records
from .brackets import BracketSlice, compute_tax
from .reliefs import (
    CategoryBreakdown,
    aggregate,
    over_limit_warnings,
    summarize_by_type,
    unknown_categories,
)
from .resolution import Resolution, resolve
from .schemas import TaxRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxProjection:
    """Year-end estimate extrapolated from income to date."""
    months_elapsed: int
    months_remaining: int
    projected_income: Decimal
    projected_chargeable_income: Decimal
    projected_tax: Decimal

    def to_dict(self) -> dict:
        return {
            "months_elapsed": self.months_elapsed,
            "months_remaining": self.months_remaining,
            "projected_income": money_str(self.projected_income),
            "projected_chargeable_income": money_str(self.projected_chargeable_income),
            "projected_tax": money_str(self.projected_tax),
        }


@dataclass(frozen=True)
class TaxCalculation:
    """Tax position for one year of assessment."""
    year: int
    gross_income: Decimal
    total_claimable: Decimal
    chargeable_income: Decimal
    gross_tax: Decimal
    tax_on_chargeable: Decimal
    rebates: Decimal
    net_tax_payable: Decimal
    tax_savings: Decimal
    effective_rate: Decimal
    pcb: PcbSummary
    result: Resolution
    projection: TaxProjection
    categories: list[CategoryBreakdown] = field(default_factory=list)
    breakdown: tuple[BracketSlice, ...] = field(default_factory=tuple)
    warnings: list[str] = field(default_factory=list)

    @property
    def total_pcb_paid(self) -> Decimal:
        return self.pcb.total_pcb

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "gross_income": money_str(self.gross_income),
            "total_claimable": money_str(self.total_claimable),
            "chargeable_income": money_str(self.chargeable_income),
            "gross_tax": money_str(self.gross_tax),
            "tax_on_chargeable": money_str(self.tax_on_chargeable),
            "rebates": money_str(self.rebates),
            "net_tax_payable": money_str(self.net_tax_payable),
            "tax_savings": money_str(self.tax_savings),
            "effective_rate": str(self.effective_rate),
            "total_pcb_paid": money_str(self.total_pcb_paid),
            "result": self.result.to_dict(),
            "pcb": self.pcb.to_dict(),
            "projection": self.projection.to_dict(),
            "breakdown": [s.to_dict() for s in self.breakdown],
            "categories": [c.to_dict() for c in self.categories],
            "warnings": list(self.warnings),
        }


def months_elapsed_in_year(year: int, as_of: Optional[date]) -> int:
    """Months of the YA covered by income to date (0..12)."""
    if as_of is None or as_of.year > year:
        return 12
    if as_of.year < year:
        return 0
    return as_of.month


def _net_tax(chargeable_income: Decimal, rules: TaxRules, rebates: Decimal) -> tuple[Decimal, Decimal]:
    tax = compute_tax(chargeable_income, rules.tax_brackets).gross_tax
    return tax, max(ZERO, tax - rebates)


def calculate_tax(
    year: int,
    gross_income,
    deductions: Iterable,
    pcb_records: Iterable,
    rules: TaxRules,
    as_of: Optional[date] = None,
) -> TaxCalculation:
    """Calculate the full tax position for a year.

    Args:
        year: Year of assessment
        gross_income: Annual gross income (RM)
        deductions: DeductionRecord instances or dicts; other years ignored
        pcb_records: PcbRecord instances or dicts; other years ignored
        rules: Tax rules for the year
        as_of: Date for the year-end projection (default: treat the year
            as complete)

    Returns:
        TaxCalculation

    Raises:
        InvalidInputError: If gross_income or any record is invalid
    """
    gross_income = parse_amount(gross_income, "gross_income")
    records = [d for d in parse_records(DeductionRecord, deductions) if d.year == year]

    categories = aggregate(records, rules.relief_categories, year=year)
    by_type = summarize_by_type(categories)
    total_claimable = by_type["relief"] + by_type["deduction"]
    rebates = by_type["rebate"]

    warnings = over_limit_warnings(categories)
    for code in unknown_categories(records, rules.relief_categories):
        warnings.append(f"{code}: unknown relief category for YA {rules.year} (ignored)")
    for message in warnings:
        logger.warning(message)

    chargeable_income = max(ZERO, gross_income - total_claimable)

    without_relief = compute_tax(gross_income, rules.tax_brackets)
    with_relief = compute_tax(chargeable_income, rules.tax_brackets)
    net_tax_payable = max(ZERO, with_relief.gross_tax - rebates)
    tax_savings = max(ZERO, without_relief.gross_tax - net_tax_payable)

    pcb = summarize_pcb(pcb_records, year)
    result = resolve(net_tax_payable, pcb.total_pcb)

    elapsed = months_elapsed_in_year(year, as_of)
    if 0 < elapsed < 12:
        projected_income = round_sen(gross_income / elapsed * 12)
        projected_chargeable = max(ZERO, projected_income - total_claimable)
        _, projected_tax = _net_tax(projected_chargeable, rules, rebates)
    else:
        projected_income = gross_income
        projected_chargeable = chargeable_income
        projected_tax = net_tax_payable

    logger.debug(
        f"YA {year}: gross={gross_income} claimable={total_claimable} "
        f"chargeable={chargeable_income} net_tax={net_tax_payable}"
    )

    return TaxCalculation(
        year=year,
        gross_income=gross_income,
        total_claimable=total_claimable,
        chargeable_income=chargeable_income,
        gross_tax=without_relief.gross_tax,
        tax_on_chargeable=with_relief.gross_tax,
        rebates=rebates,
        net_tax_payable=net_tax_payable,
        tax_savings=tax_savings,
        effective_rate=with_relief.effective_rate,
        pcb=pcb,
        result=result,
        projection=TaxProjection(
            months_elapsed=elapsed,
            months_remaining=12 - elapsed,
            projected_income=projected_income,
            projected_chargeable_income=projected_chargeable,
            projected_tax=projected_tax,
        ),
        categories=categories,
        breakdown=with_relief.breakdown,
        warnings=warnings,
    )
