"""Relief category aggregation.

Sums a year's deduction records per LHDN category and applies each
category's annual limit. Over-claiming is never an error: the claimable
amount is capped and the excess is reported so it can be shown as a
warning.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..money import ZERO, format_rm, money_str, percent
from ..schemas import DeductionRecord, parse_records
from .schemas import RELIEF_TYPES, ReliefCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryBreakdown:
    """Per-category relief totals for one year."""
    code: str
    name: str
    name_ms: Optional[str]
    relief_type: str
    annual_limit: Optional[Decimal]
    user_total: Decimal
    claimable: Decimal
    remaining: Optional[Decimal]
    percentage: Decimal
    excess: Decimal
    item_count: int
    sort_order: int = 0

    @property
    def over_limit(self) -> bool:
        return self.excess > 0

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "name_ms": self.name_ms,
            "relief_type": self.relief_type,
            "limit": money_str(self.annual_limit),
            "user_total": money_str(self.user_total),
            "claimable": money_str(self.claimable),
            "remaining": money_str(self.remaining),
            "percentage": str(self.percentage),
            "excess": money_str(self.excess),
            "item_count": self.item_count,
        }


def _breakdown(category: ReliefCategory, user_total: Decimal, item_count: int) -> CategoryBreakdown:
    limit = category.annual_limit
    if limit is None:
        claimable = user_total
        remaining = None
        pct = percent(ZERO, ZERO)
        excess = ZERO
    else:
        claimable = min(user_total, limit)
        remaining = max(ZERO, limit - user_total)
        pct = percent(user_total, limit)
        excess = max(ZERO, user_total - limit)

    return CategoryBreakdown(
        code=category.code,
        name=category.name,
        name_ms=category.name_ms,
        relief_type=category.relief_type,
        annual_limit=limit,
        user_total=user_total,
        claimable=claimable,
        remaining=remaining,
        percentage=pct,
        excess=excess,
        item_count=item_count,
        sort_order=category.sort_order,
    )


def aggregate(
    deductions: Iterable,
    categories: Sequence[ReliefCategory],
    year: Optional[int] = None,
) -> list[CategoryBreakdown]:
    """Total deductions per category and apply annual limits.

    Every category appears in the result, in the order given, including
    those with no deductions (user_total = 0). Deductions for category
    codes not in `categories` are ignored; see unknown_categories().

    Args:
        deductions: DeductionRecord instances or raw dicts
        categories: Relief categories in force (TaxRules.relief_categories)
        year: If given, only deductions for this year are counted

    Returns:
        One CategoryBreakdown per category

    Raises:
        InvalidInputError: If a raw deduction fails validation
    """
    records = parse_records(DeductionRecord, deductions)

    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    for record in records:
        if year is not None and record.year != year:
            continue
        totals[record.category] += record.amount
        counts[record.category] += 1

    known = {c.code for c in categories}
    for code in sorted(set(totals) - known):
        logger.debug(f"ignoring {counts[code]} deduction(s) for unknown category {code}")

    return [_breakdown(c, totals.get(c.code, ZERO), counts.get(c.code, 0)) for c in categories]


def unknown_categories(deductions: Iterable, categories: Sequence[ReliefCategory]) -> list[str]:
    """Category codes used by deductions that are not in the category list."""
    known = {c.code for c in categories}
    records = parse_records(DeductionRecord, deductions)
    return sorted({r.category for r in records} - known)


def sort_for_display(breakdowns: Iterable[CategoryBreakdown]) -> list[CategoryBreakdown]:
    """Order categories for presentation.

    Categories with claims come first, largest user_total first; ties and
    the unclaimed remainder follow the rules file's sort_order, then code.
    """
    def sort_key(b: CategoryBreakdown):
        has_claims = b.user_total > 0
        return (0 if has_claims else 1, -b.user_total if has_claims else ZERO, b.sort_order, b.code)

    return sorted(breakdowns, key=sort_key)


def summarize_by_type(breakdowns: Iterable[CategoryBreakdown]) -> dict[str, Decimal]:
    """Total claimable amount per relief type (relief, deduction, rebate)."""
    totals = {t: ZERO for t in RELIEF_TYPES}
    for b in breakdowns:
        totals[b.relief_type] += b.claimable
    return totals


def over_limit_warnings(breakdowns: Iterable[CategoryBreakdown]) -> list[str]:
    """Human-readable warnings for categories claimed beyond their limit."""
    return [
        f"{b.code}: claimed {format_rm(b.user_total)} exceeds annual limit "
        f"{format_rm(b.annual_limit)} by {format_rm(b.excess)} (capped)"
        for b in breakdowns
        if b.over_limit
    ]
