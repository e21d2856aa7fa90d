"""Gross income resolution for a year of assessment."""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from .money import ZERO, parse_amount
from .pcb import summarize_pcb

logger = logging.getLogger(__name__)


def resolve_gross_income(
    year: int,
    explicit=None,
    pcb_records: Iterable = (),
    profile: Optional[dict] = None,
) -> tuple[Decimal, str]:
    """Pick the gross income figure to tax.

    Precedence:
    1. explicit amount (e.g. --income on the CLI)
    2. total income across the year's PCB records
    3. profile income.annual_income
    4. profile income.monthly_salary x 12

    Returns:
        Tuple of (gross_income, source) where source is one of
        "explicit", "pcb_records", "profile_annual", "profile_salary", "none"

    Raises:
        InvalidInputError: If an explicit or profile amount is invalid
    """
    if explicit is not None:
        return parse_amount(explicit, "gross_income"), "explicit"

    pcb_income = summarize_pcb(pcb_records, year).total_income
    if pcb_income > 0:
        return pcb_income, "pcb_records"

    income = (profile or {}).get("income") or {}
    if income.get("annual_income") is not None:
        return parse_amount(income["annual_income"], "income.annual_income"), "profile_annual"
    if income.get("monthly_salary") is not None:
        return parse_amount(income["monthly_salary"], "income.monthly_salary") * 12, "profile_salary"

    logger.warning(f"No income found for YA {year}; using 0")
    return ZERO, "none"
