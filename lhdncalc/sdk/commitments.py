"""Commitment payment-progress projection.

Estimates how much has been paid towards a recurring commitment (loan,
bill, insurance...) since it started. This is an optimistic heuristic, not
a ledger: every period before the current one is assumed paid, and the
current period counts only when it is marked paid. Totals use the current
amount, so a commitment whose amount changed mid-history is misstated for
the periods before the change.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from .money import ZERO, money_str, percent
from .schemas import Commitment, parse_record


@dataclass(frozen=True)
class CommitmentPaymentProjection:
    """Payments made and expected for one commitment as of a date."""
    commitment_id: Optional[str]
    name: str
    amount: Decimal
    frequency: str
    months_diff: int
    total_expected: int
    payments_made: int
    total_paid: Decimal

    @property
    def expected_amount(self) -> Decimal:
        return self.total_expected * self.amount

    def to_dict(self) -> dict:
        return {
            "id": self.commitment_id,
            "name": self.name,
            "amount": money_str(self.amount),
            "frequency": self.frequency,
            "payments_made": self.payments_made,
            "total_expected": self.total_expected,
            "total_paid": money_str(self.total_paid),
        }


@dataclass(frozen=True)
class CommitmentSummary:
    """Totals across a set of commitment projections."""
    count: int
    total_paid: Decimal
    total_expected_amount: Decimal
    completion_rate: Decimal
    monthly_total: Decimal

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "total_paid": money_str(self.total_paid),
            "total_expected_amount": money_str(self.total_expected_amount),
            "completion_rate": str(self.completion_rate),
            "monthly_total": money_str(self.monthly_total),
        }


def months_between(start: date, as_of: date) -> int:
    """Calendar months from start to as_of, counting the current month.

    Uses year*12 + month arithmetic (day of month is ignored). When as_of
    is on or after start the current month is included, so the result is
    at least 1. Dates before start give 0.
    """
    diff = (as_of.year - start.year) * 12 + (as_of.month - start.month)
    if as_of >= start:
        return max(1, diff + 1)
    return 0


def project(commitment, as_of: Optional[date] = None) -> CommitmentPaymentProjection:
    """Project payments made and total paid for a commitment.

    Args:
        commitment: Commitment instance or raw dict
        as_of: Projection date (default: today). A commitment with an
            end_date earlier than as_of is projected up to its end_date.

    Returns:
        CommitmentPaymentProjection

    Raises:
        InvalidInputError: If a raw commitment fails validation
    """
    commitment = parse_record(Commitment, commitment)
    as_of = as_of or date.today()
    if commitment.end_date and commitment.end_date < as_of:
        as_of = commitment.end_date

    months_diff = months_between(commitment.start_date, as_of)

    if commitment.frequency == "monthly":
        total_expected = months_diff
    elif commitment.frequency == "quarterly":
        total_expected = months_diff // 3
    elif commitment.frequency == "yearly":
        total_expected = months_diff // 12
    else:  # one_time
        total_expected = 1

    if commitment.is_current_paid:
        payments_made = total_expected
    else:
        payments_made = max(0, total_expected - 1)

    return CommitmentPaymentProjection(
        commitment_id=commitment.id,
        name=commitment.name,
        amount=commitment.amount,
        frequency=commitment.frequency,
        months_diff=months_diff,
        total_expected=total_expected,
        payments_made=payments_made,
        total_paid=payments_made * commitment.amount,
    )


def summarize(commitments: Iterable, as_of: Optional[date] = None) -> CommitmentSummary:
    """Aggregate projections across commitments.

    completion_rate is total paid over total expected amount, in percent.
    monthly_total sums the amounts of active monthly commitments.
    """
    parsed = [parse_record(Commitment, c) for c in commitments]
    projections = [project(c, as_of) for c in parsed]

    total_paid = sum((p.total_paid for p in projections), ZERO)
    total_expected = sum((p.expected_amount for p in projections), ZERO)
    monthly_total = sum((c.amount for c in parsed if c.is_active and c.frequency == "monthly"), ZERO)

    return CommitmentSummary(
        count=len(projections),
        total_paid=total_paid,
        total_expected_amount=total_expected,
        completion_rate=percent(total_paid, total_expected),
        monthly_total=monthly_total,
    )
