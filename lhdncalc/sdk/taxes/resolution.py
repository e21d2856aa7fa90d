"""Refund / owed determination against PCB withheld."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from ..money import ZERO, round_sen, to_decimal

ResultStatus = Literal["refund", "owed", "balanced"]


@dataclass(frozen=True)
class Resolution:
    """Outcome of comparing tax payable with PCB already withheld."""
    status: ResultStatus
    amount: Decimal

    @property
    def refund(self) -> Decimal:
        return self.amount if self.status == "refund" else round_sen(ZERO)

    @property
    def owed(self) -> Decimal:
        return self.amount if self.status == "owed" else round_sen(ZERO)

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "amount": str(self.amount),
            "refund": str(self.refund),
            "owed": str(self.owed),
        }


def resolve(net_tax_payable, total_pcb_paid) -> Resolution:
    """Decide whether the taxpayer gets a refund or owes tax.

    Both amounts are rounded to sen before comparing, so differences
    smaller than half a sen resolve to "balanced".
    """
    payable = round_sen(to_decimal(net_tax_payable, "net_tax_payable"))
    paid = round_sen(to_decimal(total_pcb_paid, "total_pcb_paid"))

    if paid > payable:
        return Resolution(status="refund", amount=paid - payable)
    if paid < payable:
        return Resolution(status="owed", amount=payable - paid)
    return Resolution(status="balanced", amount=round_sen(ZERO))
