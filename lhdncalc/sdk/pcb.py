"""Monthly PCB (Potongan Cukai Bulanan) record handling.

A year has at most one PCB record per month. When several records for the
same month are supplied, the last one wins, matching the upsert behaviour
of the record store.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from .money import ZERO, money_str
from .schemas import PcbRecord, parse_records


@dataclass(frozen=True)
class PcbSummary:
    """Year totals across monthly PCB records."""
    year: int
    total_pcb: Decimal = ZERO
    total_income: Decimal = ZERO
    total_epf: Decimal = ZERO
    total_socso: Decimal = ZERO
    total_eis: Decimal = ZERO
    total_zakat: Decimal = ZERO
    months_recorded: list[int] = field(default_factory=list)

    @property
    def months_missing(self) -> list[int]:
        return [m for m in range(1, 13) if m not in self.months_recorded]

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "total_paid": money_str(self.total_pcb),
            "total_income": money_str(self.total_income),
            "total_epf": money_str(self.total_epf),
            "total_socso": money_str(self.total_socso),
            "total_eis": money_str(self.total_eis),
            "total_zakat": money_str(self.total_zakat),
            "months_recorded": len(self.months_recorded),
            "months_missing": self.months_missing,
        }


def latest_by_month(records: Iterable, year: Optional[int] = None) -> list[PcbRecord]:
    """Collapse records to one per (year, month), later records overwriting earlier.

    Args:
        records: PcbRecord instances or raw dicts
        year: If given, records for other years are dropped

    Returns:
        Records ordered by year then month
    """
    by_month: dict[tuple[int, int], PcbRecord] = {}
    for record in parse_records(PcbRecord, records):
        if year is not None and record.year != year:
            continue
        by_month[(record.year, record.month)] = record
    return [by_month[key] for key in sorted(by_month)]


def summarize_pcb(records: Iterable, year: int) -> PcbSummary:
    """Total PCB, income and statutory contributions for a year."""
    monthly = latest_by_month(records, year)
    return PcbSummary(
        year=year,
        total_pcb=sum((r.pcb_amount for r in monthly), ZERO),
        total_income=sum((r.total_income for r in monthly), ZERO),
        total_epf=sum((r.epf_employee for r in monthly), ZERO),
        total_socso=sum((r.socso for r in monthly), ZERO),
        total_eis=sum((r.eis for r in monthly), ZERO),
        total_zakat=sum((r.zakat for r in monthly), ZERO),
        months_recorded=[r.month for r in monthly],
    )
