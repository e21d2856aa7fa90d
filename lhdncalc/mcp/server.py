"""LHDN Calc MCP Server - FastMCP implementation for tax calculation tools."""

import json
import logging
from datetime import date
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from lhdncalc.sdk import (
    InvalidInputError,
    TaxRulesError,
    calculate_tax as sdk_calculate_tax,
    load_profile,
    load_tax_rules,
    resolve_gross_income,
)
from lhdncalc.sdk import records as sdk_records
from lhdncalc.sdk.commitments import project
from lhdncalc.sdk.taxes.reliefs import aggregate, sort_for_display

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("lhdn-calc")


def _parse_date(value: str | None, field: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInputError(f"{field} must be YYYY-MM-DD, got {value!r}")


# --- Tools ---

@mcp.tool()
async def calculate_tax(
    year: int = Field(description="Year of assessment (e.g., 2024)"),
    gross_income: str | None = Field(default=None, description="Annual gross income in RM. Default: stored PCB records, then profile income."),
    deductions: list[dict] | None = Field(default=None, description="Relief claims [{category, amount, year}]. Default: stored deductions for the year."),
    pcb_records: list[dict] | None = Field(default=None, description="Monthly PCB records [{year, month, pcb_amount, gross_salary}]. Default: stored PCB records."),
    as_of: str | None = Field(default=None, description="Date (YYYY-MM-DD) for a year-end projection from income to date"),
) -> dict[str, Any]:
    """Calculate Malaysian income tax for a year: reliefs, chargeable income, tax payable, and refund or amount owed against PCB paid."""
    try:
        rules = load_tax_rules(year)
        if deductions is None:
            deductions = sdk_records.list_deductions(year)
        if pcb_records is None:
            pcb_records = sdk_records.list_pcb_records(year)

        income, source = resolve_gross_income(year, gross_income, pcb_records, load_profile(require_exists=False))
        calc = sdk_calculate_tax(year, income, deductions, pcb_records, rules, as_of=_parse_date(as_of, "as_of"))

        result = calc.to_dict()
        result["income_source"] = source
        result["rules_year"] = rules.year
        return result

    except (TaxRulesError, InvalidInputError) as e:
        return {"error": str(e), "calculation": None}
    except Exception as e:
        logger.error(f"Error calculating tax for {year}: {e}")
        return {"error": str(e), "calculation": None}


@mcp.tool()
async def list_relief_categories(
    year: int = Field(description="Year of assessment (e.g., 2024)"),
    claimed_only: bool = Field(default=False, description="Only return categories with stored claims"),
) -> dict[str, Any]:
    """List LHDN relief categories for a year with annual limits and amounts claimed so far."""
    try:
        rules = load_tax_rules(year)
        breakdowns = sort_for_display(
            aggregate(sdk_records.list_deductions(year), rules.relief_categories, year=year)
        )
        if claimed_only:
            breakdowns = [b for b in breakdowns if b.user_total > 0]

        return {
            "year": year,
            "rules_year": rules.year,
            "count": len(breakdowns),
            "categories": [b.to_dict() for b in breakdowns],
        }

    except (TaxRulesError, InvalidInputError) as e:
        return {"error": str(e), "categories": []}
    except Exception as e:
        logger.error(f"Error listing relief categories for {year}: {e}")
        return {"error": str(e), "categories": []}


@mcp.tool()
async def project_commitment(
    commitment_id: str | None = Field(default=None, description="ID of a stored commitment. If omitted, amount/frequency/start_date are used."),
    amount: str | None = Field(default=None, description="Payment amount per period in RM"),
    frequency: str | None = Field(default=None, description="'monthly', 'quarterly', 'yearly' or 'one_time'"),
    start_date: str | None = Field(default=None, description="First payment date (YYYY-MM-DD)"),
    end_date: str | None = Field(default=None, description="Last payment date (YYYY-MM-DD)"),
    is_paid: bool = Field(default=False, description="Whether the current period has been paid"),
    as_of: str | None = Field(default=None, description="Projection date (YYYY-MM-DD, default today)"),
) -> dict[str, Any]:
    """Estimate payments made and total paid so far for a commitment (loan, bill, insurance)."""
    try:
        if commitment_id:
            commitment = sdk_records.get_commitment(commitment_id)
            if commitment is None:
                return {"error": f"Commitment not found: {commitment_id}", "projection": None}
        else:
            commitment = {
                "amount": amount,
                "frequency": frequency,
                "start_date": start_date,
                "end_date": end_date,
                "current_payment": {"is_paid": is_paid},
            }

        return project(commitment, _parse_date(as_of, "as_of")).to_dict()

    except InvalidInputError as e:
        return {"error": str(e), "projection": None}
    except Exception as e:
        logger.error(f"Error projecting commitment: {e}")
        return {"error": str(e), "projection": None}


# --- Resources (optional, for browsing) ---

@mcp.resource("lhdncalc://records/years")
async def list_years_resource() -> str:
    """List years with stored deduction and PCB record counts."""
    try:
        records_dir = sdk_records.get_records_dir()
        years = {}

        for year_dir in sorted(records_dir.iterdir()):
            if year_dir.is_dir() and year_dir.name.isdigit():
                years[year_dir.name] = {
                    "deductions": sum(1 for _ in (year_dir / "deductions").glob("*.json")),
                    "pcb": sum(1 for _ in (year_dir / "pcb").glob("*.json")),
                }

        return json.dumps({"years": years}, indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
