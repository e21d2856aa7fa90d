"""Tax calculation commands."""

import json

import click
from rich.console import Console

from lhdncalc.sdk import (
    InvalidInputError,
    TaxRulesError,
    calculate_tax,
    load_profile,
    load_tax_rules,
    records,
    resolve_gross_income,
)
from lhdncalc.sdk.taxes.brackets import compute_tax, iter_bands

from .renderers.tax_renderer import render_breakdown, render_schedule, render_tax_calculation


@click.group()
def tax():
    """Calculate tax for a year of assessment."""
    pass


@tax.command("calc")
@click.argument("year", type=int)
@click.option("--income", help="Annual gross income in RM (default: PCB records, then profile)")
@click.option("--as-of", "as_of", type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Project year-end figures from income to this date (YYYY-MM-DD)")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format (default: table)")
def tax_calc(year, income, as_of, output_format):
    """Calculate tax payable and refund/owed for YEAR.

    Uses the deductions and PCB records stored for YEAR. Gross income is
    taken from --income, else the total of the year's PCB records, else
    income.annual_income or income.monthly_salary in the profile.

    Examples:
        lhdn-calc tax calc 2024
        lhdn-calc tax calc 2025 --income 96000 --as-of 2025-06-30
        lhdn-calc tax calc 2024 --format json
    """
    try:
        rules = load_tax_rules(year)
        deductions = records.list_deductions(year)
        pcb_records = records.list_pcb_records(year)
        profile = load_profile(require_exists=False)

        gross_income, source = resolve_gross_income(year, income, pcb_records, profile)
        calc = calculate_tax(
            year,
            gross_income,
            deductions,
            pcb_records,
            rules,
            as_of=as_of.date() if as_of else None,
        )
    except (TaxRulesError, InvalidInputError) as e:
        raise click.ClickException(str(e))

    output = calc.to_dict()
    output["income_source"] = source
    output["rules_year"] = rules.year

    if output_format == "json":
        click.echo(json.dumps(output, indent=2))
        return

    render_tax_calculation(Console(width=140), output)


@tax.command("brackets")
@click.argument("year", type=int)
@click.option("--income", help="Show the per-band tax on this chargeable income (RM)")
def tax_brackets(year, income):
    """Show the progressive tax schedule for YEAR.

    With --income, also shows how much tax falls in each band.

    Examples:
        lhdn-calc tax brackets 2024
        lhdn-calc tax brackets 2024 --income 85000
    """
    try:
        rules = load_tax_rules(year)
        computation = compute_tax(income, rules.tax_brackets) if income is not None else None
    except (TaxRulesError, InvalidInputError) as e:
        raise click.ClickException(str(e))

    console = Console(width=140)
    render_schedule(console, list(iter_bands(rules.tax_brackets)), title=f"Tax Schedule - YA {rules.year}")

    if computation is None:
        return

    render_breakdown(console, [s.to_dict() for s in computation.breakdown],
                     title=f"Tax on RM {computation.chargeable_income:,.2f}")
    click.echo(f"Total tax: RM {computation.gross_tax:,.2f} (effective rate {computation.effective_rate}%)")
