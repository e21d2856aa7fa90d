"""Relief category commands."""

import click
from rich.console import Console

from lhdncalc.sdk import InvalidInputError, TaxRulesError, load_tax_rules, records
from lhdncalc.sdk.taxes.reliefs import aggregate, over_limit_warnings, sort_for_display

from .renderers.tax_renderer import render_categories


@click.group()
def reliefs():
    """Show LHDN relief categories and how much of each is claimed."""
    pass


@reliefs.command("list")
@click.argument("year", type=int)
@click.option("--all", "show_all", is_flag=True, help="Include categories with nothing claimed")
def reliefs_list(year, show_all):
    """List relief categories for YEAR with amounts claimed so far.

    By default only categories with claims are shown, largest first.

    Examples:
        lhdn-calc reliefs list 2024
        lhdn-calc reliefs list 2024 --all
    """
    try:
        rules = load_tax_rules(year)
        breakdowns = aggregate(records.list_deductions(year), rules.relief_categories, year=year)
    except (TaxRulesError, InvalidInputError) as e:
        raise click.ClickException(str(e))

    ordered = sort_for_display(breakdowns)
    if not show_all:
        ordered = [b for b in ordered if b.user_total > 0]

    if not ordered:
        click.echo(f"No reliefs claimed for YA {year}.")
        click.echo("Add one with: lhdn-calc deductions add YEAR CATEGORY AMOUNT")
        click.echo("See all categories with: lhdn-calc reliefs list YEAR --all")
        return

    render_categories(Console(width=140), [b.to_dict() for b in ordered], title=f"Relief Categories - YA {rules.year}")

    for warning in over_limit_warnings(ordered):
        click.echo(click.style(f"Warning: {warning}", fg="yellow"))
