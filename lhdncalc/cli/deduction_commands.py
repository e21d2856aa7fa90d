"""Deduction (relief claim) commands."""

import click

from lhdncalc.sdk import InvalidInputError, TaxRulesError, format_rm, load_tax_rules, records

ATTRIBUTIONS = ("self", "spouse", "child", "parent")


@click.group()
def deductions():
    """Record relief claims (receipts) for a year of assessment."""
    pass


@deductions.command("add")
@click.argument("year", type=int)
@click.argument("category")
@click.argument("amount")
@click.option("--month", type=click.IntRange(1, 12), help="Month the expense was incurred")
@click.option("--for", "for_", multiple=True, type=click.Choice(ATTRIBUTIONS),
              help="Who the expense was for (repeatable, default: self)")
@click.option("--description", "-d", help="Free-text note, e.g. receipt number")
def deductions_add(year, category, amount, month, for_, description):
    """Add a relief claim.

    CATEGORY is an LHDN relief code (see 'lhdn-calc reliefs list YEAR --all').
    AMOUNT is in RM.

    Examples:
        lhdn-calc deductions add 2024 LIFESTYLE 1200 --month 3
        lhdn-calc deductions add 2024 MEDICAL_PARENTS 850.50 --for parent
    """
    try:
        rules = load_tax_rules(year)
    except TaxRulesError as e:
        raise click.ClickException(str(e))

    relief = rules.get_category(category)
    if relief is None:
        raise click.ClickException(
            f"Unknown relief category '{category}' for YA {rules.year}.\n"
            f"Run 'lhdn-calc reliefs list {year} --all' to see valid codes."
        )

    for_ = for_ or ("self",)
    try:
        record = records.add_deduction({
            "category": relief.code,
            "amount": amount,
            "year": year,
            "month": month,
            "description": description,
            "for_self": "self" in for_,
            "for_spouse": "spouse" in for_,
            "for_child": "child" in for_,
            "for_parent": "parent" in for_,
        })
    except InvalidInputError as e:
        raise click.ClickException(str(e))

    click.echo(f"Added {record.id}: {relief.code} {format_rm(record.amount)}")

    claimed = sum(d.amount for d in records.list_deductions(year, relief.code))
    if relief.is_capped and claimed > relief.annual_limit:
        click.echo(click.style(
            f"Warning: {relief.code} total {format_rm(claimed)} exceeds the annual limit of "
            f"{format_rm(relief.annual_limit)}; only the limit is claimable.",
            fg="yellow",
        ))


@deductions.command("list")
@click.argument("year", type=int)
@click.option("--category", "-c", help="Only show this category")
def deductions_list(year, category):
    """List relief claims recorded for YEAR."""
    try:
        items = records.list_deductions(year, category)
    except InvalidInputError as e:
        raise click.ClickException(str(e))

    if not items:
        click.echo(f"No deductions recorded for YA {year}.")
        return

    click.echo(f"{'ID':<10} {'Month':<6} {'Category':<24} {'Amount':>14}  Description")
    click.echo("-" * 72)
    for d in items:
        month = f"{d.month:02d}" if d.month else "-"
        click.echo(f"{d.id:<10} {month:<6} {d.category:<24} {format_rm(d.amount):>14}  {d.description or ''}")
    click.echo("-" * 72)
    click.echo(f"{len(items)} deduction(s), total {format_rm(sum(d.amount for d in items))}")


@deductions.command("remove")
@click.argument("year", type=int)
@click.argument("record_id")
def deductions_remove(year, record_id):
    """Remove a relief claim by ID."""
    if not records.remove_deduction(year, record_id):
        raise click.ClickException(f"Deduction {record_id} not found for YA {year}")
    click.echo(f"Removed deduction {record_id}")
