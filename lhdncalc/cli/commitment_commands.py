"""Commitment (loan, bill, insurance) commands."""

import json

import click

from lhdncalc.sdk import FREQUENCIES, InvalidInputError, format_rm, records
from lhdncalc.sdk.commitments import project, summarize


@click.group()
def commitments():
    """Track recurring commitments and estimate how much has been paid."""
    pass


@commitments.command("add")
@click.argument("name")
@click.argument("amount")
@click.argument("frequency", type=click.Choice(FREQUENCIES))
@click.argument("start", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.option("--end", type=click.DateTime(formats=["%Y-%m-%d"]), help="Last payment date (YYYY-MM-DD)")
@click.option("--type", "commitment_type", default="other", help="e.g. loan, insurance, utility")
@click.option("--paid", is_flag=True, help="Current period is already paid")
def commitments_add(name, amount, frequency, start, end, commitment_type, paid):
    """Add a commitment.

    Examples:
        lhdn-calc commitments add "Car loan" 850 monthly 2023-03-01 --type loan
        lhdn-calc commitments add "Insurance" 2400 yearly 2022-01-15 --paid
    """
    try:
        commitment = records.add_commitment({
            "name": name,
            "amount": amount,
            "frequency": frequency,
            "start_date": start.date(),
            "end_date": end.date() if end else None,
            "commitment_type": commitment_type,
            "current_payment": {"is_paid": paid},
        })
    except InvalidInputError as e:
        raise click.ClickException(str(e))

    click.echo(f"Added {commitment.id}: {commitment.name} {format_rm(commitment.amount)} {commitment.frequency}")


@commitments.command("list")
@click.option("--as-of", "as_of", type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Project payments as of this date (default: today)")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format (default: table)")
def commitments_list(as_of, output_format):
    """List commitments with estimated payments made to date.

    The estimate assumes every period before the current one was paid.
    """
    as_of = as_of.date() if as_of else None
    try:
        items = records.list_commitments()
        projections = [project(c, as_of) for c in items]
        summary = summarize(items, as_of)
    except InvalidInputError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps({
            "commitments": [p.to_dict() for p in projections],
            "summary": summary.to_dict(),
        }, indent=2))
        return

    if not items:
        click.echo("No commitments recorded.")
        return

    click.echo(f"{'ID':<10} {'Name':<22} {'Amount':>12} {'Frequency':<10} {'Paid':>9} {'Total Paid':>14}")
    click.echo("-" * 82)
    for c, p in zip(items, projections):
        status = "" if c.is_active else " (inactive)"
        click.echo(f"{c.id:<10} {c.name[:22]:<22} {format_rm(c.amount):>12} {c.frequency:<10} "
                   f"{p.payments_made:>4}/{p.total_expected:<4} {format_rm(p.total_paid):>14}{status}")
    click.echo("-" * 82)
    click.echo(f"Total paid: {format_rm(summary.total_paid)} of {format_rm(summary.total_expected_amount)} "
               f"({summary.completion_rate}%)")
    click.echo(f"Monthly commitments: {format_rm(summary.monthly_total)}")


@commitments.command("mark-paid")
@click.argument("record_id")
@click.option("--unpaid", is_flag=True, help="Mark the current period as not yet paid")
def commitments_mark_paid(record_id, unpaid):
    """Mark the current period of a commitment as paid."""
    try:
        commitment = records.set_commitment_paid(record_id, is_paid=not unpaid)
    except InvalidInputError as e:
        raise click.ClickException(str(e))

    if commitment is None:
        raise click.ClickException(f"Commitment {record_id} not found")
    state = "paid" if commitment.is_current_paid else "unpaid"
    click.echo(f"Marked {commitment.name} current period as {state}")


@commitments.command("remove")
@click.argument("record_id")
def commitments_remove(record_id):
    """Remove a commitment by ID."""
    if not records.remove_commitment(record_id):
        raise click.ClickException(f"Commitment {record_id} not found")
    click.echo(f"Removed commitment {record_id}")
