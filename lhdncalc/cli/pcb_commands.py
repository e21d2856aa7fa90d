"""Monthly PCB record commands."""

import click

from lhdncalc.sdk import InvalidInputError, format_rm, records, summarize_pcb


@click.group()
def pcb():
    """Record monthly PCB (tax withheld) from payslips."""
    pass


@pcb.command("set")
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.option("--pcb", "pcb_amount", required=True, help="PCB withheld this month (RM)")
@click.option("--gross", "gross_salary", help="Gross salary (RM)")
@click.option("--bonus", help="Bonus (RM)")
@click.option("--allowances", help="Allowances (RM)")
@click.option("--commission", help="Commission (RM)")
@click.option("--epf", "epf_employee", help="Employee EPF contribution (RM)")
@click.option("--socso", help="SOCSO contribution (RM)")
@click.option("--eis", help="EIS contribution (RM)")
@click.option("--zakat", help="Zakat deducted via payroll (RM)")
@click.option("--notes", help="Free-text note")
def pcb_set(year, month, pcb_amount, **fields):
    """Create or replace the PCB record for YEAR/MONTH.

    A month holds one record; setting it again overwrites it.

    Examples:
        lhdn-calc pcb set 2024 1 --pcb 450 --gross 7000 --epf 770
        lhdn-calc pcb set 2024 12 --pcb 1200 --gross 7000 --bonus 14000
    """
    data = {"year": year, "month": month, "pcb_amount": pcb_amount}
    data.update({k: v for k, v in fields.items() if v is not None})

    try:
        record, created = records.save_pcb_record(data)
    except InvalidInputError as e:
        raise click.ClickException(str(e))

    action = "Added" if created else "Updated"
    click.echo(f"{action} PCB {year}-{month:02d}: {format_rm(record.pcb_amount)} "
               f"on income {format_rm(record.total_income)}")


@pcb.command("list")
@click.argument("year", type=int)
def pcb_list(year):
    """List PCB records for YEAR with year totals."""
    try:
        items = records.list_pcb_records(year)
    except InvalidInputError as e:
        raise click.ClickException(str(e))

    if not items:
        click.echo(f"No PCB records for {year}.")
        return

    click.echo(f"{'Month':<6} {'Income':>14} {'EPF':>12} {'PCB':>12}  Notes")
    click.echo("-" * 64)
    for r in items:
        click.echo(f"{r.month:02d}     {format_rm(r.total_income):>14} {format_rm(r.epf_employee):>12} "
                   f"{format_rm(r.pcb_amount):>12}  {r.notes or ''}")
    click.echo("-" * 64)

    summary = summarize_pcb(items, year)
    click.echo(f"Total   {format_rm(summary.total_income):>14} {format_rm(summary.total_epf):>12} "
               f"{format_rm(summary.total_pcb):>12}")
    if summary.months_missing:
        missing = ", ".join(f"{m:02d}" for m in summary.months_missing)
        click.echo(click.style(f"Months without records: {missing}", fg="yellow"))


@pcb.command("remove")
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
def pcb_remove(year, month):
    """Remove the PCB record for YEAR/MONTH."""
    if not records.remove_pcb_record(year, month):
        raise click.ClickException(f"No PCB record for {year}-{month:02d}")
    click.echo(f"Removed PCB record {year}-{month:02d}")
