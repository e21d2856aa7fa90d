"""Rich renderer for tax calculations.

Transforms SDK to_dict() output into formatted Rich tables.
"""

from decimal import Decimal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table


STATUS_STYLES = {
    "refund": ("REFUND", "bold green"),
    "owed": ("TAX OWED", "bold red"),
    "balanced": ("BALANCED", "bold"),
}


def render_tax_calculation(console: Console, data: dict) -> None:
    """Render a full tax calculation.

    Args:
        console: Rich Console instance
        data: SDK output from TaxCalculation.to_dict()
    """
    for warning in data.get("warnings", []):
        console.print(Panel(
            f"[yellow]{warning}[/yellow]",
            title="Warning",
            border_style="yellow"
        ))

    _render_summary(console, data)

    claimed = [c for c in data.get("categories", []) if Decimal(c["user_total"]) > 0]
    if claimed:
        render_categories(console, claimed, title=f"Reliefs Claimed - YA {data['year']}")

    if data.get("breakdown"):
        render_breakdown(console, data["breakdown"], title="Tax on Chargeable Income")

    _render_projection(console, data.get("projection") or {})


def _render_summary(console: Console, data: dict) -> None:
    """Render the main summary table."""
    table = Table(title=f"Tax Summary - YA {data['year']}", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=28)
    table.add_column("Amount", justify="right", min_width=16)

    source = data.get("income_source")
    label = f"Gross Income [dim]({source})[/dim]" if source else "Gross Income"
    table.add_row(label, _fmt(data["gross_income"]))
    table.add_row("  Less: Reliefs & Deductions", _fmt(data["total_claimable"]))
    table.add_row("Chargeable Income", _fmt(data["chargeable_income"]))
    table.add_row("", "")
    table.add_row("Tax Without Relief", _fmt(data["gross_tax"]), style="dim")
    table.add_row("Tax on Chargeable Income", _fmt(data["tax_on_chargeable"]))
    if Decimal(data["rebates"]) > 0:
        table.add_row("  Less: Rebates", _fmt(data["rebates"]))
    table.add_row("Net Tax Payable", _fmt(data["net_tax_payable"]))
    table.add_row("Effective Rate", f"{data['effective_rate']}%")
    table.add_row("Tax Saved by Reliefs", f"[green]{_fmt(data['tax_savings'])}[/green]")
    table.add_row("", "")

    pcb = data.get("pcb") or {}
    table.add_row(f"PCB Paid [dim]({pcb.get('months_recorded', 0)}/12 months)[/dim]", _fmt(data["total_pcb_paid"]))

    result = data["result"]
    label, style = STATUS_STYLES[result["status"]]
    table.add_row(f"[{style}]{label}[/{style}]", f"[{style}]{_fmt(result['amount'])}[/{style}]")

    console.print(table)


def _render_projection(console: Console, projection: dict) -> None:
    """Render year-end projection when the year is still in progress."""
    if not projection or projection.get("months_remaining", 0) in (0, 12):
        return

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value", justify="right")
    table.add_row("Months Elapsed", str(projection["months_elapsed"]))
    table.add_row("Projected Income", _fmt(projection["projected_income"]))
    table.add_row("Projected Chargeable", _fmt(projection["projected_chargeable_income"]))
    table.add_row("Projected Tax", _fmt(projection["projected_tax"]))

    console.print(Panel(table, title="Year-End Projection", border_style="dim"))


def render_categories(console: Console, categories: list, title: str) -> None:
    """Render relief categories with limits and usage.

    Args:
        console: Rich Console instance
        categories: CategoryBreakdown.to_dict() entries, already ordered
        title: Table title
    """
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Code", style="bold")
    table.add_column("Category")
    table.add_column("Type", style="dim")
    table.add_column("Claimed", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Claimable", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Used", justify="right")

    for c in categories:
        over = Decimal(c["excess"]) > 0
        used = f"{c['percentage']}%" if c["limit"] is not None else "-"
        table.add_row(
            c["code"],
            c["name"],
            c["relief_type"],
            f"[red]{_fmt(c['user_total'])}[/red]" if over else _fmt(c["user_total"]),
            _fmt(c["limit"]) if c["limit"] is not None else "[dim]no limit[/dim]",
            _fmt(c["claimable"]),
            _fmt(c["remaining"]),
            used,
        )

    console.print(table)


def render_breakdown(console: Console, breakdown: list, title: str) -> None:
    """Render per-band tax slices from BracketSlice.to_dict() entries."""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Band")
    table.add_column("Rate", justify="right")
    table.add_column("Taxable", justify="right")
    table.add_column("Tax", justify="right")

    for band in breakdown:
        table.add_row(
            band["bracket"],
            _fmt_rate(band["rate"]),
            _fmt(band["taxable_amount"]),
            _fmt(band["tax"]),
        )

    console.print(table)


def render_schedule(console: Console, bands: list, title: str) -> None:
    """Render a bracket schedule given (lower, upper, rate) tuples."""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Chargeable Income")
    table.add_column("Rate", justify="right")

    for lower, upper, rate in bands:
        if upper is None:
            band = f"Above {_fmt(lower)}"
        else:
            band = f"{_fmt(lower)} - {_fmt(upper)}"
        table.add_row(band, _fmt_rate(rate))

    console.print(table)


def _fmt(amount) -> str:
    """Format ringgit amount."""
    if amount is None:
        return "-"
    return f"RM {Decimal(str(amount)):,.2f}"


def _fmt_rate(rate) -> str:
    """Format a 0..1 rate as a percentage."""
    pct = Decimal(str(rate)) * 100
    return f"{pct.normalize():f}%"
