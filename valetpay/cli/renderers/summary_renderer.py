"""Rich renderers for payroll summaries and shift breakdowns.

Transforms SDK output into formatted Rich tables.
"""

from typing import List, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from valetpay.sdk import (
    AggregationResult,
    DataQualityReport,
    EmployeeFinancialSummary,
    LocationRateTable,
    ShiftBreakdown,
)


def _money(value: float) -> str:
    return f"${value:,.2f}"


def render_summaries(console: Console, result: AggregationResult, title: str = "") -> None:
    """Render the employee payroll summary table.

    Args:
        console: Rich Console instance
        result: Output of aggregate_summaries()
        title: Optional table title
    """
    for error in result.errors:
        console.print(Panel(f"[red]{error}[/red]", title="Configuration error", border_style="red"))

    table = Table(title=title or f"Payroll summary ({result.window.label})", box=box.SIMPLE_HEAVY)
    table.add_column("Employee")
    table.add_column("Shifts", justify="right")
    table.add_column("Hours", justify="right")
    table.add_column("Commission", justify="right")
    table.add_column("Tips", justify="right")
    table.add_column("Money Owed", justify="right", style="blue")
    table.add_column("Total Earnings", justify="right", style="bold")
    table.add_column("Est. Tax (22%)", justify="right", style="red")
    table.add_column("Cash Paid", justify="right")
    table.add_column("Tax Balance", justify="right")
    table.add_column("Advance", justify="right", style="green")

    for s in result.summaries:
        name = s.full_name if s.active else f"[dim]{s.full_name}[/dim]"
        table.add_row(
            name,
            str(s.shifts),
            f"{s.hours:.1f}",
            _money(s.commission),
            _money(s.tips),
            _money(s.money_owed),
            _money(s.earnings),
            _money(s.tax),
            _money(s.cash_paid),
            _money(s.outstanding_tax_balance),
            _money(s.advance),
        )

    if result.summaries:
        _add_totals_row(table, result.summaries)

    console.print(table)
    render_quality(console, result.quality)


def _add_totals_row(table: Table, summaries: Sequence[EmployeeFinancialSummary]) -> None:
    def total(attr: str) -> float:
        return sum(getattr(s, attr) for s in summaries)

    table.add_section()
    table.add_row(
        "[bold]Total[/bold]",
        "",
        f"{total('hours'):.1f}",
        _money(total("commission")),
        _money(total("tips")),
        _money(total("money_owed")),
        _money(total("earnings")),
        _money(total("tax")),
        _money(total("cash_paid")),
        _money(total("outstanding_tax_balance")),
        _money(total("advance")),
    )


def render_quality(console: Console, quality: DataQualityReport) -> None:
    """Render recovered data-quality conditions, if any."""
    if not quality.has_issues:
        return
    counts = ", ".join(f"{kind}: {n}" for kind, n in sorted(quality.counts.items()))
    console.print(Panel(
        f"[yellow]{len(quality.issues)} data-quality issue(s) recovered ({counts}).[/yellow]\n"
        f"[dim]Run 'valet-pay audit' for details.[/dim]",
        title="Note",
        border_style="yellow",
    ))


def render_rate_table(console: Console, rates: LocationRateTable) -> None:
    """Render a resolved rate table."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")
    table.add_row("Location", f"{rates.location_id} {rates.name}".strip())
    table.add_row("Source", rates.source)
    table.add_row("Commission / car", _money(rates.commission_rate))
    table.add_row("Tip baseline / car", _money(rates.per_car_tip_baseline))
    table.add_row("Turn-in / car", _money(rates.turn_in_rate))
    table.add_row("Receipt price", _money(rates.receipt_unit_price))
    table.add_row("Receipt tip", _money(rates.receipt_tip_amount))
    console.print(Panel(table, title="Rate table", border_style="dim"))


def render_shift_breakdown(console: Console, breakdown: ShiftBreakdown) -> None:
    """Render totals and per-employee lines for one shift."""
    shift = breakdown.shift
    totals = breakdown.totals

    header = Table(show_header=False, box=None, padding=(0, 2))
    header.add_column("key", style="dim")
    header.add_column("value")
    header.add_row("Shift", f"{shift.id} - {shift.date} {shift.shift}".strip())
    header.add_row("Location", breakdown.location_name)
    header.add_row(
        "Cars",
        f"{shift.total_cars} (credit {shift.credit_transactions}, "
        f"receipt {shift.receipt_count}, cash {totals.cash_car_count})",
    )
    header.add_row("Expected turn-in", _money(totals.expected_turn_in))
    header.add_row("Total job hours", f"{breakdown.total_job_hours:.2f}")
    header.add_row("Commission", _money(totals.total_commission))
    header.add_row(
        "Tips",
        f"{_money(totals.total_tips)} (credit {_money(totals.credit_tips)}, "
        f"cash {_money(totals.cash_tips)}, receipt {_money(totals.receipt_tips)})",
    )
    header.add_row("Money owed", _money(totals.money_owed))
    if totals.cash_cars_clamped:
        header.add_row("Warning", "[yellow]car counts inconsistent; cash cars clamped to 0[/yellow]")
    console.print(Panel(header, title="Shift", border_style="dim"))

    table = Table(box=box.SIMPLE)
    table.add_column("Employee")
    table.add_column("Hours", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Commission", justify="right")
    table.add_column("Tips", justify="right")
    table.add_column("Earnings", justify="right", style="bold")
    table.add_column("Money Owed", justify="right", style="blue")
    table.add_column("Tax", justify="right", style="red")
    table.add_column("Cash Paid", justify="right")
    table.add_column("Tax Balance", justify="right")
    table.add_column("Advance", justify="right", style="green")

    for line in breakdown.lines:
        a = line.allocation
        t = line.tax
        table.add_row(
            a.name,
            f"{a.hours:.2f}",
            f"{a.hours_percent * 100:.1f}%",
            _money(a.commission),
            _money(a.tips),
            _money(a.earnings),
            _money(a.money_owed),
            _money(t.tax),
            _money(t.cash_paid),
            _money(t.outstanding_tax_balance),
            _money(t.advance),
        )
    console.print(table)


def summaries_to_json(result: AggregationResult) -> dict:
    """JSON-ready dict for --format json."""
    _, warnings = result.quality.to_errors_warnings()
    return {
        "window": result.window.label,
        "summaries": [s.model_dump() for s in result.summaries],
        "shifts": len(result.breakdowns),
        "errors": result.errors,
        "warnings": warnings,
        "quality_counts": result.quality.counts,
    }


def record_rows(records: List[dict]) -> Table:
    """Table of stored records for `records list`."""
    table = Table(box=box.SIMPLE)
    table.add_column("ID")
    table.add_column("Type")
    table.add_column("Summary")
    for rec in records:
        meta = rec.get("meta", {})
        data = rec.get("data") or {}
        record_type = meta.get("type", "?")
        if record_type == "shift":
            summary = (
                f"{data.get('date', '?')} loc {data.get('location_id', data.get('locationId', '?'))} "
                f"{data.get('shift', '')} cars={data.get('total_cars', data.get('totalCars', 0))}"
            )
        elif record_type == "employee":
            summary = f"{data.get('key', '?')} {data.get('full_name', data.get('fullName', ''))}"
        elif record_type == "tax_payment":
            summary = (
                f"{data.get('employee_key', '?')} shift {data.get('shift_id', '?')} "
                f"{_money(float(data.get('amount') or 0))}"
            )
        else:
            summary = ""
        table.add_row(rec.get("id", ""), record_type, summary.strip())
    return table
