"""Tax payment commands.

Tax payments are append-only: each `add` creates a new record, and the
engine sums all records for an employee on a shift.
"""

import click
from rich import box
from rich.console import Console
from rich.table import Table

from valetpay.sdk import RecordNotFoundError, records
from valetpay.sdk.employee import normalize_name
from valetpay.sdk.records import RecordValidationError


@click.group("tax-payments")
def tax_payments():
    """Record and list employee tax payments."""
    pass


@tax_payments.command("add")
@click.argument("employee")
@click.argument("shift_id")
@click.argument("amount", type=float)
@click.option("--paid-on", help="Payment date (YYYY-MM-DD).")
@click.option("--notes", help="Free-form note.")
@click.option("--allow-unknown-shift", is_flag=True, help="Record even if the shift does not exist.")
def tax_payments_add(employee, shift_id, amount, paid_on, notes, allow_unknown_shift):
    """Record AMOUNT paid by EMPLOYEE toward tax on SHIFT_ID."""
    if amount <= 0:
        raise click.BadParameter("Amount must be positive.", param_hint="AMOUNT")

    if not allow_unknown_shift:
        try:
            records.get_shift(shift_id)
        except RecordNotFoundError as e:
            raise click.ClickException(f"{e}. Use --allow-unknown-shift to record anyway.")

    try:
        path = records.record_tax_payment(employee, shift_id, amount, paid_on=paid_on, notes=notes)
    except RecordValidationError as e:
        raise click.ClickException(str(e))
    click.echo(f"Recorded ${amount:,.2f} for {employee} on shift {shift_id} ({path.stem})")


@tax_payments.command("list")
@click.option("--employee", help="Only payments for this employee key or name.")
@click.option("--shift", "shift_id", help="Only payments for this shift ID.")
def tax_payments_list(employee, shift_id):
    """List recorded tax payments."""
    payments = records.load_tax_payments()
    if employee:
        payments = [p for p in payments if normalize_name(p.employee_key) == normalize_name(employee)]
    if shift_id:
        payments = [p for p in payments if p.shift_id == str(shift_id)]

    if not payments:
        click.echo("No tax payments found.")
        return

    table = Table(box=box.SIMPLE)
    table.add_column("Employee")
    table.add_column("Shift")
    table.add_column("Paid On")
    table.add_column("Amount", justify="right")
    table.add_column("Notes")
    for p in payments:
        table.add_row(p.employee_key, p.shift_id, p.paid_on or "", f"${p.amount:,.2f}", p.notes or "")
    table.add_section()
    table.add_row("[bold]Total[/bold]", "", "", f"${sum(p.amount for p in payments):,.2f}", "")
    Console().print(table)
