"""Valet Pay CLI - Payroll reconciliation for valet shift reports."""

import json
from pathlib import Path

import click
from rich.console import Console

from valetpay import __version__
from valetpay.sdk import (
    RecordNotFoundError,
    RateResolutionError,
    ValetPayError,
    aggregate_summaries,
    build_shift_breakdown,
    generate_audit_report,
    OUTPUT_FORMATS,
    get_default_format,
    records,
    summarize_by_location,
    summary_csv_text,
    validate_calculations,
)
from valetpay.sdk.aggregate import select_employees

from .profile_commands import profile as profile_group
from .records_commands import records_cli as records_group
from .settings_commands import settings as settings_group
from .tax_payment_commands import tax_payments as tax_payments_group
from .renderers.summary_renderer import (
    render_rate_table,
    render_shift_breakdown,
    render_summaries,
    summaries_to_json,
)


@click.group()
@click.version_option(version=__version__, prog_name="valet-pay")
def cli():
    """Valet Pay - Payroll reconciliation for valet shift reports.

    Computes commission, tips, money owed, estimated tax and advance for
    every employee from recorded shifts.

    Configuration is loaded from (in order):

    \b
    1. VALET_PAY_CONFIG_PATH environment variable
    2. ~/.config/valet-pay/ (XDG default)

    Run 'valet-pay profile show' to see configured locations and rates.
    """
    pass


cli.add_command(profile_group)
cli.add_command(settings_group)
cli.add_command(records_group, name="records")
cli.add_command(tax_payments_group)


def _load_inputs():
    try:
        return records.load_inputs()
    except ValetPayError as e:
        raise click.ClickException(str(e))


def _write_output(text: str, output: Path | None) -> None:
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
        click.echo(f"Wrote {output}", err=True)
    else:
        click.echo(text, nl=not text.endswith("\n"))


@cli.command("summary")
@click.argument("window", required=False, default="all")
@click.option("--active-only", is_flag=True, help="Only active employees (management view).")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default=None,
              help="Output format (default: settings default_format, else table)")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Write csv/json output to a file instead of stdout")
def summary(window, active_only, output_format, output):
    """Show per-employee payroll totals for WINDOW.

    WINDOW is 'all' (default) or a month as YYYY-MM. Shift dates are
    compared as local calendar dates.

    Examples:
        valet-pay summary
        valet-pay summary 2025-06 --active-only
        valet-pay summary 2025-06 --format csv -o june.csv
    """
    output_format = output_format or get_default_format()

    inputs = _load_inputs()
    try:
        result = aggregate_summaries(
            inputs.shifts,
            inputs.employees,
            inputs.payments,
            resolver=inputs.resolver,
            window=window,
            active_only=active_only,
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="WINDOW")

    if output_format == "json":
        _write_output(json.dumps(summaries_to_json(result), indent=2), output)
    elif output_format == "csv":
        rows = summarize_by_location(
            select_employees(inputs.employees, active_only), result.breakdowns
        )
        _write_output(summary_csv_text(rows), output)
        for error in result.errors:
            click.echo(f"Error: {error}", err=True)
    else:
        if output:
            raise click.UsageError("--output requires --format csv or json")
        render_summaries(Console(), result)


@cli.command("shift")
@click.argument("shift_id")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format (default: table)")
def shift(shift_id, output_format):
    """Show the breakdown of one shift: totals and per-employee allocation."""
    inputs = _load_inputs()
    try:
        shift_record = records.get_shift(shift_id)
        rates = inputs.resolver.resolve(shift_record.location_id)
    except (RecordNotFoundError, RateResolutionError) as e:
        raise click.ClickException(str(e))

    breakdown = build_shift_breakdown(
        shift_record, rates, payments=inputs.payments, employees=inputs.employees
    )

    if output_format == "json":
        click.echo(json.dumps(breakdown.to_dict(), indent=2))
        return
    render_shift_breakdown(Console(), breakdown)


@cli.command("rates")
@click.argument("location_id", type=int)
def rates(location_id):
    """Show the resolved rate table for LOCATION_ID."""
    try:
        resolver = records.load_resolver()
        table = resolver.resolve(location_id)
    except ValetPayError as e:
        raise click.ClickException(str(e))
    render_rate_table(Console(), table)


@cli.command("audit")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the report to a file")
@click.option("--strict", is_flag=True, help="Exit non-zero when critical errors are found.")
def audit(output, strict):
    """Re-check every shift's calculations and print an audit report."""
    inputs = _load_inputs()
    result = validate_calculations(inputs.shifts, inputs.resolver)
    _write_output(generate_audit_report(result), output)

    if strict and (result.critical_errors or result.invalid_calculations):
        raise click.ClickException(
            f"{len(result.critical_errors)} critical error(s), "
            f"{result.invalid_calculations} invalid calculation(s)"
        )


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
