"""Records command group for shift, employee and tax payment records."""

import json
from pathlib import Path

import click
from rich.console import Console

from valetpay.sdk import RecordNotFoundError, records
from valetpay.sdk.records import RECORD_TYPES, RecordValidationError

from .renderers.summary_renderer import record_rows


@click.group("records")
def records_cli():
    """Manage stored shift, employee and tax payment records."""
    pass


@records_cli.command("list")
@click.argument("record_type", required=False, type=click.Choice(RECORD_TYPES))
@click.option("--count", is_flag=True, help="Print only the number of matching records.")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format (default: table)")
def records_list(record_type, count, output_format):
    """List records, optionally only of RECORD_TYPE."""
    found = records.list_records(type_filter=record_type)

    if count:
        click.echo(len(found))
        return

    if output_format == "json":
        click.echo(json.dumps(
            [{"id": r["id"], "meta": r.get("meta"), "data": r.get("data")} for r in found],
            indent=2,
        ))
        return

    if not found:
        click.echo("No records found.")
        return

    Console().print(record_rows(found))


@records_cli.command("add")
@click.argument("record_type", type=click.Choice(RECORD_TYPES))
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def records_add(record_type, file):
    """Add records of RECORD_TYPE from a JSON FILE.

    FILE may hold a single object or a list of objects. Every entry is
    validated; invalid entries are reported and skipped.

    Examples:
        valet-pay records add shift shifts-2025-06.json
        valet-pay records add employee roster.json
    """
    try:
        with open(file) as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{file.name} is not valid JSON: {e}")

    entries = payload if isinstance(payload, list) else [payload]
    added = 0
    failed = 0
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            click.echo(f"  [{index}] skipped: not an object", err=True)
            failed += 1
            continue
        try:
            path = records.add_record(record_type, entry, meta={"source_filename": file.name})
        except RecordValidationError as e:
            click.echo(f"  [{index}] skipped: {e}", err=True)
            failed += 1
            continue
        click.echo(f"  Added {record_type} {path.stem}")
        added += 1

    click.echo(f"Added {added} record(s), skipped {failed}.")
    if failed and not added:
        raise click.ClickException("No records added.")


@records_cli.command("show")
@click.argument("record_id")
def records_show(record_id):
    """Show a record as JSON."""
    try:
        record = records.get_record(record_id)
    except RecordNotFoundError as e:
        raise click.ClickException(str(e))
    click.echo(json.dumps({"id": record["id"], "meta": record.get("meta"), "data": record.get("data")}, indent=2))


@records_cli.command("remove")
@click.argument("record_id")
@click.option("--force", is_flag=True, help="Do not ask for confirmation.")
def records_remove(record_id, force):
    """Delete a record by ID."""
    if not force:
        click.confirm(f"Delete record {record_id}?", abort=True)
    if not records.remove_record(record_id):
        raise click.ClickException(f"Record not found: {record_id}")
    click.echo(f"Deleted {record_id}")
