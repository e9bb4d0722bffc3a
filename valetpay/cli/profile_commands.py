"""Profile CLI commands for Valet Pay.

Manages the company profile (profile.yaml) - company name and the dynamic
location list the rate resolver reads.
"""

import click
from rich import box
from rich.console import Console
from rich.table import Table

from valetpay.sdk import (
    LEGACY_RATES,
    LocationRecord,
    ProfileValidationError,
    RateResolutionError,
    RateTableResolver,
    get_profile_path,
    load_company_profile,
    save_profile,
)


def _load_or_fail():
    try:
        return load_company_profile(require_exists=False)
    except ProfileValidationError as e:
        raise click.ClickException(str(e))


@click.group()
def profile():
    """Manage the company profile (profile.yaml).

    The profile holds the company name and the configured locations.
    Locations 1-4 and 7 use built-in rates; any other location must be
    listed here before its shifts can be calculated.
    """
    pass


@profile.command("show")
def profile_show():
    """Show the profile and every location's resolved rates."""
    profile_path = get_profile_path(require_exists=False)
    company = _load_or_fail()

    click.echo(f"Profile: {profile_path}")
    click.echo(f"File exists: {profile_path.exists()}")
    if company.company:
        click.echo(f"Company: {company.company}")
    click.echo()

    resolver = RateTableResolver(company.location_map())
    location_ids = sorted(set(LEGACY_RATES) | set(company.location_map()))

    table = Table(box=box.SIMPLE)
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Source")
    table.add_column("Commission", justify="right")
    table.add_column("Tip Baseline", justify="right")
    table.add_column("Turn-in", justify="right")
    for location_id in location_ids:
        try:
            rates = resolver.resolve(location_id)
        except RateResolutionError as e:
            table.add_row(str(location_id), resolver.location_name(location_id), "[red]error[/red]", str(e), "", "")
            continue
        table.add_row(
            str(location_id),
            resolver.location_name(location_id),
            rates.source,
            f"${rates.commission_rate:,.2f}",
            f"${rates.per_car_tip_baseline:,.2f}",
            f"${rates.turn_in_rate:,.2f}",
        )
    Console().print(table)


@profile.command("add-location")
@click.argument("location_id", type=int)
@click.argument("name")
@click.option("--curbside", type=float, help="Per-car tip baseline (default 15)")
@click.option("--turn-in", "turn_in", type=float, help="Per-car company turn-in (default 11)")
@click.option("--commission", type=float, help="Per-car employee commission (default 4)")
@click.option("--inactive", is_flag=True, help="Mark the location inactive")
@click.option("--force", is_flag=True, help="Replace an existing location with the same ID")
def profile_add_location(location_id, name, curbside, turn_in, commission, inactive, force):
    """Add a location to profile.yaml.

    Examples:
        valet-pay profile add-location 12 "Fogo de Chao" --commission 5
        valet-pay profile add-location 12 "Fogo de Chao" --turn-in 9 --force
    """
    company = _load_or_fail()
    existing = company.location_map()

    if location_id in existing and not force:
        raise click.ClickException(
            f"Location {location_id} already exists. Use --force to replace it."
        )
    if location_id in LEGACY_RATES:
        click.echo(
            f"Note: location {location_id} uses built-in rates; only the name is taken from the profile.",
            err=True,
        )

    try:
        record = LocationRecord(
            id=location_id,
            name=name,
            active=not inactive,
            curbside_rate=curbside,
            turn_in_rate=turn_in,
            employee_commission=commission,
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    existing[location_id] = record
    company.locations = [existing[k] for k in sorted(existing)]
    path = save_profile(company.model_dump(exclude_none=True))
    click.echo(f"Saved location {location_id} ({name}) to {path}")


@profile.command("remove-location")
@click.argument("location_id", type=int)
def profile_remove_location(location_id):
    """Remove a location from profile.yaml."""
    company = _load_or_fail()
    existing = company.location_map()
    if location_id not in existing:
        raise click.ClickException(f"Location {location_id} is not in the profile.")

    del existing[location_id]
    company.locations = [existing[k] for k in sorted(existing)]
    path = save_profile(company.model_dump(exclude_none=True))
    click.echo(f"Removed location {location_id} from {path}")
