"""`valet-pay settings` - where records live and how summaries print."""

from pathlib import Path

import click

from valetpay.sdk import (
    OUTPUT_FORMATS,
    SettingsError,
    get_data_path,
    get_default_format,
    get_setting,
    get_settings_path,
    load_settings,
    prepare_data_dir,
    set_setting,
)


@click.group()
def settings():
    """Manage settings.json (data_dir, default_format)."""
    pass


@settings.command("show")
def settings_show():
    """Print stored settings and the values in effect."""
    stored = load_settings()
    click.echo(f"{get_settings_path()}{'' if stored else ' (nothing stored)'}")
    for key in sorted(stored):
        click.echo(f"  {key} = {stored[key]}")
    click.echo("In effect:")
    click.echo(f"  data_dir = {get_data_path()}")
    click.echo(f"  default_format = {get_default_format()}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path(file_okay=False))
@click.option("--clear", is_flag=True, help="Go back to the XDG data directory")
def settings_data_dir(path, clear):
    """Show or change the directory holding shift, employee and tax payment records.

    Examples:
        valet-pay settings data-dir ~/valet/data
        valet-pay settings data-dir --clear
    """
    if clear:
        set_setting("data_dir", None)
        click.echo(f"data_dir cleared, records now in {get_data_path()}")
        return

    if path is None:
        origin = "settings.json" if get_setting("data_dir") else "default"
        click.echo(f"{get_data_path()} ({origin})")
        return

    try:
        data_path = prepare_data_dir(Path(path).expanduser().resolve())
    except SettingsError as e:
        raise click.ClickException(str(e))
    set_setting("data_dir", str(data_path))
    click.echo(f"data_dir = {data_path}")


@settings.command("default-format")
@click.argument("output_format", type=click.Choice(OUTPUT_FORMATS))
def settings_default_format(output_format):
    """Set the format 'summary' prints when --format is omitted."""
    set_setting("default_format", output_format)
    click.echo(f"default_format = {output_format}")
