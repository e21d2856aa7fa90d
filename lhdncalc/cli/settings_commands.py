"""Settings CLI commands for LHDN Calc.

Manages settings.json: where records are stored and which tax rules
files are loaded.
"""

from pathlib import Path

import click

from lhdncalc.sdk import get_data_path, get_setting, get_settings_path, load_settings, save_settings, set_setting
from lhdncalc.sdk.taxes.rules import clear_rules_cache, get_available_years, get_rules_dir


def _clear_path_setting(key: str) -> bool:
    current = load_settings()
    if key not in current:
        return False
    del current[key]
    save_settings(current)
    return True


def _resolve_dir(path: str, create: bool) -> Path:
    """Expand PATH and make sure it is a usable directory."""
    dir_path = Path(path).expanduser().resolve()

    if dir_path.exists():
        if not dir_path.is_dir():
            raise click.ClickException(f"Path exists but is not a directory: {dir_path}")
        return dir_path

    if not create:
        raise click.ClickException(f"Directory does not exist: {dir_path}")
    try:
        dir_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise click.ClickException(f"Cannot create directory: {dir_path}\n{e}")
    click.echo(f"Created directory: {dir_path}")
    return dir_path


def _years_label(rules_dir: Path) -> str:
    return ", ".join(str(y) for y in sorted(get_available_years(rules_dir))) or "none"


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - data_dir: where deductions, PCB records and commitments are stored
    - rules_dir: directory of tax rules YAML files (default: bundled)
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and the paths in effect."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if current:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")
    else:
        click.echo("No settings configured (using defaults).")

    rules_dir = get_rules_dir()
    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  data_dir: {get_data_path()}{'' if 'data_dir' in current else ' (default)'}")
    click.echo(f"  rules_dir: {rules_dir}{'' if 'rules_dir' in current else ' (bundled)'}")
    click.echo(f"  tax rules available: {_years_label(rules_dir)}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom data_dir, revert to default")
def settings_data_dir(path, clear):
    """Set or clear the directory where records are stored.

    Examples:
        lhdn-calc settings data-dir ~/Documents/tax/lhdn-calc
        lhdn-calc settings data-dir --clear
    """
    if clear:
        if _clear_path_setting("data_dir"):
            click.echo(f"Cleared data_dir. Records now go to: {get_data_path()} (default)")
        else:
            click.echo("data_dir was not set.")
        return

    if not path:
        click.echo(f"data_dir: {get_setting('data_dir') or f'{get_data_path()} (default)'}")
        return

    data_path = _resolve_dir(path, create=True)
    probe_file = data_path / ".write_test"
    try:
        probe_file.touch()
        probe_file.unlink()
    except OSError as e:
        raise click.ClickException(f"Directory is not writable: {data_path}\n{e}")

    set_setting("data_dir", str(data_path))
    click.echo(f"Set data_dir: {data_path}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("rules-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom rules_dir, use the bundled rules")
def settings_rules_dir(path, clear):
    """Set or clear the directory of tax rules files (<year>.yaml).

    Use this to load rules for a year of assessment the bundled files
    do not cover yet.

    Examples:
        lhdn-calc settings rules-dir ~/Documents/tax/rules
        lhdn-calc settings rules-dir --clear
    """
    if clear:
        if _clear_path_setting("rules_dir"):
            clear_rules_cache()
            click.echo(f"Cleared rules_dir. Using bundled rules: {get_rules_dir()}")
        else:
            click.echo("rules_dir was not set.")
        return

    if not path:
        rules_dir = get_rules_dir()
        suffix = "" if get_setting("rules_dir") else " (bundled)"
        click.echo(f"rules_dir: {rules_dir}{suffix}")
        click.echo(f"tax rules available: {_years_label(rules_dir)}")
        return

    rules_dir = _resolve_dir(path, create=False)
    if not get_available_years(rules_dir):
        raise click.ClickException(f"No <year>.yaml tax rules files found in {rules_dir}")

    set_setting("rules_dir", str(rules_dir))
    clear_rules_cache()
    click.echo(f"Set rules_dir: {rules_dir}")
    click.echo(f"tax rules available: {_years_label(rules_dir)}")
