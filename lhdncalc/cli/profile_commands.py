"""Profile CLI commands for LHDN Calc.

Manages user profile data (profile.yaml) - income fallbacks, marital
status and dependents.
"""

import click
import yaml

from lhdncalc.sdk import (
    InvalidInputError,
    get_profile_path,
    get_profile_value,
    load_profile,
    parse_amount,
    set_profile_value,
)
from lhdncalc.sdk.config import get_profile_key_type, validate_profile_key


@click.group()
def profile():
    """Manage your profile (profile.yaml).

    The profile supplies defaults when no better data is recorded:
    - income.annual_income / income.monthly_salary: gross income used
      when a year has no PCB records
    - marital_status, assessment_type, dependents: informational
    """
    pass


@profile.command("show")
def profile_show():
    """Show the active profile and its location."""
    profile_path = get_profile_path(require_exists=False)
    click.echo(f"Profile: {profile_path}")

    if not profile_path.exists():
        click.echo()
        click.echo("Profile does not exist yet. Create with:")
        click.echo("  lhdn-calc profile set income.monthly_salary 7000")
        return

    data = load_profile(require_exists=False)
    click.echo("---")
    click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip())


@profile.command("get")
@click.argument("key")
def profile_get(key):
    """Get a profile value by dot-notation KEY, e.g. income.monthly_salary."""
    value = get_profile_value(key)
    if value is None:
        raise click.ClickException(f"Key '{key}' not found in profile")
    if isinstance(value, (dict, list)):
        raise click.ClickException(f"Key '{key}' is a complex value. Use 'lhdn-calc profile show' to view.")
    click.echo(value)


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key, value):
    """Set a profile value.

    KEY is a dot-notation path like 'income.monthly_salary'
    VALUE is the value to set

    Examples:
        lhdn-calc profile set income.monthly_salary 7000
        lhdn-calc profile set income.annual_income 96000
        lhdn-calc profile set marital_status married
        lhdn-calc profile set dependents.children 2
    """
    is_valid, error_msg = validate_profile_key(key)
    if not is_valid:
        raise click.ClickException(error_msg)

    key_type = get_profile_key_type(key)
    if key_type == "amount":
        try:
            amount = parse_amount(value, key)
        except InvalidInputError as e:
            raise click.ClickException(str(e))
        parsed_value = int(amount) if amount == amount.to_integral_value() else str(amount)
    elif key_type == "count":
        if not value.isdigit():
            raise click.ClickException(f"{key} must be a whole number, got '{value}'")
        parsed_value = int(value)
    else:
        if value not in key_type:
            raise click.ClickException(f"{key} must be one of: {', '.join(key_type)}")
        parsed_value = value

    profile_file = set_profile_value(key, parsed_value)
    click.echo(f"Set {key} = {parsed_value}")
    click.echo(f"Saved to: {profile_file}")
