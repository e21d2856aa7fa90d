"""LHDN Calc CLI - Command-line interface for Malaysian tax calculations."""

import click

from lhdncalc import __version__

from .tax_commands import tax as tax_group
from .relief_commands import reliefs as reliefs_group
from .deduction_commands import deductions as deductions_group
from .pcb_commands import pcb as pcb_group
from .commitment_commands import commitments as commitments_group
from .settings_commands import settings as settings_group
from .profile_commands import profile as profile_group


@click.group()
@click.version_option(version=__version__, prog_name="lhdn-calc")
def cli():
    """LHDN Calc - Malaysian income tax and relief tracking tools.

    Track relief claims, monthly PCB and commitments, then calculate
    your tax position for a year of assessment.

    Configuration is loaded from (in order):

    \b
    1. LHDN_CALC_CONFIG_PATH environment variable
    2. ~/.config/lhdn-calc/ (XDG default)

    Run 'lhdn-calc settings show' to see where data is stored.
    """
    pass


# Add subcommand groups
cli.add_command(tax_group)
cli.add_command(reliefs_group)
cli.add_command(deductions_group)
cli.add_command(pcb_group)
cli.add_command(commitments_group)
cli.add_command(settings_group)
cli.add_command(profile_group)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
