"""cssinliner CLI entry point: Click group with subcommands."""

import click

from cssinliner import __version__


@click.group()
@click.version_option(version=__version__, prog_name="cssinliner")
def cli() -> None:
    """cssinliner - move <style> rules onto inline style attributes for HTML e-mail."""


# Import and register subcommands
from cssinliner.cli.inline import inline  # noqa: E402
from cssinliner.cli.specificity import specificity  # noqa: E402

cli.add_command(inline)
cli.add_command(specificity)
