"""CLI command: cssinliner specificity -- score selectors."""

from __future__ import annotations

import click

from cssinliner.specificity import specificity as score, specificity_counts


@click.command()
@click.argument("selectors", nargs=-1, required=True)
def specificity(selectors: tuple[str, ...]) -> None:
    """Print the CSS2.1 specificity of each SELECTOR."""
    for selector in selectors:
        a, b, c = specificity_counts(selector)
        click.echo(f"{score(selector):>4}  ({a},{b},{c})  {selector}")
