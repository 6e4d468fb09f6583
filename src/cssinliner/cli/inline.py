"""CLI command: cssinliner inline -- inline a document's stylesheet."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from cssinliner.config import InlinerConfig
from cssinliner.errors import ContentWarningError, FetchError, InlinerError
from cssinliner.inliner import Inliner


@click.command()
@click.argument("htmlfile", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--url", default=None, help="Fetch the document from this URL instead of a file")
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False), help="Write the result here instead of stdout")
@click.option("--charset", default=None, help="Character encoding of HTMLFILE")
@click.option("--strip-attrs", is_flag=True, help="Remove id and class attributes after inlining")
@click.option("--leave-style", is_flag=True, help="Keep <style> blocks in the output")
@click.option("--relaxed", is_flag=True, help="Accept <style> blocks anywhere and skip structure checks")
@click.option("--strict", is_flag=True, help="Treat the first content warning as an error")
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
def inline(
    htmlfile: str | None,
    url: str | None,
    output: str | None,
    charset: str | None,
    strip_attrs: bool,
    leave_style: bool,
    relaxed: bool,
    strict: bool,
    verbose: bool,
) -> None:
    """Inline the stylesheet of HTMLFILE (or --url) into style attributes.

    Content warnings are printed to stderr. Exits with code 1 when the
    document cannot be read or fetched, or on the first warning with --strict.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if bool(htmlfile) == bool(url):
        raise click.UsageError("Pass exactly one of HTMLFILE or --url")

    config = InlinerConfig(
        strip_attrs=strip_attrs,
        leave_style=leave_style,
        relaxed=relaxed,
        warns_as_errors=strict,
    )
    inliner = Inliner(config)

    try:
        if url:
            inliner.fetch_file(url)
        else:
            inliner.read_file(htmlfile, charset=charset)
        html = inliner.inlinify()
    except ContentWarningError as exc:
        click.echo(f"Error: {exc.info}", err=True)
        sys.exit(1)
    except FetchError as exc:
        click.echo(f"Fetch error: {exc}", err=True)
        sys.exit(1)
    except InlinerError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    finally:
        inliner.close()

    # With --verbose the log already carries every content warning.
    if not verbose:
        for warning in inliner.content_warnings:
            click.echo(f"WARNING: {warning}", err=True)

    if output:
        Path(output).write_text(html, encoding="utf-8")
        click.echo(f"Wrote {output} ({len(inliner.content_warnings)} warning(s))", err=True)
    else:
        click.echo(html)
