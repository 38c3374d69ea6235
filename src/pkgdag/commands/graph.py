"""Command: build and render the package import graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pkgdag.commands._base import PkgdagCommand
from pkgdag.domain.matcher import Matcher
from pkgdag.output.renderers import OUTPUT_FORMATS

if TYPE_CHECKING:
    from pkgdag.commands._context import AppContext


@click.command(
    cls=PkgdagCommand,
    examples="""\
  pkgdag graph ./...
  pkgdag graph -f text ./cmd/...
  pkgdag graph -f dot --std ./... > deps.dot
  pkgdag graph -f svg -m 'github.com/acme/' ./...
  pkgdag -C ~/src/myproj graph -f svg --viewer firefox ./...""",
)
@click.argument("patterns", nargs=-1)
@click.option(
    "--std/--no-std",
    "include_std",
    default=None,
    help="Include standard library packages.",
)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format: flat, text, dot, or svg (dot and svg need Graphviz).",
)
@click.option("--viewer", default=None, help="Command used to open the svg image.")
@click.option("-m", "--match", "pattern", default=None, help="Show only packages matching this regexp.")
@click.pass_obj
def graph(
    app: AppContext,
    patterns: tuple[str, ...],
    include_std: bool | None,
    fmt: str | None,
    viewer: str | None,
    pattern: str | None,
) -> None:
    """Show the import graph of the packages matching PATTERNS.

    PATTERNS are passed verbatim to ``go list`` (default: the package in
    the source directory).
    """
    config = app.settings.resolve_graph(
        include_std=include_std,
        format=fmt,
        viewer=viewer,
        match=pattern,
    )
    matcher = Matcher(config.match)
    import_graph = app.build_graph(patterns, include_std=config.include_std)
    app.emit(import_graph, matcher, config)
