"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to subcommands via
``@click.pass_obj``. Owns logging setup, the lazily created ``go list``
adapter, and output emission to stdout.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import click

from pkgdag.output.renderers import render

if TYPE_CHECKING:
    from pkgdag.config.models import GraphConfig
    from pkgdag.config.settings import PkgdagSettings
    from pkgdag.domain.matcher import Matcher
    from pkgdag.infrastructure.golist import GoList
    from pkgdag.services.builder import ImportGraph


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The ``go`` adapter is created on first use so ``--help`` and
    ``--version`` never look for a Go toolchain.
    """

    def __init__(self, settings: PkgdagSettings) -> None:
        self.settings = settings
        self._go: GoList | None = None

        from pkgdag.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def go(self) -> GoList:
        """The ``go list`` adapter (created lazily on first access)."""
        if self._go is None:
            from pkgdag.infrastructure.golist import GoList

            self._go = GoList(self.settings.tools.go)
        return self._go

    def build_graph(self, patterns: Sequence[str], *, include_std: bool) -> ImportGraph:
        """List seed packages for *patterns* and traverse their imports."""
        from pkgdag.services.builder import GraphBuilder
        from pkgdag.services.classifier import PackageClassifier

        src_dir = self.settings.src_dir
        seeds = self.go.list_packages(patterns, src_dir)
        classifier = PackageClassifier(self.go, src_dir)
        return GraphBuilder(classifier, include_std=include_std).build(seeds)

    def emit(self, graph: ImportGraph, matcher: Matcher, config: GraphConfig) -> None:
        """Render *graph* to stdout in ``config.format``.

        Rendering failures propagate as ``click.ClickException`` (exit 1);
        stdout is flushed on every path.
        """
        from pkgdag.infrastructure.graphviz import CommandViewer, DotRasterizer

        tools = self.settings.tools
        sink = click.get_text_stream("stdout")
        try:
            render(
                config.format,
                graph,
                matcher,
                sink,
                rasterizer=DotRasterizer(tools.dot, tools.dot_format),
                viewer=CommandViewer(config.viewer, suffix=f".{tools.dot_format}"),
            )
        finally:
            sink.flush()
