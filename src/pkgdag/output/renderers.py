"""Renderers for a finished :class:`~pkgdag.services.builder.ImportGraph`.

Every renderer writes to an explicit text *sink* and consults a
:class:`~pkgdag.domain.matcher.Matcher` for visibility; none of them
mutates the graph.

Renderers are dispatched by output format in :func:`render`.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from pkgdag.domain.matcher import Matcher
    from pkgdag.services.builder import ImportGraph

OUTPUT_FORMATS = ("flat", "text", "dot", "svg")


class Rasterizer(Protocol):
    def rasterize(self, description: str) -> bytes: ...


class Viewer(Protocol):
    def display(self, image: bytes) -> None: ...


# ── Public API ────────────────────────────────────────────────────────


def render(
    fmt: str,
    graph: ImportGraph,
    matcher: Matcher,
    sink: TextIO,
    *,
    rasterizer: Rasterizer | None = None,
    viewer: Viewer | None = None,
) -> None:
    """Render *graph* in format *fmt* to *sink*.

    The ``svg`` format writes nothing to *sink*; it needs both a
    *rasterizer* and a *viewer*.
    """
    if fmt == "svg":
        if rasterizer is None or viewer is None:
            msg = "svg output requires a rasterizer and a viewer"
            raise ValueError(msg)
        show_graph(graph, matcher, rasterizer, viewer)
        return
    renderer = _RENDERERS.get(fmt)
    if renderer is None:
        msg = f"Unknown output format: {fmt}"
        raise ValueError(msg)
    renderer(graph, matcher, sink)


def write_text(graph: ImportGraph, matcher: Matcher, sink: TextIO) -> None:
    """Adjacency listing: each visible node followed by its visible imports.

    Nodes without visible imports are omitted.
    """
    for package in graph.order:
        if not matcher.match(package):
            continue
        targets = graph.visible_imports(package, matcher)
        if not targets:
            continue
        sink.write(f"{package} <= {graph.canonical_paths[package]}\n")
        for target in targets:
            sink.write(f"    {target}\n")


def write_flat(graph: ImportGraph, matcher: Matcher, sink: TextIO) -> None:
    """Sorted list of every visible node, one per line."""
    for package in sorted(p for p in graph.order if matcher.match(p)):
        sink.write(f"{package}\n")


def write_dot(graph: ImportGraph, matcher: Matcher, sink: TextIO) -> None:
    """Graphviz DOT description of the visible nodes and edges.

    Node ids are positions in ``graph.order``. Nodes vendored into the
    project are drawn filled. Edges to imports that never became nodes
    (unresolvable packages) have no id and are left out.
    """
    ids = graph.index()
    sink.write("digraph pkgdag {\n")
    for package in graph.order:
        if not matcher.match(package):
            continue
        targets = graph.visible_imports(package, matcher)
        if not targets:
            continue

        node_id = ids[package]
        label = _escape(package)
        if graph.is_vendored(package):
            sink.write(f'    {node_id} [label="{label}",style=filled];\n')
        else:
            sink.write(f'    {node_id} [label="{label}"];\n')
        for target in targets:
            if target in ids:
                sink.write(f"    {node_id} -> {ids[target]};\n")
    sink.write("}\n")


def show_graph(
    graph: ImportGraph,
    matcher: Matcher,
    rasterizer: Rasterizer,
    viewer: Viewer,
) -> None:
    """Rasterize the DOT description and hand the image to *viewer*."""
    buf = io.StringIO()
    write_dot(graph, matcher, buf)
    viewer.display(rasterizer.rasterize(buf.getvalue()))


# ── Helpers ───────────────────────────────────────────────────────────


def _escape(label: str) -> str:
    return label.replace("\\", "\\\\").replace('"', '\\"')


_RENDERERS = {
    "flat": write_flat,
    "text": write_text,
    "dot": write_dot,
}
