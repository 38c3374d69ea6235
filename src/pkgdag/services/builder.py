"""GraphBuilder: worklist traversal producing an :class:`ImportGraph`.

Built once per invocation from the seed packages, no cross-invocation
cache. Each package is classified at most once, so traversal terminates
on cyclic import graphs. Classification failures drop the package and
are logged; they never abort the run.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pkgdag.domain.matcher import VENDOR_SEGMENT
from pkgdag.errors import ClassificationError
from pkgdag.services.classifier import is_pseudo_import

if TYPE_CHECKING:
    from pkgdag.domain.matcher import Matcher
    from pkgdag.services.classifier import PackageClassifier

logger = logging.getLogger(__name__)


@dataclass
class ImportGraph:
    """Directed import graph keyed by package identifier.

    Attributes:
        imports: Sorted, deduplicated direct imports of every visited node.
        canonical_paths: Resolved import path of every visited node.
        standard: Every identifier classified as standard library, whether
            or not it became a node.
        order: Nodes in the order they were added; the render order.
        include_std: Whether standard-library packages were kept as nodes.
    """

    imports: dict[str, tuple[str, ...]] = field(default_factory=dict)
    canonical_paths: dict[str, str] = field(default_factory=dict)
    standard: set[str] = field(default_factory=set)
    order: list[str] = field(default_factory=list)
    include_std: bool = False

    def __contains__(self, package: object) -> bool:
        return package in self.imports

    def __len__(self) -> int:
        return len(self.order)

    def add(self, package: str, canonical_path: str, imports: Iterable[str]) -> None:
        """Record a visited node. Adding the same package twice is an error."""
        if package in self.imports:
            msg = f"Package {package!r} already in graph"
            raise ValueError(msg)
        self.imports[package] = tuple(sorted(set(imports)))
        self.canonical_paths[package] = canonical_path
        self.order.append(package)

    def index(self) -> dict[str, int]:
        """Map each node to its 0-based position in :attr:`order`."""
        return {package: i for i, package in enumerate(self.order)}

    def is_vendored(self, package: str) -> bool:
        """True when the node's canonical path lives under a vendor directory."""
        return VENDOR_SEGMENT in self.canonical_paths.get(package, "")

    def visible_imports(self, package: str, matcher: Matcher) -> list[str]:
        """Direct imports of *package* that pass *matcher*.

        Standard-library targets are dropped unless the graph was built
        with ``include_std``.
        """
        return [
            target
            for target in self.imports.get(package, ())
            if (self.include_std or target not in self.standard) and matcher.match(target)
        ]


class GraphBuilder:
    """Drives classification over a worklist until it is empty.

    Newly discovered imports are pushed onto the front of the worklist as
    one sorted batch, so expansion leans depth-first and ``order`` is
    reproducible for a given seed order.
    """

    def __init__(self, classifier: PackageClassifier, *, include_std: bool = False) -> None:
        self._classifier = classifier
        self.include_std = include_std

    def build(self, seeds: Iterable[str]) -> ImportGraph:
        """Traverse from *seeds* and return the finished graph."""
        graph = ImportGraph(include_std=self.include_std)
        todo: deque[str] = deque(seeds)
        failed: set[str] = set()
        started = time.perf_counter()

        while todo:
            package = todo.popleft()
            if package in failed or self._skip(graph, package):
                continue

            try:
                info = self._classifier.classify(package)
            except ClassificationError as exc:
                failed.add(package)
                logger.warning("Skipping package %s: %s", package, exc.reason)
                continue

            if info.standard:
                graph.standard.add(package)
                if not self.include_std:
                    continue

            graph.add(package, info.canonical_path, info.imports)
            logger.debug(
                "Added %s <= %s (%d imports)", package, info.canonical_path, len(info.imports)
            )

            more = [
                target
                for target in graph.imports[package]
                if target not in failed and not self._skip(graph, target)
            ]
            todo.extendleft(reversed(more))

        logger.debug(
            "Import graph complete: %d nodes, %d stdlib, %d failed in %.1fms",
            len(graph),
            len(graph.standard),
            len(failed),
            (time.perf_counter() - started) * 1000,
        )
        return graph

    def _skip(self, graph: ImportGraph, package: str) -> bool:
        if is_pseudo_import(package) or package in graph:
            return True
        return not self.include_std and package in graph.standard
