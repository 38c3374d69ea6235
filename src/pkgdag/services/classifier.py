"""PackageClassifier: normalizes provider metadata for the graph builder.

Turns a raw :class:`~pkgdag.infrastructure.golist.GoPackage` into a
:class:`PackageInfo` with a canonical path, sorted and deduplicated direct
imports, and a standard-library flag. Anything the builder cannot use is
reported as :class:`~pkgdag.errors.ClassificationError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pkgdag.errors import ClassificationError
from pkgdag.infrastructure.golist import GoPackage

# ``import "C"`` is cgo, not a package. The golang.org/x mirrors are copies
# the Go distribution keeps under its own source tree.
PSEUDO_IMPORTS = frozenset({"C"})
PSEUDO_PREFIXES = ("golang_org/x/", "vendor/golang.org/x/")


def is_pseudo_import(package: str) -> bool:
    """Return True for identifiers that never name a classifiable package."""
    return package in PSEUDO_IMPORTS or package.startswith(PSEUDO_PREFIXES)


class MetadataProvider(Protocol):
    """Anything that can describe a package relative to a source directory."""

    def describe(self, package: str, src_dir: Path) -> GoPackage: ...


@dataclass(frozen=True)
class PackageInfo:
    """Classification result for one package identifier."""

    package: str
    canonical_path: str
    imports: tuple[str, ...]
    standard: bool = False


class PackageClassifier:
    """Classifies package identifiers through a :class:`MetadataProvider`."""

    def __init__(self, provider: MetadataProvider, src_dir: Path) -> None:
        self._provider = provider
        self.src_dir = src_dir

    def classify(self, package: str) -> PackageInfo:
        """Describe *package* or raise :class:`ClassificationError`.

        Provider errors, package-level errors reported by ``go list``
        (missing package, bad sources, import cycles) and an empty import
        path are all treated the same way.
        """
        meta = self._provider.describe(package, self.src_dir)
        if meta.error is not None and meta.error.err:
            raise ClassificationError(package, meta.error.err)
        if not meta.import_path:
            raise ClassificationError(package, "empty import path")

        return PackageInfo(
            package=package,
            canonical_path=meta.import_path,
            imports=tuple(sorted(set(meta.imports))),
            standard=meta.goroot or meta.standard,
        )
