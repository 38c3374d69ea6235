"""Error hierarchy for pkgdag.

Two tiers:

* :class:`ClassificationError`: one package could not be resolved.
  Recoverable: the builder logs it, drops the package, and keeps going.
* :class:`PkgdagError`: systemic failure (bad filter, no seeds, broken
  rasterizer/viewer). Fatal: a ``click.ClickException`` so the CLI prints
  ``Error: ...`` to stderr and exits with status 1.
"""

from __future__ import annotations

import click


class ClassificationError(Exception):
    """A single package could not be classified."""

    def __init__(self, package: str, reason: str) -> None:
        super().__init__(f"{package}: {reason}")
        self.package = package
        self.reason = reason


class ProviderError(ClassificationError):
    """The metadata provider process itself failed for a package."""


class PkgdagError(click.ClickException):
    """Base class for errors that abort the whole run."""


class PatternError(PkgdagError):
    """The ``--match`` filter is not a valid regular expression."""


class SeedListError(PkgdagError):
    """The seed package list could not be obtained."""


class RenderError(PkgdagError):
    """The rasterizer or image viewer failed."""
