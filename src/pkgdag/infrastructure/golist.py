"""Go toolchain adapter: package metadata and seed listing via ``go list``.

Every call runs ``go list`` in the source directory so that relative
patterns and vendored imports resolve the same way the Go build does.
Two entry points:

* :meth:`GoList.list_packages`: ``go list <patterns>``, one import path
  per line. Failure is fatal (:class:`~pkgdag.errors.SeedListError`).
* :meth:`GoList.describe`: ``go list -e -json <package>`` parsed into a
  :class:`GoPackage`. Failure is per-package
  (:class:`~pkgdag.errors.ProviderError`).
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from pkgdag.errors import ProviderError, SeedListError

logger = logging.getLogger(__name__)


class GoPackageError(BaseModel):
    """The ``Error`` object ``go list -e`` attaches to broken packages."""

    model_config = {"frozen": True, "populate_by_name": True}

    err: str = Field(default="", alias="Err")
    pos: str = Field(default="", alias="Pos")


class GoPackage(BaseModel):
    """Subset of the ``go list -json`` package record used by the classifier."""

    model_config = {"frozen": True, "populate_by_name": True}

    import_path: str = Field(default="", alias="ImportPath")
    dir: str = Field(default="", alias="Dir")
    imports: list[str] = Field(default_factory=list, alias="Imports")
    goroot: bool = Field(default=False, alias="Goroot")
    standard: bool = Field(default=False, alias="Standard")
    error: GoPackageError | None = Field(default=None, alias="Error")


class GoList:
    """Runs the ``go`` binary on behalf of the classifier and the CLI."""

    def __init__(self, go: str = "go") -> None:
        self._go = go

    def _run(self, args: Sequence[str], src_dir: Path) -> subprocess.CompletedProcess[str]:
        """Run ``go list`` with *args* in *src_dir*. Raises on failure."""
        return subprocess.run(
            [self._go, "list", *args],
            cwd=src_dir,
            capture_output=True,
            text=True,
            check=True,
        )

    def list_packages(self, patterns: Sequence[str], src_dir: Path) -> list[str]:
        """Return the import paths matching *patterns* (``.`` when empty)."""
        try:
            result = self._run(patterns, src_dir)
        except OSError as exc:
            msg = f"Cannot run {self._go!r}: {exc}"
            raise SeedListError(msg) from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            msg = f"{self._go} list {' '.join(patterns)} failed: {detail}"
            raise SeedListError(msg) from exc

        packages = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        logger.debug("Listed %d seed packages for %s", len(packages), list(patterns))
        return packages

    def describe(self, package: str, src_dir: Path) -> GoPackage:
        """Return the ``go list -json`` record for a single *package*."""
        try:
            result = self._run(["-e", "-json", package], src_dir)
        except OSError as exc:
            raise ProviderError(package, f"cannot run {self._go!r}: {exc}") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise ProviderError(package, detail) from exc

        try:
            return GoPackage.model_validate_json(result.stdout)
        except ValidationError as exc:
            raise ProviderError(package, f"unreadable go list output: {exc}") from exc
