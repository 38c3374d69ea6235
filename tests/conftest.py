"""Shared pytest fixtures and test helpers for pkgdag tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Iterable, Mapping
from pathlib import Path

import pytest
from click.testing import CliRunner

from pkgdag.errors import ProviderError
from pkgdag.infrastructure.golist import GoPackage
from pkgdag.services.builder import GraphBuilder, ImportGraph
from pkgdag.services.classifier import PackageClassifier


class FakeProvider:
    """In-memory stand-in for ``go list -e -json``.

    Args:
        relation: package -> direct imports. Packages missing from the
            mapping are reported the way ``go list -e`` reports them.
        std: Packages that belong to the standard library.
        paths: Canonical import path overrides (default: the identifier).
        broken: Packages whose provider call fails outright.
    """

    def __init__(
        self,
        relation: Mapping[str, Iterable[str]],
        *,
        std: Iterable[str] = (),
        paths: Mapping[str, str] | None = None,
        broken: Iterable[str] = (),
    ) -> None:
        self.relation = {pkg: list(imports) for pkg, imports in relation.items()}
        self.std = set(std)
        self.paths = dict(paths or {})
        self.broken = set(broken)
        self.calls: list[str] = []

    def describe(self, package: str, src_dir: Path) -> GoPackage:
        self.calls.append(package)
        if package in self.broken:
            raise ProviderError(package, "exit status 1")
        if package not in self.relation:
            return GoPackage(
                ImportPath=package,
                Error={"Err": f"cannot find package {package!r}"},
            )
        return GoPackage(
            ImportPath=self.paths.get(package, package),
            Imports=self.relation[package],
            Goroot=package in self.std,
            Standard=package in self.std,
        )


def build_graph(
    relation: Mapping[str, Iterable[str]],
    seeds: Iterable[str],
    *,
    include_std: bool = False,
    **provider_kwargs: object,
) -> ImportGraph:
    """Traverse *relation* from *seeds* through a :class:`FakeProvider`."""
    provider = FakeProvider(relation, **provider_kwargs)  # type: ignore[arg-type]
    classifier = PackageClassifier(provider, Path("."))
    return GraphBuilder(classifier, include_std=include_std).build(seeds)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def graph_factory() -> Callable[..., ImportGraph]:
    """Return :func:`build_graph` for tests that need a finished graph."""
    return build_graph


@pytest.fixture
def diamond() -> dict[str, list[str]]:
    """app -> libA, libB; libA -> libB; everything also imports fmt."""
    return {
        "app": ["libB", "libA", "fmt"],
        "libA": ["libB", "fmt"],
        "libB": ["fmt"],
        "fmt": ["io"],
        "io": [],
    }


@pytest.fixture(autouse=True)
def _no_config_discovery(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's PKGDAG_* environment out of the tests."""
    for var in ("PKGDAG_CONFIG", "PKGDAG_VERBOSE", "PKGDAG_LOG_JSON"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def provider_factory() -> type[FakeProvider]:
    """Return the :class:`FakeProvider` class for tests that inspect calls."""
    return FakeProvider


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by the CLI under test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkgdag = logging.getLogger("pkgdag")
    pkgdag_level = pkgdag.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkgdag.setLevel(pkgdag_level)
