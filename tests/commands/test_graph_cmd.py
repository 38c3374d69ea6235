"""Tests for the ``pkgdag graph`` command.

The Go toolchain and Graphviz are replaced with in-memory fakes patched
into the infrastructure modules the CLI imports lazily.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from pkgdag.cli import cli
from pkgdag.errors import RenderError, SeedListError


@pytest.fixture
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp directory so no pkgdag.toml is discovered."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fake_go(
    monkeypatch: pytest.MonkeyPatch, provider_factory: type, diamond: dict
) -> type:
    """Patch GoList with a fake serving the diamond relation."""
    provider = provider_factory(diamond, std=["fmt", "io"])

    class _FakeGoList:
        instances: list[Any] = []
        seed_calls: list[tuple[tuple[str, ...], Path]] = []

        def __init__(self, go: str = "go") -> None:
            self.go = go
            _FakeGoList.instances.append(self)

        def list_packages(self, patterns: Any, src_dir: Path) -> list[str]:
            _FakeGoList.seed_calls.append((tuple(patterns), src_dir))
            if "./broken/..." in patterns:
                raise SeedListError("go list ./broken/... failed: no Go files")
            if "./ghost" in patterns:
                return ["app", "ghost"]
            return ["app"]

        def describe(self, package: str, src_dir: Path) -> Any:
            return provider.describe(package, src_dir)

    monkeypatch.setattr("pkgdag.infrastructure.golist.GoList", _FakeGoList)
    return _FakeGoList


@pytest.fixture
def fake_graphviz(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Patch the rasterizer and viewer; returns what they received."""
    seen: dict[str, Any] = {"descriptions": [], "images": [], "viewers": []}

    class _Rasterizer:
        def __init__(self, dot: str = "dot", image_format: str = "svg") -> None:
            seen["dot"] = dot
            seen["format"] = image_format

        def rasterize(self, description: str) -> bytes:
            if seen.get("fail"):
                raise RenderError("dot -Tsvg failed: syntax error")
            seen["descriptions"].append(description)
            return b"<svg/>"

    class _Viewer:
        def __init__(self, command: str | None = None, suffix: str = ".svg") -> None:
            seen["viewers"].append(command)
            seen["suffix"] = suffix

        def display(self, image: bytes) -> None:
            seen["images"].append(image)

    monkeypatch.setattr("pkgdag.infrastructure.graphviz.DotRasterizer", _Rasterizer)
    monkeypatch.setattr("pkgdag.infrastructure.graphviz.CommandViewer", _Viewer)
    return seen


@pytest.mark.usefixtures("_isolated", "fake_go")
class TestGraphOutput:
    def test_default_is_flat(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "./..."])
        assert result.exit_code == 0, result.output
        assert result.stdout == "app\nlibA\nlibB\n"

    def test_text(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "-f", "text", "./..."])
        assert result.exit_code == 0, result.output
        assert result.stdout == "app <= app\n    libA\n    libB\nlibA <= libA\n    libB\n"

    def test_dot(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "--format", "dot"])
        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("digraph pkgdag {\n")
        assert '    0 [label="app"];\n' in result.stdout
        assert result.stdout.endswith("}\n")

    def test_std(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "--std"])
        assert result.exit_code == 0, result.output
        assert result.stdout == "app\nfmt\nio\nlibA\nlibB\n"

    def test_match(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "-m", "^libA$"])
        assert result.exit_code == 0, result.output
        assert result.stdout == "libA\n"

    def test_unknown_format_rejected(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "-f", "png"])
        assert result.exit_code == 2

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "--examples"])
        assert result.exit_code == 0
        assert "pkgdag graph -f text" in result.output


@pytest.mark.usefixtures("_isolated")
class TestGraphSeeds:
    def test_patterns_forwarded(self, cli_runner: CliRunner, fake_go: type) -> None:
        result = cli_runner.invoke(cli, ["graph", "./cmd/...", "./internal/..."])
        assert result.exit_code == 0, result.output
        assert fake_go.seed_calls[-1][0] == ("./cmd/...", "./internal/...")

    def test_src_dir_option(self, cli_runner: CliRunner, fake_go: type, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        result = cli_runner.invoke(cli, ["-C", str(project), "graph"])
        assert result.exit_code == 0, result.output
        assert fake_go.seed_calls[-1] == ((), project.resolve())

    def test_go_binary_from_config(
        self, cli_runner: CliRunner, fake_go: type, tmp_path: Path
    ) -> None:
        (tmp_path / "pkgdag.toml").write_text('[tools]\ngo = "go1.22"\n')
        result = cli_runner.invoke(cli, ["graph"])
        assert result.exit_code == 0, result.output
        assert fake_go.instances[-1].go == "go1.22"

    def test_toml_graph_defaults(
        self, cli_runner: CliRunner, fake_go: type, tmp_path: Path
    ) -> None:
        (tmp_path / "pkgdag.toml").write_text('[graph]\nformat = "text"\nmatch = "^app$"\n')
        result = cli_runner.invoke(cli, ["graph"])
        assert result.exit_code == 0, result.output
        # app's imports are filtered out by the match, so nothing is listed.
        assert result.stdout == ""

    def test_cli_flag_beats_toml(
        self, cli_runner: CliRunner, fake_go: type, tmp_path: Path
    ) -> None:
        (tmp_path / "pkgdag.toml").write_text('[graph]\nformat = "text"\n')
        result = cli_runner.invoke(cli, ["graph", "-f", "flat"])
        assert result.exit_code == 0, result.output
        assert result.stdout == "app\nlibA\nlibB\n"


@pytest.mark.usefixtures("_isolated", "fake_go")
class TestGraphErrors:
    def test_bad_pattern_is_fatal(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "-m", "(oops"])
        assert result.exit_code == 1
        assert "Invalid match pattern" in result.output

    def test_seed_failure_is_fatal(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "./broken/..."])
        assert result.exit_code == 1
        assert "no Go files" in result.output

    def test_classification_failure_is_not_fatal(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "./ghost"])
        assert result.exit_code == 0
        assert "Skipping package ghost" in result.output
        assert "app\nlibA\nlibB\n" in result.output


@pytest.mark.usefixtures("_isolated", "fake_go")
class TestGraphSvg:
    def test_svg_rasterizes_and_displays(
        self, cli_runner: CliRunner, fake_graphviz: dict[str, Any]
    ) -> None:
        result = cli_runner.invoke(cli, ["graph", "-f", "svg", "--viewer", "firefox"])
        assert result.exit_code == 0, result.output
        assert result.stdout == ""
        assert fake_graphviz["descriptions"][0].startswith("digraph pkgdag {\n")
        assert fake_graphviz["images"] == [b"<svg/>"]
        assert fake_graphviz["viewers"] == ["firefox"]
        assert fake_graphviz["suffix"] == ".svg"

    def test_svg_default_viewer(
        self, cli_runner: CliRunner, fake_graphviz: dict[str, Any]
    ) -> None:
        result = cli_runner.invoke(cli, ["graph", "-f", "svg"])
        assert result.exit_code == 0, result.output
        assert fake_graphviz["viewers"] == [None]

    def test_rasterizer_failure_is_fatal(
        self, cli_runner: CliRunner, fake_graphviz: dict[str, Any]
    ) -> None:
        fake_graphviz["fail"] = True
        result = cli_runner.invoke(cli, ["graph", "-f", "svg"])
        assert result.exit_code == 1
        assert "syntax error" in result.output
        assert fake_graphviz["images"] == []
