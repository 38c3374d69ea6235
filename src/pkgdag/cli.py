"""Root CLI group for pkgdag with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from pkgdag import __version__
from pkgdag.commands import register_commands
from pkgdag.commands._context import AppContext
from pkgdag.config.settings import PkgdagSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="pkgdag")
@click.option("-v", "--verbose", is_flag=True, help="Log every package visited.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-C",
    "--dir",
    "src_dir",
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Source directory to run go list in (default: current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    src_dir: Path | None,
) -> None:
    """pkgdag: Go package import graph explorer."""
    ctx.ensure_object(dict)
    # Unset flags must not shadow PKGDAG_* env vars or pkgdag.toml.
    flags = {name: True for name, value in (("verbose", verbose), ("log_json", log_json)) if value}
    settings = PkgdagSettings.from_cli(config_path=config_path, src_dir=src_dir, **flags)
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
