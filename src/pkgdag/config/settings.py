"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``PKGDAG_*`` prefix
  3. TOML file: ``pkgdag.toml`` discovered via walk-up from the source dir
  4. Code defaults: baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`pkgdag.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pkgdag.config.discovery import find_config
from pkgdag.config.models import GraphConfig, ToolsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``pkgdag.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PkgdagSettings(BaseSettings):
    """Settings for one pkgdag invocation, frozen after construction.

    Attributes:
        src_dir: Directory ``go list`` runs in (``-C/--dir``, or CWD).
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PKGDAG_",
        "env_nested_delimiter": "__",
    }

    src_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    graph: GraphConfig = Field(default_factory=GraphConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        src_dir: Path | None = None,
        **cli_flags: Any,
    ) -> PkgdagSettings:
        """Construct settings from CLI invocation.

        Uses the explicit *config_path* when it names a file, otherwise
        discovers ``pkgdag.toml`` by walking up from *src_dir*.
        """
        resolved_dir = (src_dir or Path.cwd()).resolve()

        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(resolved_dir)

        _tls.toml_path = toml_path
        try:
            return cls(
                src_dir=resolved_dir,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    def resolve_graph(self, **overrides: Any) -> GraphConfig:
        """Return the ``[graph]`` section with non-None *overrides* applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self.graph
        return GraphConfig.model_validate({**self.graph.model_dump(), **values})
