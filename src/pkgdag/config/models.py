"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pkgdag.toml only contains overrides.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

OutputFormat = Literal["flat", "text", "dot", "svg"]


class GraphConfig(BaseModel):
    """[graph] section."""

    model_config = {"frozen": True}

    include_std: bool = False
    format: OutputFormat = "flat"
    match: str = ""
    # None means the platform's default file opener.
    viewer: str | None = None


class ToolsConfig(BaseModel):
    """[tools] section: external executables."""

    model_config = {"frozen": True}

    go: str = "go"
    dot: str = "dot"
    dot_format: str = "svg"

