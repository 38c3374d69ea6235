"""Config file discovery.

Walk-up finder locates pkgdag.toml starting from the source directory,
similar to how git finds .git/. The PKGDAG_CONFIG env var and the
--config CLI flag take precedence over the walk-up.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "pkgdag.toml"
CONFIG_ENV_VAR = "PKGDAG_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest pkgdag.toml at or above *start* (default: cwd).

    When PKGDAG_CONFIG is set, it wins: its path is returned if the file
    exists, and no walk-up happens otherwise.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    start_dir = (start or Path.cwd()).resolve()
    for directory in (start_dir, *start_dir.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
