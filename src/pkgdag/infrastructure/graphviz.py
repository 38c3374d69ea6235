"""Graphviz rasterizer and external image viewer.

Both collaborators shell out and treat any failure as fatal
(:class:`~pkgdag.errors.RenderError`): a half-rendered diagram is never
presented.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
import tempfile
from pathlib import Path

from pkgdag.errors import RenderError

logger = logging.getLogger(__name__)


def default_viewer() -> str:
    """Return the platform's file opener command."""
    if sys.platform == "darwin":
        return "open"
    if sys.platform == "win32":
        return "explorer"
    return "xdg-open"


class DotRasterizer:
    """Converts a DOT description into image bytes with Graphviz ``dot``."""

    def __init__(self, dot: str = "dot", image_format: str = "svg") -> None:
        self._dot = dot
        self.image_format = image_format

    def rasterize(self, description: str) -> bytes:
        args = [self._dot, f"-T{self.image_format}"]
        try:
            result = subprocess.run(
                args,
                input=description.encode("utf-8"),
                capture_output=True,
                check=True,
            )
        except OSError as exc:
            msg = f"Cannot run {self._dot!r}: {exc}"
            raise RenderError(msg) from exc
        except subprocess.CalledProcessError as exc:
            detail = exc.stderr.decode("utf-8", "replace").strip() if exc.stderr else ""
            msg = f"{' '.join(args)} failed: {detail or f'exit status {exc.returncode}'}"
            raise RenderError(msg) from exc
        logger.debug("Rasterized %d bytes of DOT into %d bytes", len(description), len(result.stdout))
        return result.stdout


class CommandViewer:
    """Shows an image by handing a temporary file to an external command.

    The temporary file is removed once the command returns, whether it
    succeeded or not.
    """

    def __init__(self, command: str | None = None, suffix: str = ".svg") -> None:
        self.command = command or default_viewer()
        self.suffix = suffix

    def display(self, image: bytes) -> None:
        fd, name = tempfile.mkstemp(prefix="pkgdag-", suffix=self.suffix)
        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(image)
            args = [*shlex.split(self.command), str(path)]
            try:
                subprocess.run(args, check=True)
            except OSError as exc:
                msg = f"Cannot run viewer {self.command!r}: {exc}"
                raise RenderError(msg) from exc
            except subprocess.CalledProcessError as exc:
                msg = f"Viewer {self.command!r} exited with status {exc.returncode}"
                raise RenderError(msg) from exc
        finally:
            path.unlink(missing_ok=True)
