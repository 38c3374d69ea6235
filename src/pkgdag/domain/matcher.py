"""Package visibility filter.

A :class:`Matcher` wraps an optional regular expression. Package paths are
matched after stripping any vendoring prefix, so
``github.com/x/vendor/github.com/y`` is tested as ``github.com/y``.
"""

from __future__ import annotations

import re

from pkgdag.errors import PatternError

VENDOR_SEGMENT = "/vendor/"


def strip_vendor(package: str) -> str:
    """Return *package* with everything up to the last ``/vendor/`` removed."""
    _, sep, tail = package.rpartition(VENDOR_SEGMENT)
    return tail if sep else package


class Matcher:
    """Decides whether a package is visible in rendered output."""

    def __init__(self, pattern: str | None = None) -> None:
        self.pattern = pattern or None
        self._regex: re.Pattern[str] | None = None
        if self.pattern is not None:
            try:
                self._regex = re.compile(self.pattern)
            except re.error as exc:
                msg = f"Invalid match pattern {self.pattern!r}: {exc}"
                raise PatternError(msg) from exc

    def match(self, package: str) -> bool:
        """Return True if *package* passes the filter (always, without a pattern)."""
        if self._regex is None:
            return True
        return self._regex.search(strip_vendor(package)) is not None

    __call__ = match

    def __repr__(self) -> str:
        return f"Matcher({self.pattern!r})"
