# SPDX-License-Identifier: MIT
"""Source locations for user-facing diagnostics.

Targets record where they were declared so that configuration errors can
point back at the build description rather than at unibuild internals.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from pathlib import Path

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class SourceLocation:
    """A file/line pair in user code."""

    filename: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}"


def get_caller_location() -> SourceLocation | None:
    """Return the first stack frame outside the unibuild package.

    Returns:
        The location of the calling user code, or None if every frame
        on the stack belongs to unibuild itself.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None:
            filename = frame.f_code.co_filename
            try:
                inside = Path(filename).resolve().is_relative_to(_PACKAGE_DIR)
            except OSError:
                inside = False
            if not inside:
                return SourceLocation(filename, frame.f_lineno)
            frame = frame.f_back
        return None
    finally:
        del frame
