"""Locate the poppler executables.

Set ``PDF2IMAGE_POPPLER_PATH`` to a directory holding ``pdfinfo``,
``pdftoppm`` and ``pdftocairo`` to bypass the normal ``PATH`` lookup.
"""

from __future__ import annotations

import os
import sys

POPPLER_PATH_ENV = "PDF2IMAGE_POPPLER_PATH"

PDFINFO = "pdfinfo"


def _is_windows() -> bool:
    return sys.platform.startswith("win")


def get_executable_path(command: str) -> str:
    """Return the executable to spawn for poppler tool *command*."""
    poppler_path = os.environ.get(POPPLER_PATH_ENV)
    if _is_windows():
        if poppler_path:
            return f"{poppler_path}\\{command}.exe"
        return f"{command}.exe"
    if poppler_path:
        return f"{poppler_path}/{command}"
    return command
