"""Translate a :class:`RenderConfig` into poppler command-line tokens.

Token order is fixed: resolution, scale, grayscale, crop, password.
"""

from __future__ import annotations

from typing import List

from .config import PasswordKind, RenderConfig, RenderTool

# Read the PDF from stdin and write one JPEG for the page to stdout.
_PDFTOCAIRO_PREFIX = ["-", "-", "-jpeg", "-singlefile"]
_PDFTOPPM_PREFIX = ["-jpeg", "-singlefile"]


def tool_prefix_args(tool: RenderTool) -> List[str]:
    """Return the output-format tokens that lead every render command."""
    if tool is RenderTool.pdftocairo:
        return list(_PDFTOCAIRO_PREFIX)
    return list(_PDFTOPPM_PREFIX)


def page_range_args(page: int) -> List[str]:
    """Return ``-f``/``-l`` tokens selecting exactly *page*."""
    return ["-f", str(page), "-l", str(page)]


def to_cli_args(config: RenderConfig) -> List[str]:
    """Map *config* to pdftoppm / pdftocairo option tokens."""
    args: List[str] = []

    res = config.resolution
    if res.is_uniform:
        args += ["-r", str(res.x)]
    else:
        args += ["-rx", str(res.x), "-ry", str(res.y)]

    scale = config.scale
    if scale is not None:
        if scale.size is not None:
            args += ["-scale-to", str(scale.size)]
        else:
            if scale.x is not None:
                args += ["-scale-to-x", str(scale.x)]
            if scale.y is not None:
                args += ["-scale-to-y", str(scale.y)]

    if config.grayscale:
        args.append("-gray")

    crop = config.crop
    if crop is not None:
        args += [
            "-cropbox",
            "-x",
            str(crop.x),
            "-y",
            str(crop.y),
            "-W",
            str(crop.width),
            "-H",
            str(crop.height),
        ]

    password = config.password
    if password is not None:
        flag = "-upw" if password.kind is PasswordKind.user else "-opw"
        args += [flag, password.value]

    return args
