"""Concurrent page rendering through pdftoppm / pdftocairo.

One process is spawned per page on a fixed thread pool sized to the
host CPU count.  Each worker pipes the whole PDF to its process and
decodes the JPEG written to stdout.  Results are collected in page
order once every worker has finished; the first failure in that order
is raised and no images are returned.
"""

from __future__ import annotations

import io
import logging
import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import List, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from .args import page_range_args, to_cli_args, tool_prefix_args
from .config import RenderConfig
from .errors import ImageDecodeError, NoPasswordForEncryptedPdf
from .process import ToolResult, ToolRunner, run_tool
from .tools import get_executable_path

log = logging.getLogger(__name__)


# Image.MAX_IMAGE_PIXELS is process-wide; swaps of it are serialized here.
_pixel_limit_lock = threading.Lock()


def default_worker_count() -> int:
    return os.cpu_count() or 1


def _open_unbounded(payload: bytes) -> Image.Image:
    # Poppler output is sized by the requested DPI, so Pillow's
    # decompression-bomb cap is lifted while the header is read.
    with _pixel_limit_lock:
        limit = Image.MAX_IMAGE_PIXELS
        Image.MAX_IMAGE_PIXELS = None
        try:
            return Image.open(io.BytesIO(payload), formats=["JPEG"])
        finally:
            Image.MAX_IMAGE_PIXELS = limit


def decode_jpeg(payload: bytes) -> Image.Image:
    """Decode JPEG bytes into a fully loaded PIL image.

    Large pages are not rejected: Pillow's ``MAX_IMAGE_PIXELS`` guard
    does not apply to renderer output.

    Raises
    ------
    ImageDecodeError
        When *payload* is empty or not a readable JPEG.
    """
    try:
        img = _open_unbounded(payload)
        img.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
    ) as exc:
        raise ImageDecodeError(f"Not a valid JPEG image: {exc}") from exc
    return img


def _render_one(
    runner: ToolRunner,
    executable: str,
    base_args: List[str],
    config_args: List[str],
    page: int,
    data: bytes,
) -> Image.Image:
    args = base_args + page_range_args(page) + config_args
    result: ToolResult = runner(executable, args, data)
    try:
        img = decode_jpeg(result.stdout)
    except ImageDecodeError as exc:
        detail = f"page {page}: {exc}"
        if not result.ok:
            detail += f" ({executable} exited with status {result.returncode}"
            tail = result.stderr_tail()
            detail += f": {tail})" if tail else ")"
        raise ImageDecodeError(detail) from exc.__cause__
    log.debug("Rendered page %d: %dx%d %s", page, img.width, img.height, img.mode)
    return img


def render_pages(
    data: bytes,
    page_numbers: Sequence[int],
    config: Optional[RenderConfig] = None,
    *,
    encrypted: bool = False,
    runner: ToolRunner = run_tool,
) -> List[Image.Image]:
    """Render *page_numbers* of the PDF in *data* to images.

    One process runs per page on a pool as wide as the host CPU count.

    Parameters
    ----------
    data : bytes
        Raw PDF content, piped to every render process.
    page_numbers : sequence of int
        Pages to render; the output list follows this order.
    config : RenderConfig, optional
        Render options.  ``None`` uses the defaults.
    encrypted : bool
        Whether the PDF is encrypted; a password is then required.
    runner : ToolRunner
        Process invoker, :func:`~pdfraster.process.run_tool` by default.

    Returns
    -------
    list of PIL.Image.Image

    Raises
    ------
    NoPasswordForEncryptedPdf
        *encrypted* is set and *config* has no password.  Raised before
        any process is spawned.
    PdfRasterError
        The first per-page failure in page order.
    """
    if config is None:
        config = RenderConfig()

    if encrypted and config.password is None:
        raise NoPasswordForEncryptedPdf()

    pages = list(page_numbers)
    if not pages:
        return []

    executable = get_executable_path(config.tool.value)
    base_args = tool_prefix_args(config.tool)
    config_args = to_cli_args(config)
    workers = default_worker_count()

    log.debug(
        "Rendering %d page(s) with %s on %d worker(s)",
        len(pages),
        config.tool.value,
        workers,
    )
    t0 = time.perf_counter()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures: List[Future] = [
            pool.submit(
                _render_one, runner, executable, base_args, config_args, page, data
            )
            for page in pages
        ]
        wait(futures)

    images: List[Image.Image] = []
    for page, fut in zip(pages, futures):
        exc = fut.exception()
        if exc is not None:
            log.warning("Rendering page %d failed: %s", page, exc)
            raise exc
        images.append(fut.result())

    log.info(
        "Rendered %d page(s) in %.0f ms",
        len(images),
        (time.perf_counter() - t0) * 1000,
    )
    return images
