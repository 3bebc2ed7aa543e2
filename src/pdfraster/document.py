"""PdfDocument: the public entry point.

A :class:`PdfDocument` holds the raw PDF bytes together with the page
count and encryption flag read once by ``pdfinfo`` at construction, so
repeated :meth:`~PdfDocument.render` calls never re-run it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from PIL import Image

from .config import RenderConfig
from .errors import PopplerIOError
from .info import PdfInfo, extract_pdf_info
from .pages import Pages, resolve_pages
from .process import ToolRunner, run_tool
from .render import render_pages

log = logging.getLogger(__name__)


class PdfDocument:
    """A PDF file ready to be rendered.

    Usage::

        doc = PdfDocument.from_file("plans.pdf")
        images = doc.render(Pages.range(1, 8), RenderConfig(resolution=300))
    """

    def __init__(
        self, data: bytes, info: PdfInfo, runner: ToolRunner = run_tool
    ) -> None:
        self._data = bytes(data)
        self._info = info
        self._runner = runner

    @classmethod
    def from_bytes(cls, data: bytes, runner: ToolRunner = run_tool) -> "PdfDocument":
        """Construct from in-memory PDF bytes."""
        info = extract_pdf_info(data, runner=runner)
        log.info(
            "Loaded PDF: %d pages, %.1f KB%s",
            info.page_count,
            len(data) / 1024,
            ", encrypted" if info.encrypted else "",
        )
        return cls(data, info, runner)

    @classmethod
    def from_file(
        cls, path: Path | str, runner: ToolRunner = run_tool
    ) -> "PdfDocument":
        """Construct from a PDF file on disk.

        Raises
        ------
        PopplerIOError
            When the file cannot be read.
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise PopplerIOError(f"Cannot read {path}: {exc}") from exc
        log.debug("Read %s (%d bytes)", path, len(data))
        return cls.from_bytes(data, runner=runner)

    # ── Properties ────────────────────────────────────────────────────

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def info(self) -> PdfInfo:
        return self._info

    @property
    def page_count(self) -> int:
        return self._info.page_count

    @property
    def is_encrypted(self) -> bool:
        return self._info.encrypted

    def __repr__(self) -> str:
        return (
            f"PdfDocument(page_count={self.page_count}, "
            f"encrypted={self.is_encrypted}, size={len(self._data)})"
        )

    # ── Rendering ─────────────────────────────────────────────────────

    def render(
        self,
        pages: Optional[Pages] = None,
        config: Optional[RenderConfig] = None,
    ) -> List[Image.Image]:
        """Render the selected pages (all pages by default) to images."""
        if pages is None:
            pages = Pages.all()
        page_numbers = resolve_pages(pages, self.page_count)
        return render_pages(
            self._data,
            page_numbers,
            config,
            encrypted=self.is_encrypted,
            runner=self._runner,
        )

    def render_page(
        self, page: int, config: Optional[RenderConfig] = None
    ) -> Image.Image:
        """Render a single 1-based *page*."""
        return self.render(Pages.single(page), config)[0]
