"""Render PDF pages to images with the poppler command-line tools.

Frequently-used symbols are re-exported here for convenience::

    from pdfraster import Pages, PdfDocument, RenderConfig

    doc = PdfDocument.from_file("plans.pdf")
    images = doc.render(Pages.range(1, 8), RenderConfig(resolution=300))

``pdfinfo``, ``pdftoppm`` and ``pdftocairo`` must be on ``PATH`` or in
the directory named by the ``PDF2IMAGE_POPPLER_PATH`` environment variable.
"""

# ── Configuration ─────────────────────────────────────────────────────

from .args import to_cli_args, tool_prefix_args
from .config import (
    Crop,
    Dpi,
    Password,
    PasswordKind,
    RenderConfig,
    RenderTool,
    Scale,
)

# ── Documents & rendering ─────────────────────────────────────────────

from .document import PdfDocument
from .info import PdfInfo, extract_pdf_info, parse_pdf_info
from .pages import Pages, PageSelectionKind, resolve_pages
from .process import ToolResult, ToolRunner, run_tool
from .render import decode_jpeg, render_pages

# ── Errors ────────────────────────────────────────────────────────────

from .errors import (
    ConfigValidationError,
    ImageDecodeError,
    NoPasswordForEncryptedPdf,
    OutputDecodeError,
    PageCountParseError,
    PdfRasterError,
    PopplerIOError,
    UnableToExtractEncryptionStatus,
    UnableToExtractPageCount,
)

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "Crop",
    "Dpi",
    "Password",
    "PasswordKind",
    "RenderConfig",
    "RenderTool",
    "Scale",
    "to_cli_args",
    "tool_prefix_args",
    # Documents & rendering
    "PdfDocument",
    "PdfInfo",
    "extract_pdf_info",
    "parse_pdf_info",
    "Pages",
    "PageSelectionKind",
    "resolve_pages",
    "ToolResult",
    "ToolRunner",
    "run_tool",
    "decode_jpeg",
    "render_pages",
    # Errors
    "ConfigValidationError",
    "ImageDecodeError",
    "NoPasswordForEncryptedPdf",
    "OutputDecodeError",
    "PageCountParseError",
    "PdfRasterError",
    "PopplerIOError",
    "UnableToExtractEncryptionStatus",
    "UnableToExtractPageCount",
]
