"""Exception hierarchy for pdfraster.

Every failure the package can report derives from :class:`PdfRasterError`
so callers can catch one type.  Lower-level causes (``OSError``,
``UnicodeDecodeError``, Pillow errors) are chained with ``raise ... from``.
"""

from __future__ import annotations


class PdfRasterError(Exception):
    """Base class for every pdfraster error."""


class PopplerIOError(PdfRasterError):
    """Spawning, writing to, or waiting on an external tool failed."""


class OutputDecodeError(PdfRasterError):
    """Tool output was expected to be text but is not valid UTF-8."""


class PageCountParseError(PdfRasterError):
    """The ``Pages:`` value reported by pdfinfo is not an unsigned integer."""


class ImageDecodeError(PdfRasterError):
    """Renderer output could not be decoded as a JPEG image."""


class ConfigValidationError(PdfRasterError, ValueError):
    """Raised when a RenderConfig field has an invalid value."""


class NoPasswordForEncryptedPdf(PdfRasterError):
    """An encrypted PDF was rendered without a password."""

    def __init__(self, message: str = "No password given for encrypted PDF") -> None:
        super().__init__(message)


class UnableToExtractPageCount(PdfRasterError):
    """pdfinfo output has no ``Pages:`` line."""


class UnableToExtractEncryptionStatus(PdfRasterError):
    """pdfinfo output has no usable ``Encrypted:`` line."""
