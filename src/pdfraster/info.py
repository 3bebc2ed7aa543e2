"""Document info: page count and encryption status via ``pdfinfo``.

``pdfinfo -`` reads the PDF from stdin and prints ``Key: value`` lines::

    Title:          Site plan
    Pages:          12
    Encrypted:      no
    Page size:      612 x 792 pts (letter)

Only ``Pages`` and ``Encrypted`` are required; the remaining lines are
kept in :attr:`PdfInfo.fields` for callers that want them.

Public API
----------
- :func:`extract_pdf_info`: run pdfinfo on PDF bytes, return :class:`PdfInfo`
- :func:`parse_pdf_info`: parse captured pdfinfo stdout
- :class:`PdfInfo`: page count, encryption flag, raw fields
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import (
    OutputDecodeError,
    PageCountParseError,
    UnableToExtractEncryptionStatus,
    UnableToExtractPageCount,
)
from .process import ToolRunner, run_tool
from .tools import PDFINFO, get_executable_path

log = logging.getLogger(__name__)

_PAGES_LABEL = b"Pages:"
_ENCRYPTED_LABEL = b"Encrypted:"
_UNSIGNED_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class PdfInfo:
    """Result of :func:`extract_pdf_info`."""

    page_count: int
    encrypted: bool
    fields: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        d: dict = {"page_count": self.page_count, "encrypted": self.encrypted}
        if self.fields:
            d["fields"] = dict(self.fields)
        return d


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _find_line(lines: List[bytes], label: bytes) -> Optional[bytes]:
    for line in lines:
        if line.startswith(label):
            return line
    return None


def _decode_line(line: bytes) -> str:
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise OutputDecodeError(f"pdfinfo output is not valid UTF-8: {line!r}") from exc


def _last_token(text: str) -> str:
    tokens = text.split()
    return tokens[-1] if tokens else ""


def _parse_page_count(lines: List[bytes]) -> int:
    line = _find_line(lines, _PAGES_LABEL)
    if line is None:
        raise UnableToExtractPageCount("pdfinfo output has no 'Pages:' line")
    token = _last_token(_decode_line(line))
    if not _UNSIGNED_RE.fullmatch(token):
        raise PageCountParseError(f"Cannot parse page count from {token!r}")
    return int(token)


def _parse_encrypted(lines: List[bytes]) -> bool:
    line = _find_line(lines, _ENCRYPTED_LABEL)
    if line is None:
        raise UnableToExtractEncryptionStatus(
            "pdfinfo output has no 'Encrypted:' line"
        )
    value = _last_token(_decode_line(line))
    if value == "yes":
        return True
    if value == "no":
        return False
    raise UnableToExtractEncryptionStatus(
        f"Unexpected value for Encrypted: {value!r}"
    )


def _parse_fields(lines: List[bytes]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for line in lines:
        text = line.decode("utf-8", errors="replace").rstrip("\r")
        key, sep, value = text.partition(":")
        if not sep or not key.strip():
            continue
        fields.setdefault(key.strip(), value.strip())
    return fields


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_pdf_info(stdout: bytes) -> PdfInfo:
    """Parse the stdout of ``pdfinfo`` into a :class:`PdfInfo`.

    Raises
    ------
    UnableToExtractPageCount
        No line starts with ``Pages:``.
    PageCountParseError
        The last token of the ``Pages:`` line is not an unsigned integer.
    UnableToExtractEncryptionStatus
        No ``Encrypted:`` line, or its last token is not ``yes``/``no``.
    OutputDecodeError
        One of those lines is not valid UTF-8.
    """
    lines = stdout.split(b"\n")
    page_count = _parse_page_count(lines)
    encrypted = _parse_encrypted(lines)
    return PdfInfo(
        page_count=page_count,
        encrypted=encrypted,
        fields=_parse_fields(lines),
    )


def extract_pdf_info(data: bytes, runner: ToolRunner = run_tool) -> PdfInfo:
    """Run ``pdfinfo -`` on *data* and parse its report."""
    result = runner(get_executable_path(PDFINFO), ["-"], data)
    if not result.ok:
        log.debug(
            "pdfinfo exited with status %d: %s",
            result.returncode,
            result.stderr_tail(),
        )
    info = parse_pdf_info(result.stdout)
    log.debug(
        "pdfinfo: %d pages, encrypted=%s", info.page_count, info.encrypted
    )
    return info
