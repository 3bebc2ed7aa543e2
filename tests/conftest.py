"""Shared test fixtures for pdfraster."""

from __future__ import annotations

import io
import random
import threading
import time
from typing import List, Optional, Sequence, Set, Tuple

import pytest
from PIL import Image

from pdfraster.process import ToolResult

# ── Helpers ────────────────────────────────────────────────────────────


def make_jpeg(width: int = 40, height: int = 20, color=(255, 255, 255)) -> bytes:
    """Return JPEG bytes for a solid-colour image of the given size."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=color).save(buf, format="JPEG")
    return buf.getvalue()


def make_pdfinfo_output(
    pages: Optional[int] = 3,
    encrypted: Optional[str] = "no",
    extra: Sequence[str] = (),
) -> bytes:
    """Build pdfinfo-style stdout.  ``None`` omits the line."""
    lines = ["Producer:       Test Suite", *extra]
    if pages is not None:
        lines.append(f"Pages:          {pages}")
    if encrypted is not None:
        lines.append(f"Encrypted:      {encrypted}")
    lines.append("Page size:      612 x 792 pts (letter)")
    return ("\n".join(lines) + "\n").encode("utf-8")


def page_from_args(args: Sequence[str]) -> int:
    """Return the page number selected by ``-f`` in a render command."""
    return int(args[list(args).index("-f") + 1])


class FakeRunner:
    """Stand-in for :func:`pdfraster.process.run_tool`.

    ``pdfinfo`` calls return *info_stdout*.  Render calls return a JPEG
    whose width is ``10 * page + 10`` so tests can tell pages apart, or
    garbage output for pages listed in *fail_pages*.  With *jitter* set,
    each render sleeps a random amount so completion order is shuffled.
    """

    def __init__(
        self,
        info_stdout: bytes = b"",
        fail_pages: Set[int] = frozenset(),
        jitter: float = 0.0,
        seed: int = 0,
    ) -> None:
        self.info_stdout = info_stdout or make_pdfinfo_output()
        self.fail_pages = set(fail_pages)
        self.jitter = jitter
        self._rng = random.Random(seed)
        self._lock = threading.Lock()
        self.calls: List[Tuple[str, List[str], bytes]] = []
        self.completed: List[int] = []

    @property
    def render_calls(self) -> List[Tuple[str, List[str], bytes]]:
        return [c for c in self.calls if not c[0].endswith(("pdfinfo", "pdfinfo.exe"))]

    def __call__(self, executable: str, args: Sequence[str], stdin_data: bytes) -> ToolResult:
        with self._lock:
            self.calls.append((executable, list(args), stdin_data))
            delay = self._rng.uniform(0, self.jitter) if self.jitter else 0.0
        if executable.endswith(("pdfinfo", "pdfinfo.exe")):
            return ToolResult(stdout=self.info_stdout)

        page = page_from_args(args)
        if delay:
            time.sleep(delay)
        with self._lock:
            self.completed.append(page)
        if page in self.fail_pages:
            return ToolResult(
                stdout=b"",
                stderr=f"Wrong page range given: page {page}".encode(),
                returncode=99,
            )
        return ToolResult(stdout=make_jpeg(width=10 * page + 10))


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _no_poppler_path(monkeypatch):
    """Keep a developer's poppler override from leaking into command lines."""
    monkeypatch.delenv("PDF2IMAGE_POPPLER_PATH", raising=False)


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Return a FakeRunner for a 3-page unencrypted PDF."""
    return FakeRunner()


@pytest.fixture
def pdf_bytes() -> bytes:
    """Placeholder PDF payload; FakeRunner never parses it."""
    return b"%PDF-1.4\n%%EOF\n"

