"""Tests for pdfraster.document: PdfDocument construction and rendering."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from conftest import FakeRunner, make_pdfinfo_output, page_from_args

from pdfraster import Pages, PdfDocument, RenderConfig
from pdfraster.config import Password
from pdfraster.errors import (
    ImageDecodeError,
    NoPasswordForEncryptedPdf,
    PopplerIOError,
    UnableToExtractPageCount,
)


class TestConstruction:
    def test_from_bytes(self, pdf_bytes):
        runner = FakeRunner(info_stdout=make_pdfinfo_output(pages=7))
        doc = PdfDocument.from_bytes(pdf_bytes, runner=runner)
        assert doc.page_count == 7
        assert doc.is_encrypted is False
        assert doc.data == pdf_bytes
        assert doc.info.fields["Producer"] == "Test Suite"

    def test_from_file(self, tmp_path, pdf_bytes):
        f = tmp_path / "plan.pdf"
        f.write_bytes(pdf_bytes)
        runner = FakeRunner()
        doc = PdfDocument.from_file(f, runner=runner)
        assert doc.data == pdf_bytes
        assert runner.calls[0][2] == pdf_bytes

    def test_from_file_string_path(self, tmp_path, pdf_bytes):
        f = tmp_path / "plan.pdf"
        f.write_bytes(pdf_bytes)
        doc = PdfDocument.from_file(str(f), runner=FakeRunner())
        assert doc.page_count == 3

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(PopplerIOError, match="Cannot read"):
            PdfDocument.from_file(tmp_path / "nope.pdf", runner=FakeRunner())

    def test_info_failure_propagates(self, pdf_bytes):
        runner = FakeRunner(info_stdout=make_pdfinfo_output(pages=None))
        with pytest.raises(UnableToExtractPageCount):
            PdfDocument.from_bytes(pdf_bytes, runner=runner)

    def test_pdfinfo_runs_once(self, pdf_bytes):
        runner = FakeRunner()
        doc = PdfDocument.from_bytes(pdf_bytes, runner=runner)
        doc.render(Pages.range(1, 2))
        doc.render(Pages.single(3))
        info_calls = [c for c in runner.calls if c[0] == "pdfinfo"]
        assert len(info_calls) == 1

    def test_repr(self, pdf_bytes):
        doc = PdfDocument.from_bytes(pdf_bytes, runner=FakeRunner())
        assert "page_count=3" in repr(doc)


class TestRender:
    def test_range(self, pdf_bytes):
        runner = FakeRunner(info_stdout=make_pdfinfo_output(pages=5))
        doc = PdfDocument.from_bytes(pdf_bytes, runner=runner)
        images = doc.render(Pages.range(2, 9), RenderConfig())
        assert [img.width for img in images] == [30, 40, 50, 60]

    def test_range_outside_document_is_empty(self, pdf_bytes):
        runner = FakeRunner(info_stdout=make_pdfinfo_output(pages=2))
        doc = PdfDocument.from_bytes(pdf_bytes, runner=runner)
        assert doc.render(Pages.range(5, 8)) == []
        assert runner.render_calls == []

    def test_default_selection_is_all(self, pdf_bytes):
        runner = FakeRunner(info_stdout=make_pdfinfo_output(pages=2))
        doc = PdfDocument.from_bytes(pdf_bytes, runner=runner)
        images = doc.render()
        assert len(images) == 3  # pages 0, 1, 2
        assert sorted(page_from_args(a) for _, a, _ in runner.render_calls) == [0, 1, 2]

    def test_render_page(self, pdf_bytes):
        doc = PdfDocument.from_bytes(pdf_bytes, runner=FakeRunner())
        assert doc.render_page(2).width == 30

    def test_single_page_past_end_fails_downstream(self, pdf_bytes):
        runner = FakeRunner(fail_pages={10})
        doc = PdfDocument.from_bytes(pdf_bytes, runner=runner)
        with pytest.raises(ImageDecodeError, match="page 10"):
            doc.render(Pages.single(10))
        assert len(runner.render_calls) == 1

    def test_encrypted_requires_password(self, pdf_bytes):
        runner = FakeRunner(info_stdout=make_pdfinfo_output(encrypted="yes"))
        doc = PdfDocument.from_bytes(pdf_bytes, runner=runner)
        assert doc.is_encrypted
        with pytest.raises(NoPasswordForEncryptedPdf):
            doc.render(Pages.range(1, 3))
        assert runner.render_calls == []

    def test_encrypted_with_owner_password(self, pdf_bytes):
        runner = FakeRunner(info_stdout=make_pdfinfo_output(encrypted="yes"))
        doc = PdfDocument.from_bytes(pdf_bytes, runner=runner)
        images = doc.render(
            Pages.range(1, 3), RenderConfig(password=Password.owner("o"))
        )
        assert len(images) == 3
        assert all(args[-2:] == ["-opw", "o"] for _, args, _ in runner.render_calls)

    def test_render_forwards_document_state(self, pdf_bytes):
        runner = FakeRunner()
        doc = PdfDocument.from_bytes(pdf_bytes, runner=runner)
        with patch("pdfraster.document.render_pages", return_value=[]) as rp:
            doc.render(Pages.range(1, 2))
        args, kwargs = rp.call_args
        assert args == (pdf_bytes, [1, 2], None)
        assert kwargs == {"encrypted": False, "runner": runner}
