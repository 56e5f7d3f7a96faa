"""
Tests for the ReportLab document writer.

Generated PDFs are inspected with PyMuPDF.
"""

import fitz
import pytest
from PIL import Image

from cv_toolkit.core.models import Page, PageSlice
from cv_toolkit.export.errors import AssemblyFailed
from cv_toolkit.export.output import PdfDocumentWriter


# A4 dimensions in points (1/72 inch)
A4_WIDTH_PT = 595.276
A4_HEIGHT_PT = 841.890
TOLERANCE_PT = 1.0


def make_page(index: int, width_units=210.0, height_units=297.0, unit="mm") -> Page:
    return Page(
        index=index,
        width_units=width_units,
        height_units=height_units,
        bitmap=Image.new("RGB", (50, 71), (index * 40, 0, 0)),
        source_slice=PageSlice(index, index * 10, index * 10 + 10),
        unit=unit,
    )


def test_write_one_pdf_page_per_page():
    # Arrange
    pages = [make_page(i) for i in range(3)]

    # Act
    data = PdfDocumentWriter().write(pages, "Jane_Doe_CV")

    # Assert
    assert data.startswith(b"%PDF-")
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc.page_count == 3
        for page in doc:
            assert abs(page.rect.width - A4_WIDTH_PT) < TOLERANCE_PT
            assert abs(page.rect.height - A4_HEIGHT_PT) < TOLERANCE_PT
        assert doc.metadata["title"] == "Jane_Doe_CV"


def test_write_uses_each_page_size():
    pages = [make_page(0, 8.5, 11, "in")]
    data = PdfDocumentWriter().write(pages, "letter")
    with fitz.open(stream=data, filetype="pdf") as doc:
        rect = doc[0].rect
        assert (round(rect.width), round(rect.height)) == (612, 792)


def test_write_embeds_one_image_per_page():
    data = PdfDocumentWriter().write([make_page(0), make_page(1)], "cv")
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert all(len(page.get_images()) == 1 for page in doc)


def test_write_accepts_generator():
    data = PdfDocumentWriter().write((make_page(i) for i in range(2)), "cv")
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc.page_count == 2


def test_write_when_no_pages_then_assembly_failed():
    with pytest.raises(AssemblyFailed, match="no pages"):
        PdfDocumentWriter().write([], "empty")


def test_write_when_pages_out_of_order_then_assembly_failed():
    with pytest.raises(AssemblyFailed, match="expected page 1, got 2"):
        PdfDocumentWriter().write([make_page(0), make_page(2)], "cv")


def black_page(bitmap_size, content_units=None) -> Page:
    width, height = content_units or (None, None)
    return Page(
        index=0,
        width_units=210.0,
        height_units=297.0,
        bitmap=Image.new("RGB", bitmap_size, (0, 0, 0)),
        source_slice=PageSlice(0, 0, bitmap_size[1]),
        content_width_units=width,
        content_height_units=height,
    )


def test_write_draws_bitmap_at_content_extent_from_top(ink_bottom):
    # Arrange: 10x10 pixels at 21mm per pixel
    page = black_page((10, 10), content_units=(210.0, 210.0))

    # Act
    data = PdfDocumentWriter().write([page], "cv")

    # Assert
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert ink_bottom(doc[0]) == pytest.approx(210.0, abs=1.0)


def test_write_clips_content_below_page_edge(ink_bottom):
    page = black_page((10, 15), content_units=(210.0, 315.0))

    data = PdfDocumentWriter().write([page], "cv")

    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc.page_count == 1
        assert ink_bottom(doc[0]) == pytest.approx(297.0, abs=1.0)


def test_write_without_content_extent_fills_page(ink_bottom):
    data = PdfDocumentWriter().write([black_page((10, 10))], "cv")
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert ink_bottom(doc[0]) == pytest.approx(297.0, abs=1.0)
