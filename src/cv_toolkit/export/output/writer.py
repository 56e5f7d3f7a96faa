"""
Module: export.output.writer

Purpose:
    Document writers accept ordered pages and return the finished file
    as bytes. PdfDocumentWriter renders one PDF page per Page using
    ReportLab, with the page bitmap stretched over the full page.

Key Classes:
    - DocumentWriter: Writer protocol
    - PdfDocumentWriter: ReportLab implementation

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling

Used By:
    - export.controller: Assembling phase
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, Protocol

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from cv_toolkit.core.models import Page
from cv_toolkit.core.models.page_format import UNIT_POINTS

from ..errors import AssemblyFailed

logger = logging.getLogger(__name__)


class DocumentWriter(Protocol):
    """Accepts ordered pages and returns the finished document."""

    extension: str

    def write(self, pages: Iterable[Page], suggested_name: str) -> bytes:
        ...


class PdfDocumentWriter:
    """
    Write pages to a PDF with ReportLab.

    Pages are drawn in iteration order; each becomes exactly one PDF
    page sized from its own units.

    Example:
        >>> data = PdfDocumentWriter().write(pages, "Jane_Doe_CV")
        >>> data[:5]
        b'%PDF-'
    """

    extension = ".pdf"

    def __init__(self, *, image_format: str = "PNG", author: str = "") -> None:
        self.image_format = image_format
        self.author = author

    def write(self, pages: Iterable[Page], suggested_name: str) -> bytes:
        """
        Render pages to PDF bytes.

        Raises:
            AssemblyFailed: If no pages are given or ReportLab fails
        """
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer)
        pdf.setTitle(suggested_name)
        if self.author:
            pdf.setAuthor(self.author)

        count = 0
        try:
            for page in pages:
                if page.index != count:
                    raise AssemblyFailed(
                        f"Pages out of order: expected page {count}, got {page.index}"
                    )
                self._draw_page(pdf, page)
                pdf.showPage()
                count += 1

            if count == 0:
                raise AssemblyFailed("Cannot write a document with no pages")

            pdf.save()
        except AssemblyFailed:
            raise
        except (OSError, ValueError) as e:
            raise AssemblyFailed(f"Failed to write PDF {suggested_name!r}: {e}") from e

        logger.info(f"Wrote {count} page(s) to PDF {suggested_name!r}")
        return buffer.getvalue()

    def _draw_page(self, pdf: canvas.Canvas, page: Page) -> None:
        """
        Size the current PDF page and draw the page bitmap at its own
        extent, anchored to the top-left corner.

        Anything past the page edge is clipped.
        """
        factor = UNIT_POINTS[page.unit]
        width_pt = page.width_units * factor
        height_pt = page.height_units * factor
        drawn_width_pt = page.drawn_width_units * factor
        drawn_height_pt = page.drawn_height_units * factor

        pdf.setPageSize((width_pt, height_pt))
        pdf.saveState()
        clip = pdf.beginPath()
        clip.rect(0, 0, width_pt, height_pt)
        pdf.clipPath(clip, stroke=0, fill=0)
        # PDF origin is bottom-left; keep the bitmap top on the page top
        pdf.drawImage(
            _pil_to_reader(page.bitmap, self.image_format),
            0,
            height_pt - drawn_height_pt,
            width=drawn_width_pt,
            height=drawn_height_pt,
        )
        pdf.restoreState()


def _pil_to_reader(img: Image.Image, image_format: str = "PNG") -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object
        image_format: Encoding used inside the PDF

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    img.save(buf, format=image_format)
    buf.seek(0)
    return ImageReader(buf)
