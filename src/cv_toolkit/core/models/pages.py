"""
Module: pages

Purpose:
    Page - one assembled output page, handed to a document writer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PIL import Image

from .slices import PageSlice


@dataclass(frozen=True)
class Page:
    """
    Assembled output page.

    ``bitmap`` is anchored at the top-left corner of the page and spans
    content_width_units x content_height_units, which is the bitmap size
    times the plan scale. It always covers the full page width and at
    least the full page height; rows below the page edge are background
    and are clipped by the writer.

    Attributes:
        index: Page number (0-indexed)
        width_units: Page width in ``unit``
        height_units: Page height in ``unit``
        bitmap: Full page canvas
        source_slice: Slice this page was rendered from
        unit: Output unit of the page dimensions
        content_width_units: Width the bitmap is drawn at
        content_height_units: Height the bitmap is drawn at
    """

    index: int
    width_units: float
    height_units: float
    bitmap: Image.Image
    source_slice: PageSlice
    unit: str = "mm"
    content_width_units: Optional[float] = None
    content_height_units: Optional[float] = None

    @property
    def drawn_width_units(self) -> float:
        """Width of the bitmap on the page (page width when unset)."""
        if self.content_width_units is None:
            return self.width_units
        return self.content_width_units

    @property
    def drawn_height_units(self) -> float:
        """Height of the bitmap on the page (page height when unset)."""
        if self.content_height_units is None:
            return self.height_units
        return self.content_height_units

    @property
    def bitmap_size(self):
        """(width, height) of the page canvas in pixels."""
        return self.bitmap.size
