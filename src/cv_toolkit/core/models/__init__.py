"""
Module: core.models

Purpose:
    Data models flowing through the export pipeline:
    Surface + PageFormat -> Scale -> PaginationPlan -> Pages.

Key Classes:
    - Surface: Immutable rasterized snapshot of a document
    - PageFormat: Target page dimensions in output units
    - PageSlice: Vertical pixel band destined for one page
    - PaginationPlan: Ordered slices covering a surface
    - Page: Assembled page bitmap ready for a writer
"""

from .surface import Surface
from .page_format import PageFormat, PAGE_PRESETS_MM
from .slices import PageSlice, PaginationPlan
from .pages import Page

__all__ = [
    "Surface",
    "PageFormat",
    "PAGE_PRESETS_MM",
    "PageSlice",
    "PaginationPlan",
    "Page",
]
