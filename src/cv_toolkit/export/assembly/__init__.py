"""
Module: export.assembly

Purpose:
    Page assembly: renders every slice of a pagination plan onto its own
    page canvas, in order.

Key Functions:
    - assemble(): Render all pages
    - iter_pages(): Render pages lazily, in order

Key Classes:
    - CancellationToken: Cooperative cancellation between slices
"""

from .assembler import assemble, iter_pages, render_page
from .cancellation import CancellationToken

__all__ = [
    "assemble",
    "iter_pages",
    "render_page",
    "CancellationToken",
]
