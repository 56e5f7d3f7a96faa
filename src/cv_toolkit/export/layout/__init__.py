"""
Module: export.layout

Purpose:
    Scale resolution and pagination. Converts a surface and a page format
    into an ordered PaginationPlan.

Key Functions:
    - resolve_scale(): Fit-width scale
    - paginate(): Split a surface into page bands
"""

from .scale import resolve_scale, surface_dimensions
from .paginator import paginate, page_count_for, slice_height_for

__all__ = [
    "resolve_scale",
    "surface_dimensions",
    "paginate",
    "page_count_for",
    "slice_height_for",
]
