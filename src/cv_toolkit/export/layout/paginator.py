"""
Module: export.layout.paginator

Purpose:
    Partition a surface's vertical extent into page-sized bands.

Key Functions:
    - paginate(): Build the PaginationPlan for a surface
    - slice_height_for(): Full page band height in source pixels
    - page_count_for(): Number of pages a surface height needs

Algorithm:
    1. band = floor(page height / scale); fail if band < 1
    2. Walk position from 0 to surface height in steps of band
    3. Each step emits [position, min(position + band, height))
    4. The final band may be shorter, never empty

Dependencies:
    - export.layout.scale: Surface dimension handling

Used By:
    - export.controller: Paginating phase
"""

from __future__ import annotations

import logging
import math
from typing import List

from cv_toolkit.core.models import PageFormat, PageSlice, PaginationPlan

from ..errors import DegenerateScale, InvalidSurface
from .scale import SurfaceLike, surface_dimensions

logger = logging.getLogger(__name__)

# Absorbs float noise such as 0.3 / 0.1 == 2.9999999999999996
_FLOOR_EPSILON = 1e-9


def slice_height_for(page_format: PageFormat, scale: float) -> int:
    """
    Height of one full page band in source pixels.

    This is floor(height_units / scale) evaluated with a 1e-9 relative
    tolerance, so a quotient such as 2.9999999999999996 counts as 3.
    The page count ceil(height_px / band) inherits the same tolerance.

    Raises:
        DegenerateScale: If the band is shorter than one pixel
    """
    if scale <= 0 or not math.isfinite(scale):
        raise DegenerateScale(f"Scale must be a positive finite number: {scale}")

    ratio = page_format.height_units / scale
    band = math.floor(ratio * (1 + _FLOOR_EPSILON))
    if band < 1:
        raise DegenerateScale(
            f"Page height {page_format.height_units}{page_format.unit} at scale "
            f"{scale} is {ratio:.4f}px; a page needs at least one source row"
        )
    return band


def page_count_for(height_px: int, slice_height_px: int) -> int:
    """Number of pages needed to cover ``height_px`` rows."""
    return math.ceil(height_px / slice_height_px)


def paginate(
    surface: SurfaceLike,
    page_format: PageFormat,
    scale: float,
) -> PaginationPlan:
    """
    Split a surface into contiguous page bands.

    Pure and deterministic: identical dimensions, format and scale
    always produce an identical plan.

    Args:
        surface: Surface or its (width_px, height_px)
        page_format: Target page format
        scale: Output units per source pixel (see resolve_scale)

    Returns:
        PaginationPlan covering [0, height_px) exactly once

    Raises:
        InvalidSurface: If the surface has a zero dimension
        DegenerateScale: If a page band rounds to zero pixels

    Example:
        >>> plan = paginate((1000, 4500), PageFormat(210, 297), 0.21)
        >>> [(s.source_y_start, s.source_y_end) for s in plan]
        [(0, 1414), (1414, 2828), (2828, 4242), (4242, 4500)]
    """
    width_px, height_px = surface_dimensions(surface)
    if width_px <= 0 or height_px <= 0:
        raise InvalidSurface(
            f"Surface must have non-zero dimensions, got {width_px}x{height_px}px"
        )

    band = slice_height_for(page_format, scale)

    slices: List[PageSlice] = []
    position = 0
    index = 0
    while position < height_px:
        end = min(position + band, height_px)
        slices.append(PageSlice(
            index=index,
            source_y_start=position,
            source_y_end=end,
            dest_x=0.0,
            dest_y=0.0,
        ))
        logger.debug(f"Slice {index}: rows [{position}, {end})")
        position = end
        index += 1

    plan = PaginationPlan(
        slices=tuple(slices),
        scale=scale,
        page_format=page_format,
        surface_width_px=width_px,
        surface_height_px=height_px,
        slice_height_px=band,
    )
    logger.info(
        f"Paginated {width_px}x{height_px}px surface onto {plan.page_count} "
        f"page(s) of {band}px"
    )
    return plan
