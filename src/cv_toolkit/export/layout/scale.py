"""
Module: export.layout.scale

Purpose:
    Resolve the single pixel-to-output-unit scale for a surface and page
    format under the fit-width policy: the scaled surface fills the page
    width exactly, so only its height decides the page count.

Key Functions:
    - resolve_scale(): Fit-width scale for a surface/page-format pair
    - surface_dimensions(): Normalise a Surface or (w, h) pair

Used By:
    - export.controller: Paginating phase
"""

from __future__ import annotations

import logging
from typing import Tuple, Union

from cv_toolkit.core.models import PageFormat, Surface

from ..errors import InvalidSurface

logger = logging.getLogger(__name__)

SurfaceLike = Union[Surface, Tuple[int, int]]


def surface_dimensions(surface: SurfaceLike) -> Tuple[int, int]:
    """Return (width_px, height_px) for a Surface or a size pair."""
    if isinstance(surface, Surface):
        return surface.size
    width_px, height_px = surface
    return int(width_px), int(height_px)


def resolve_scale(surface: SurfaceLike, page_format: PageFormat) -> float:
    """
    Compute output units per source pixel.

    Args:
        surface: Captured surface or its (width_px, height_px)
        page_format: Target page format

    Returns:
        ``page_format.width_units / width_px``

    Raises:
        InvalidSurface: If width or height is zero

    Example:
        >>> resolve_scale((1000, 4500), PageFormat(210, 297))
        0.21
    """
    width_px, height_px = surface_dimensions(surface)
    if width_px <= 0 or height_px <= 0:
        raise InvalidSurface(
            f"Surface must have non-zero dimensions, got {width_px}x{height_px}px"
        )

    scale = page_format.width_units / width_px
    logger.debug(
        f"Resolved scale {scale:.6f} {page_format.unit}/px for "
        f"{width_px}x{height_px}px surface"
    )
    return scale
