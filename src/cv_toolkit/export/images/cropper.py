"""
Module: export.images.cropper

Purpose:
    Utilities for cutting page bands out of a surface and resampling
    page canvases. Provides cropping with bounds validation.

Key Functions:
    - crop_band(): Crop one slice's rows from a surface
    - flatten(): Composite transparency onto a background colour
    - resample_to_dpi(): Resize a page canvas for a target DPI

Dependencies:
    - PIL: Image manipulation

Used By:
    - export.assembly.assembler: Page rendering
    - export.rasterizers: Alpha flattening on capture
"""

from __future__ import annotations

from typing import Tuple

from PIL import Image

from cv_toolkit.core.models import PageSlice, Surface

from ..errors import AssemblyFailed


def crop_band(surface: Surface, page_slice: PageSlice) -> Image.Image:
    """
    Crop a slice's band from the surface.

    Args:
        surface: Source surface
        page_slice: Band to crop, rows [source_y_start, source_y_end)

    Returns:
        Cropped image (new copy, not a view), full surface width

    Raises:
        AssemblyFailed: If the band lies outside the surface

    Example:
        >>> band = crop_band(surface, PageSlice(0, 0, 1414))
        >>> band.size
        (1000, 1414)
    """
    if page_slice.source_y_end > surface.height_px:
        raise AssemblyFailed(
            f"Slice {page_slice.index} ends at row {page_slice.source_y_end}, "
            f"surface is {surface.height_px}px tall"
        )
    if surface.width_px <= 0:
        raise AssemblyFailed(f"Slice {page_slice.index} has no columns to crop")

    box = (0, page_slice.source_y_start, surface.width_px, page_slice.source_y_end)
    return surface.image.crop(box)


def flatten(image: Image.Image, background: Tuple[int, int, int]) -> Image.Image:
    """
    Return an RGB copy of ``image`` with any transparency composited
    onto ``background``.
    """
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        canvas = Image.new("RGB", rgba.size, background)
        canvas.paste(rgba, mask=rgba.getchannel("A"))
        return canvas
    if image.mode != "RGB":
        return image.convert("RGB")
    return image.copy()


def target_size_for_dpi(
    width_units: float,
    height_units: float,
    points_per_unit: float,
    dpi: int,
) -> Tuple[int, int]:
    """Pixel size of a page of the given dimensions rendered at ``dpi``."""
    inches_per_unit = points_per_unit / 72.0
    return (
        max(1, round(width_units * inches_per_unit * dpi)),
        max(1, round(height_units * inches_per_unit * dpi)),
    )


def resample_to_dpi(
    canvas: Image.Image,
    size: Tuple[int, int],
    resample: Image.Resampling,
) -> Image.Image:
    """Resize ``canvas`` to ``size`` (no-op when already that size)."""
    if canvas.size == size:
        return canvas
    return canvas.resize(size, resample=resample)
