"""
Module: export.rasterizers

Purpose:
    Capture boundary of the export pipeline. A rasterizer turns a
    document view into an immutable Surface in one shot; the pipeline
    never holds a live reference to the view.

Key Classes:
    - Rasterizer: Capture protocol
    - ImageRasterizer: View is an image file or PIL image
    - PdfRasterizer: View is a PDF; pages are stitched into one surface

Key Functions:
    - capture_surface(): Run a rasterizer and map failures to CaptureFailed

Dependencies:
    - PIL.Image: Image loading and stitching
    - fitz (PyMuPDF): PDF rendering

Used By:
    - export.controller: Capturing phase
    - cli: Input selection
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Protocol, Union

import fitz
from PIL import Image, ImageColor

from cv_toolkit.core.models import Surface

from .errors import CaptureFailed
from .images.cropper import flatten

logger = logging.getLogger(__name__)

# Matches the 2x device scale the web export captured at
DEFAULT_ZOOM = 2.0


class Rasterizer(Protocol):
    """Produces a Surface from a document view."""

    def capture(self, view: Any) -> Surface:
        ...


class ImageRasterizer:
    """
    Capture an image file (or an in-memory PIL image) as a surface.

    Transparent pixels are composited onto ``background``.

    Example:
        >>> surface = ImageRasterizer().capture(Path("cv.png"))
    """

    def __init__(self, *, background: str = "#ffffff") -> None:
        self.background = ImageColor.getrgb(background)[:3]

    def capture(self, view: Union[str, Path, Image.Image]) -> Surface:
        if isinstance(view, Image.Image):
            return Surface(image=flatten(view, self.background))

        path = Path(view)
        with Image.open(path) as img:
            img.load()
            surface = Surface(image=flatten(img, self.background))
        logger.debug(f"Captured {path.name}: {surface.width_px}x{surface.height_px}px")
        return surface


class PdfRasterizer:
    """
    Render every page of a PDF and stitch them into one tall surface.

    Pages narrower than the widest page are left-aligned on a white
    background.

    Attributes:
        zoom: Render scale relative to 72 DPI
    """

    def __init__(self, *, zoom: float = DEFAULT_ZOOM, background: str = "#ffffff") -> None:
        if zoom <= 0:
            raise ValueError(f"zoom must be positive: {zoom}")
        self.zoom = zoom
        self.background = ImageColor.getrgb(background)[:3]

    def capture(self, view: Union[str, Path]) -> Surface:
        path = Path(view)
        matrix = fitz.Matrix(self.zoom, self.zoom)

        segments: List[Image.Image] = []
        with fitz.open(path) as doc:
            for page in doc:
                pix = page.get_pixmap(matrix=matrix, alpha=False)
                segments.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))

        if not segments:
            raise CaptureFailed(f"{path.name} has no pages to rasterize")

        total_height = sum(s.height for s in segments)
        max_width = max(s.width for s in segments)
        composite = Image.new("RGB", (max_width, total_height), self.background)

        y_offset = 0
        for segment in segments:
            composite.paste(segment, (0, y_offset))
            y_offset += segment.height

        logger.debug(
            f"Captured {len(segments)} PDF page(s) from {path.name}: "
            f"{max_width}x{total_height}px"
        )
        return Surface(image=composite)


def capture_surface(rasterizer: Rasterizer, view: Any) -> Surface:
    """
    Capture a surface, mapping any rasterizer error to CaptureFailed.

    Raises:
        CaptureFailed: If the rasterizer raises, returns nothing, or
            returns something other than a Surface backed by an image
    """
    try:
        surface = rasterizer.capture(view)
    except CaptureFailed:
        raise
    except Exception as e:
        raise CaptureFailed(f"Rasterizer failed: {e}") from e

    if surface is None:
        raise CaptureFailed("Rasterizer returned no surface")
    if not isinstance(surface, Surface):
        raise CaptureFailed(
            f"Rasterizer returned {type(surface).__name__}, expected Surface"
        )
    if not isinstance(surface.image, Image.Image):
        raise CaptureFailed(
            f"Rasterizer returned a Surface over {type(surface.image).__name__}, "
            f"expected a PIL image"
        )
    return surface
