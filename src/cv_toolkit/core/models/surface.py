"""
Module: surface

Purpose:
    Provides the Surface dataclass - an immutable rasterized snapshot of a
    document's visual content. Surfaces are produced by a rasterizer and
    owned by exactly one in-flight export.

Key Functions:
    - Surface.from_image(image): Snapshot a PIL image
    - Surface.from_array(array): Snapshot a numpy pixel array

Dependencies:
    - PIL.Image: Pixel storage
    - numpy: Array conversion

Used By:
    - export.rasterizers: Capture boundary
    - export.layout: Scale resolution and pagination
    - export.assembly: Band extraction
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image


@dataclass(frozen=True)
class Surface:
    """
    Rasterized document snapshot (immutable).

    The wrapped image is a private copy; callers must not mutate
    ``image`` after construction.

    Dimensions are not validated here. A zero-sized surface is a legal
    snapshot that the scale resolver rejects with InvalidSurface.

    Attributes:
        image: Pixel buffer

    Example:
        >>> surface = Surface.from_image(Image.new("RGB", (1000, 4500), "white"))
        >>> surface.size
        (1000, 4500)
    """

    image: Image.Image

    @classmethod
    def from_image(cls, image: Image.Image) -> "Surface":
        """Snapshot a PIL image (the surface owns a copy)."""
        return cls(image=image.copy())

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Surface":
        """
        Snapshot a numpy pixel array.

        Args:
            array: HxW (grayscale) or HxWxC (RGB/RGBA) array

        Returns:
            Surface backed by a uint8 image

        Raises:
            ValueError: If the array is not 2- or 3-dimensional
        """
        if array.ndim not in (2, 3):
            raise ValueError(f"Expected a 2D or 3D pixel array, got {array.ndim}D")
        if array.dtype != np.uint8:
            array = np.clip(array, 0, 255).astype(np.uint8)
        return cls(image=Image.fromarray(array))

    @property
    def width_px(self) -> int:
        """Width in pixels."""
        return self.image.width

    @property
    def height_px(self) -> int:
        """Height in pixels."""
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        """(width_px, height_px)."""
        return (self.image.width, self.image.height)

    @property
    def mode(self) -> str:
        """PIL colour mode of the pixel buffer."""
        return self.image.mode
