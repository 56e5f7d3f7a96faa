"""
Module: export.config

Purpose:
    Configuration dataclass for the export pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - ExportConfig: Page format, naming, resampling and locking options

Dependencies:
    - dataclasses (std)
    - PIL.ImageColor: Background colour validation

Used By:
    - export.controller: Export orchestration
    - export.assembly: Page canvas rendering
    - cli: Flag mapping
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from PIL import Image, ImageColor

from cv_toolkit.core.models import PageFormat

DEFAULT_NAME_SUFFIX = "_CV"

RESAMPLE_FILTERS = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
}


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration for exporting a document (immutable).

    Attributes:
        page_format: Target page format (default A4 portrait)
        name_suffix: Suffix appended to the suggested file name
        output_dpi: Resample page canvases to this DPI (None keeps source pixels)
        resample: Resampling filter name ("bilinear" or "nearest")
        workers: Threads used to render pages (output order is unchanged)
        lock_dir: Directory for cross-process per-document lock files
        background: Page background colour

    Example:
        >>> config = ExportConfig(output_dpi=150)
        >>> config.page_format.height_units
        297.0
    """

    page_format: PageFormat = field(default_factory=PageFormat)
    name_suffix: str = DEFAULT_NAME_SUFFIX
    output_dpi: Optional[int] = None
    resample: str = "bilinear"
    workers: int = 1
    lock_dir: Optional[Path] = None
    background: str = "#ffffff"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.output_dpi is not None and self.output_dpi <= 0:
            raise ValueError(f"output_dpi must be positive: {self.output_dpi}")
        if self.resample not in RESAMPLE_FILTERS:
            raise ValueError(
                f"resample must be one of {sorted(RESAMPLE_FILTERS)}: {self.resample!r}"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1: {self.workers}")
        try:
            ImageColor.getrgb(self.background)
        except ValueError as e:
            raise ValueError(f"Invalid background colour {self.background!r}") from e

    @property
    def resample_filter(self) -> Image.Resampling:
        """PIL resampling filter for ``resample``."""
        return RESAMPLE_FILTERS[self.resample]

    @property
    def background_rgb(self) -> tuple:
        """Background colour as an (r, g, b) tuple."""
        return ImageColor.getrgb(self.background)[:3]
