"""
Module: page_format

Purpose:
    Target page dimensions in output units. Constant for a given export;
    defaults to A4 portrait (210x297 mm).

Key Classes:
    - PageFormat: Page width/height in a physical unit

Dependencies:
    - reportlab.lib.units: Unit to PDF point conversion

Used By:
    - export.layout: Scale resolution and pagination
    - export.output.writer: PDF page sizing
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from reportlab.lib.units import cm, inch, mm

# Width x height in millimetres, portrait orientation
PAGE_PRESETS_MM: Dict[str, Tuple[float, float]] = {
    "a3": (297.0, 420.0),
    "a4": (210.0, 297.0),
    "a5": (148.0, 210.0),
    "letter": (215.9, 279.4),
    "legal": (215.9, 355.6),
}

# PDF points per unit
UNIT_POINTS: Dict[str, float] = {
    "mm": mm,
    "cm": cm,
    "in": inch,
    "pt": 1.0,
}


@dataclass(frozen=True, slots=True)
class PageFormat:
    """
    Output page dimensions (immutable).

    Attributes:
        width_units: Page width in ``unit``
        height_units: Page height in ``unit``
        unit: One of "mm", "cm", "in", "pt"

    Example:
        >>> PageFormat().width_units
        210.0
        >>> PageFormat.from_name("a4", landscape=True).width_units
        297.0
    """

    width_units: float = 210.0
    height_units: float = 297.0
    unit: str = "mm"

    def __post_init__(self) -> None:
        """Validate format on construction."""
        if self.width_units <= 0:
            raise ValueError(f"width_units must be positive: {self.width_units}")
        if self.height_units <= 0:
            raise ValueError(f"height_units must be positive: {self.height_units}")
        if self.unit not in UNIT_POINTS:
            raise ValueError(
                f"Unknown unit {self.unit!r}; expected one of {sorted(UNIT_POINTS)}"
            )

    @classmethod
    def from_name(cls, name: str, *, landscape: bool = False) -> "PageFormat":
        """
        Build a format from a named preset.

        Raises:
            ValueError: If the preset is unknown
        """
        key = name.strip().lower()
        if key not in PAGE_PRESETS_MM:
            raise ValueError(
                f"Unknown page format {name!r}; expected one of {sorted(PAGE_PRESETS_MM)}"
            )
        width, height = PAGE_PRESETS_MM[key]
        page_format = cls(width_units=width, height_units=height, unit="mm")
        return page_format.landscape() if landscape else page_format

    def landscape(self) -> "PageFormat":
        """Return the same format with width and height swapped."""
        return PageFormat(self.height_units, self.width_units, self.unit)

    @property
    def points_per_unit(self) -> float:
        """PDF points per output unit."""
        return UNIT_POINTS[self.unit]

    def to_points(self) -> Tuple[float, float]:
        """Page size in PDF points (1/72 inch)."""
        factor = self.points_per_unit
        return (self.width_units * factor, self.height_units * factor)
