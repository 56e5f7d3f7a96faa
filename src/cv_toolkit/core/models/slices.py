"""
Module: slices

Purpose:
    Provides PageSlice and PaginationPlan - the output of the paginator.
    A plan is an ordered, contiguous partition of a surface's vertical
    extent into page-sized bands.

Key Classes:
    - PageSlice: [source_y_start, source_y_end) band for one page
    - PaginationPlan: Ordered slices covering [0, surface_height_px)

Dependencies:
    - dataclasses (std)

Used By:
    - export.layout.paginator: Builds plans
    - export.assembly.assembler: Renders one page per slice
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from .page_format import PageFormat


@dataclass(frozen=True, slots=True)
class PageSlice:
    """
    Vertical pixel band of a surface destined for one output page.

    The band is [source_y_start, source_y_end) x [0, surface width).
    ``dest_x``/``dest_y`` are the placement on the page in output units.

    Invariants:
        - index >= 0
        - 0 <= source_y_start < source_y_end

    Example:
        >>> s = PageSlice(index=3, source_y_start=4242, source_y_end=4500)
        >>> s.height_px
        258
    """

    index: int
    source_y_start: int
    source_y_end: int
    dest_x: float = 0.0
    dest_y: float = 0.0

    def __post_init__(self) -> None:
        """Validate slice on construction."""
        if self.index < 0:
            raise ValueError(f"index must be >= 0: {self.index}")
        if self.source_y_start < 0:
            raise ValueError(f"source_y_start must be >= 0: {self.source_y_start}")
        if self.source_y_end <= self.source_y_start:
            raise ValueError(
                f"source_y_end must be > source_y_start: "
                f"{self.source_y_end} <= {self.source_y_start}"
            )

    @property
    def height_px(self) -> int:
        """Band height in source pixels."""
        return self.source_y_end - self.source_y_start


@dataclass(frozen=True)
class PaginationPlan:
    """
    Ordered sequence of page slices covering a surface exactly once.

    A pure function of (surface dimensions, page format); immutable.

    Attributes:
        slices: Page slices in output order
        scale: Output units per source pixel
        page_format: Target page format
        surface_width_px: Width of the paginated surface
        surface_height_px: Height of the paginated surface
        slice_height_px: Full page band height in source pixels

    Invariants:
        - len(slices) >= 1
        - slices[i].index == i
        - slices[0].source_y_start == 0
        - slices[i + 1].source_y_start == slices[i].source_y_end
        - slices[-1].source_y_end == surface_height_px
        - every slice height <= slice_height_px
    """

    slices: Tuple[PageSlice, ...]
    scale: float
    page_format: PageFormat
    surface_width_px: int
    surface_height_px: int
    slice_height_px: int

    def __post_init__(self) -> None:
        """Validate coverage and ordering on construction."""
        if not self.slices:
            raise ValueError("A pagination plan needs at least one slice")
        if self.scale <= 0:
            raise ValueError(f"scale must be positive: {self.scale}")

        expected_start = 0
        for position, page_slice in enumerate(self.slices):
            if page_slice.index != position:
                raise ValueError(
                    f"Slice at position {position} has index {page_slice.index}"
                )
            if page_slice.source_y_start != expected_start:
                raise ValueError(
                    f"Slice {position} starts at {page_slice.source_y_start}, "
                    f"expected {expected_start}"
                )
            if page_slice.height_px > self.slice_height_px:
                raise ValueError(
                    f"Slice {position} is {page_slice.height_px}px tall, "
                    f"exceeds page band of {self.slice_height_px}px"
                )
            expected_start = page_slice.source_y_end

        if expected_start != self.surface_height_px:
            raise ValueError(
                f"Slices cover [0, {expected_start}) but surface is "
                f"{self.surface_height_px}px tall"
            )

    def __iter__(self) -> Iterator[PageSlice]:
        return iter(self.slices)

    def __len__(self) -> int:
        return len(self.slices)

    @property
    def page_count(self) -> int:
        """Number of output pages."""
        return len(self.slices)

    @property
    def covered_height_px(self) -> int:
        """Sum of slice heights (always equals surface_height_px)."""
        return sum(s.height_px for s in self.slices)

    @property
    def page_height_px(self) -> float:
        """Full page height expressed in source pixels."""
        return self.page_format.height_units / self.scale
