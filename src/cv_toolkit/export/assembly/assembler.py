"""
Module: export.assembly.assembler

Purpose:
    Render each PageSlice of a plan onto its own page canvas, in plan
    order. Each canvas is a fresh white bitmap that maps to the full
    page at the plan's scale, with the band pasted at the slice's
    destination.

Key Functions:
    - iter_pages(): Yield pages one by one, strictly in plan order
    - assemble(): Collect all pages into a list
    - render_page(): Render a single slice

Dependencies:
    - PIL: Canvas creation and pasting
    - concurrent.futures: Optional parallel rendering
    - export.images.cropper: Band cropping and resampling

Used By:
    - export.controller: Assembling phase
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional

from PIL import Image

from cv_toolkit.core.models import Page, PageSlice, PaginationPlan, Surface

from ..config import ExportConfig
from ..errors import AssemblyFailed, ExportError
from ..images.cropper import crop_band, flatten, resample_to_dpi, target_size_for_dpi
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)


def render_page(
    surface: Surface,
    plan: PaginationPlan,
    page_slice: PageSlice,
    config: ExportConfig,
) -> Page:
    """
    Render one slice onto a fresh page canvas.

    Args:
        surface: Source surface
        plan: Plan the slice belongs to (provides scale and page format)
        page_slice: Slice to render
        config: Export configuration

    Returns:
        Page whose bitmap spans the page width at the plan scale

    Raises:
        AssemblyFailed: If cropping, pasting or resampling fails
    """
    page_format = plan.page_format
    scale = plan.scale

    try:
        band = flatten(crop_band(surface, page_slice), config.background_rgb)

        canvas_size = (
            plan.surface_width_px,
            max(math.ceil(page_format.height_units / scale), band.height),
        )
        canvas = Image.new("RGB", canvas_size, config.background_rgb)
        canvas.paste(band, (round(page_slice.dest_x / scale), round(page_slice.dest_y / scale)))

        # Uniform scale on both axes: the canvas is drawn at its own size in units
        content_width_units = canvas_size[0] * scale
        content_height_units = canvas_size[1] * scale

        if config.output_dpi is not None:
            target = target_size_for_dpi(
                content_width_units,
                content_height_units,
                page_format.points_per_unit,
                config.output_dpi,
            )
            canvas = resample_to_dpi(canvas, target, config.resample_filter)
    except ExportError:
        raise
    except (OSError, ValueError, MemoryError) as e:
        raise AssemblyFailed(f"Failed to render page {page_slice.index}: {e}") from e

    logger.debug(
        f"Rendered page {page_slice.index}: rows [{page_slice.source_y_start}, "
        f"{page_slice.source_y_end}) -> {canvas.size[0]}x{canvas.size[1]}px canvas"
    )
    return Page(
        index=page_slice.index,
        width_units=page_format.width_units,
        height_units=page_format.height_units,
        bitmap=canvas,
        source_slice=page_slice,
        unit=page_format.unit,
        content_width_units=content_width_units,
        content_height_units=content_height_units,
    )


def iter_pages(
    surface: Surface,
    plan: PaginationPlan,
    *,
    config: Optional[ExportConfig] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> Iterator[Page]:
    """
    Yield assembled pages strictly in plan order.

    With ``config.workers > 1`` pages are rendered on a thread pool, but
    page i is never yielded before page i-1.

    Raises:
        AssemblyFailed: If the plan does not match the surface or a page fails
        ExportCancelled: If ``cancel_token`` is set between slices
    """
    config = config or ExportConfig(page_format=plan.page_format)

    if plan.surface_width_px != surface.width_px or plan.surface_height_px != surface.height_px:
        raise AssemblyFailed(
            f"Plan was built for {plan.surface_width_px}x{plan.surface_height_px}px, "
            f"surface is {surface.width_px}x{surface.height_px}px"
        )

    if config.workers == 1:
        for page_slice in plan:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled(f"before page {page_slice.index}")
            yield render_page(surface, plan, page_slice, config)
        return

    with ThreadPoolExecutor(max_workers=config.workers) as pool:
        futures = [
            pool.submit(render_page, surface, plan, page_slice, config)
            for page_slice in plan
        ]
        try:
            for future in futures:
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled("between pages")
                yield future.result()
        finally:
            for future in futures:
                future.cancel()


def assemble(
    surface: Surface,
    plan: PaginationPlan,
    *,
    config: Optional[ExportConfig] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> List[Page]:
    """
    Assemble every page of a plan.

    Args:
        surface: Source surface
        plan: Pagination plan for ``surface``
        config: Export configuration (defaults derived from the plan)
        cancel_token: Optional cancellation token checked between slices

    Returns:
        Pages in plan order (index 0..N-1)

    Example:
        >>> pages = assemble(surface, plan)
        >>> [p.index for p in pages]
        [0, 1, 2, 3]
    """
    pages = list(iter_pages(surface, plan, config=config, cancel_token=cancel_token))
    logger.info(f"Assembled {len(pages)} page(s)")
    return pages
