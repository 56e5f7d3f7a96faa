"""
Unit tests for the page assembler.

Uses row-coded surfaces so every page pixel can be traced back to the
source row it was copied from.
"""

import math
import threading

import pytest

from cv_toolkit.core.models import PageFormat, PageSlice, PaginationPlan, Surface
from cv_toolkit.export.assembly import CancellationToken, assemble, iter_pages
from cv_toolkit.export.config import ExportConfig
from cv_toolkit.export.errors import AssemblyFailed, ExportCancelled
from cv_toolkit.export.layout import paginate, resolve_scale

WHITE = (255, 255, 255)
A4 = PageFormat(210, 297)


@pytest.fixture
def tall_surface(surface_factory):
    """100x450 surface: four A4 pages of 141, 141, 141 and 27 rows."""
    return surface_factory(100, 450)


@pytest.fixture
def tall_plan(tall_surface):
    return paginate(tall_surface, A4, resolve_scale(tall_surface, A4))


class TestAssemble:
    """Page content and ordering."""

    def test_one_page_per_slice_in_order(self, tall_surface, tall_plan):
        pages = assemble(tall_surface, tall_plan)

        assert [p.index for p in pages] == [0, 1, 2, 3]
        assert [p.source_slice for p in pages] == list(tall_plan.slices)
        assert all((p.width_units, p.height_units, p.unit) == (210, 297, "mm") for p in pages)

    def test_canvas_maps_to_full_page(self, tall_surface, tall_plan):
        """Canvas is surface width x page height in source pixels."""
        pages = assemble(tall_surface, tall_plan)
        expected_height = math.ceil(297 / tall_plan.scale)
        assert all(p.bitmap.size == (100, expected_height) for p in pages)

    def test_content_extent_is_bitmap_size_times_scale(self, tall_surface, tall_plan):
        pages = assemble(tall_surface, tall_plan)

        for page in pages:
            assert page.content_width_units == pytest.approx(page.bitmap.width * tall_plan.scale)
            assert page.content_height_units == pytest.approx(page.bitmap.height * tall_plan.scale)
            assert page.content_width_units == pytest.approx(210)

    def test_band_placed_at_top_of_page(self, tall_surface, tall_plan, row_of):
        # Arrange
        pages = assemble(tall_surface, tall_plan)
        second = pages[1]

        # Act
        top = second.bitmap.getpixel((50, 0))
        last_content = second.bitmap.getpixel((50, 140))

        # Assert
        assert row_of(top) == 141
        assert row_of(last_content) == 281

    def test_last_page_padded_with_background(self, tall_surface, tall_plan, row_of):
        last = assemble(tall_surface, tall_plan)[-1]

        assert last.source_slice.height_px == 27
        assert row_of(last.bitmap.getpixel((0, 26))) == 449
        assert last.bitmap.getpixel((0, 27)) == WHITE
        assert last.bitmap.getpixel((99, last.bitmap.height - 1)) == WHITE

    def test_single_page_document(self, surface_factory, row_of):
        surface = surface_factory(100, 60)
        plan = paginate(surface, A4, resolve_scale(surface, A4))

        pages = assemble(surface, plan)

        assert len(pages) == 1
        assert row_of(pages[0].bitmap.getpixel((0, 59))) == 59
        assert pages[0].bitmap.getpixel((0, 60)) == WHITE

    def test_output_dpi_resamples_canvas(self, tall_surface, tall_plan):
        config = ExportConfig(output_dpi=50, resample="nearest")
        pages = assemble(tall_surface, tall_plan, config=config)
        # A4 width at 50 DPI; height keeps the canvas aspect (142 rows x 2.1mm)
        assert all(p.bitmap.size == (413, 587) for p in pages)
        assert all(p.content_height_units == pytest.approx(142 * 2.1) for p in pages)

    def test_transparent_surface_flattened_to_white(self):
        from PIL import Image

        surface = Surface(image=Image.new("RGBA", (100, 50), (0, 0, 0, 0)))
        plan = paginate(surface, A4, resolve_scale(surface, A4))

        page = assemble(surface, plan)[0]

        assert page.bitmap.mode == "RGB"
        assert page.bitmap.getpixel((10, 10)) == WHITE


class TestParallelAssembly:
    """Thread pool rendering keeps plan order."""

    def test_workers_preserve_order(self, surface_factory, row_of):
        surface = surface_factory(40, 2000)
        plan = paginate(surface, A4, resolve_scale(surface, A4))

        pages = assemble(surface, plan, config=ExportConfig(workers=4))

        assert [p.index for p in pages] == list(range(plan.page_count))
        for page in pages:
            assert row_of(page.bitmap.getpixel((0, 0))) == page.source_slice.source_y_start

    def test_workers_match_sequential_output(self, surface_factory):
        surface = surface_factory(40, 700)
        plan = paginate(surface, A4, resolve_scale(surface, A4))

        sequential = assemble(surface, plan)
        parallel = assemble(surface, plan, config=ExportConfig(workers=3))

        assert [p.bitmap.tobytes() for p in sequential] == [p.bitmap.tobytes() for p in parallel]


class TestCancellationAndFailures:

    def test_cancel_before_start_raises(self, tall_surface, tall_plan):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(ExportCancelled):
            assemble(tall_surface, tall_plan, cancel_token=token)

    def test_cancel_between_pages_stops_iteration(self, tall_surface, tall_plan):
        # Arrange
        token = CancellationToken()
        produced = []

        # Act
        with pytest.raises(ExportCancelled):
            for page in iter_pages(tall_surface, tall_plan, cancel_token=token):
                produced.append(page.index)
                if page.index == 1:
                    token.cancel()

        # Assert
        assert produced == [0, 1]

    def test_plan_for_other_surface_raises(self, tall_plan, surface_factory):
        other = surface_factory(100, 300)
        with pytest.raises(AssemblyFailed, match="Plan was built for 100x450px"):
            assemble(other, tall_plan)

    def test_token_is_thread_safe_flag(self):
        token = CancellationToken()
        worker = threading.Thread(target=token.cancel)
        worker.start()
        worker.join()
        assert token.cancelled
