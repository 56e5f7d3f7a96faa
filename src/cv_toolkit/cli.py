"""
Command line entry point: export a rendered CV (image or PDF) to a
paginated A4 PDF.

Usage:
    cv-export cv.png --subject "Jane Doe" --output-dir out/
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cv_toolkit import __version__
from cv_toolkit.core.models import PageFormat, PAGE_PRESETS_MM
from cv_toolkit.core.models.page_format import UNIT_POINTS
from cv_toolkit.export import (
    DocumentExporter,
    ExportConfig,
    ExportFailed,
    ExportInProgress,
    ImageRasterizer,
    PdfRasterizer,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cv-export",
        description="Paginate a rendered CV onto fixed-size pages and write a PDF.",
    )
    parser.add_argument("input", type=Path, help="Rendered CV (PNG/JPEG/... or PDF)")
    parser.add_argument("--subject", default="", help="Name the output file is derived from")
    parser.add_argument("--output-dir", type=Path, default=Path("."), help="Where to save the PDF")
    parser.add_argument(
        "--page-format",
        default="a4",
        choices=sorted(PAGE_PRESETS_MM),
        help="Named page format (default: a4)",
    )
    parser.add_argument("--landscape", action="store_true", help="Use landscape orientation")
    parser.add_argument("--page-width", type=float, help="Custom page width (overrides --page-format)")
    parser.add_argument("--page-height", type=float, help="Custom page height (overrides --page-format)")
    parser.add_argument("--unit", default="mm", choices=sorted(UNIT_POINTS), help="Unit of custom page size")
    parser.add_argument("--dpi", type=int, default=None, help="Resample pages to this DPI")
    parser.add_argument("--zoom", type=float, default=2.0, help="Render zoom for PDF inputs")
    parser.add_argument("--workers", type=int, default=1, help="Threads used to render pages")
    parser.add_argument("--lock-dir", type=Path, default=None, help="Directory for export lock files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _page_format_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> PageFormat:
    if (args.page_width is None) != (args.page_height is None):
        parser.error("--page-width and --page-height must be given together")
    try:
        if args.page_width is not None:
            page_format = PageFormat(args.page_width, args.page_height, args.unit)
            return page_format.landscape() if args.landscape else page_format
        return PageFormat.from_name(args.page_format, landscape=args.landscape)
    except ValueError as e:
        parser.error(str(e))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    page_format = _page_format_from_args(parser, args)
    try:
        config = ExportConfig(
            page_format=page_format,
            output_dpi=args.dpi,
            workers=args.workers,
            lock_dir=args.lock_dir,
        )
        if args.input.suffix.lower() == ".pdf":
            rasterizer = PdfRasterizer(zoom=args.zoom)
        else:
            rasterizer = ImageRasterizer()
    except ValueError as e:
        parser.error(str(e))

    exporter = DocumentExporter(rasterizer, config=config)
    try:
        result = exporter.export(str(args.input.resolve()), args.input, subject=args.subject)
    except ExportInProgress as e:
        print(e, file=sys.stderr)
        return 1
    except ExportFailed as e:
        logger.debug("Export failure detail", exc_info=True)
        print(e.user_message, file=sys.stderr)
        return 1

    try:
        path = result.save(args.output_dir)
    except OSError as e:
        logger.debug("Save failure detail", exc_info=True)
        print(f"Could not save {result.filename} to {args.output_dir}: {e}", file=sys.stderr)
        return 1
    print(f"{path} ({result.page_count} page{'s' if result.page_count != 1 else ''})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
