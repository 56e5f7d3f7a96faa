"""
Module: export

Purpose:
    Export pipeline for CV documents. Captures a document view into a
    surface, paginates it onto fixed-size pages under a fit-width scale,
    assembles one bitmap per page and writes the pages to a PDF.

Key Functions:
    - export_document(): Main entry point for a single export
    - resolve_scale(): Fit-width scale for a surface
    - paginate(): Split a surface into page bands
    - assemble(): Render one page per band

Key Classes:
    - ExportConfig: Configuration for exporting
    - DocumentExporter: Per-document serialized exports
    - ExportJob / ExportState: Job lifecycle
    - ExportFailed: Single failure outcome

Dependencies:
    - PIL: Image manipulation
    - reportlab: PDF output
    - fitz (PyMuPDF): PDF rasterization
    - portalocker: Cross-process export locks
"""

from .config import ExportConfig
from .errors import (
    AssemblyFailed,
    CaptureFailed,
    DegenerateScale,
    ExportCancelled,
    ExportError,
    ExportFailed,
    ExportInProgress,
    FailureKind,
    InvalidSurface,
)
from .layout import paginate, resolve_scale
from .assembly import CancellationToken, assemble
from .output import PdfDocumentWriter, suggested_name
from .rasterizers import ImageRasterizer, PdfRasterizer
from .controller import (
    DocumentExporter,
    ExportJob,
    ExportResult,
    ExportState,
    export_document,
)

__all__ = [
    # Config
    "ExportConfig",
    # Errors
    "ExportError",
    "ExportFailed",
    "FailureKind",
    "InvalidSurface",
    "DegenerateScale",
    "CaptureFailed",
    "AssemblyFailed",
    "ExportCancelled",
    "ExportInProgress",
    # Pipeline
    "resolve_scale",
    "paginate",
    "assemble",
    "CancellationToken",
    "suggested_name",
    "PdfDocumentWriter",
    "ImageRasterizer",
    "PdfRasterizer",
    # Controller
    "DocumentExporter",
    "ExportJob",
    "ExportResult",
    "ExportState",
    "export_document",
]
