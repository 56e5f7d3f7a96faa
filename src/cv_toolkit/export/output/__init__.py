"""
Module: export.output

Purpose:
    Output boundary of the export pipeline: document writers and file
    name derivation.

Key Functions:
    - suggested_name(): File name stem from a subject
    - document_filename(): Stem plus container extension

Key Classes:
    - DocumentWriter: Writer protocol
    - PdfDocumentWriter: ReportLab PDF writer
"""

from .naming import document_filename, suggested_name
from .writer import DocumentWriter, PdfDocumentWriter

__all__ = [
    "document_filename",
    "suggested_name",
    "DocumentWriter",
    "PdfDocumentWriter",
]
