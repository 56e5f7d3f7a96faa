"""
Module: core

Purpose:
    Shared data models for the export pipeline. Nothing in here performs
    I/O; every model is an immutable snapshot.
"""

from .models import Surface, PageFormat, PageSlice, PaginationPlan, Page

__all__ = ["Surface", "PageFormat", "PageSlice", "PaginationPlan", "Page"]
