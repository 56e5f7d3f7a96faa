"""
Module: export.errors

Purpose:
    Failure taxonomy for the export pipeline. Each kind is raised where it
    occurs; the controller maps all of them onto one ExportFailed outcome
    while keeping the specific kind for logs and tests.

Key Classes:
    - FailureKind: Enumerated failure kinds
    - ExportError: Base class of every export exception
    - ExportFailed: Single outcome reported by the controller
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .controller import ExportJob

USER_FAILURE_MESSAGE = "Error generating PDF. Please try again."


class FailureKind(str, Enum):
    """Diagnostic kind of an export failure."""

    INVALID_SURFACE = "invalid_surface"
    DEGENERATE_SCALE = "degenerate_scale"
    CAPTURE_FAILED = "capture_failed"
    ASSEMBLY_FAILED = "assembly_failed"
    CANCELLED = "cancelled"


class ExportError(Exception):
    """Base class for export pipeline errors."""

    kind: Optional[FailureKind] = None


class InvalidSurface(ExportError):
    """Surface has zero width or height."""

    kind = FailureKind.INVALID_SURFACE


class DegenerateScale(ExportError):
    """Page band rounds to less than one source pixel."""

    kind = FailureKind.DEGENERATE_SCALE


class CaptureFailed(ExportError):
    """Rasterizer raised or returned nothing."""

    kind = FailureKind.CAPTURE_FAILED


class AssemblyFailed(ExportError):
    """Band extraction, resampling or the document writer failed."""

    kind = FailureKind.ASSEMBLY_FAILED


class ExportCancelled(ExportError):
    """Cancellation token was set between slices."""

    kind = FailureKind.CANCELLED


class ExportInProgress(ExportError):
    """Another export of the same document is still running."""


class ExportFailed(ExportError):
    """
    Terminal outcome of a failed export job.

    Attributes:
        kind: Specific failure kind (diagnostic detail)
        job: The failed job
        user_message: Generic message safe to show to end users
    """

    def __init__(
        self,
        message: str,
        *,
        kind: FailureKind,
        job: Optional["ExportJob"] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.job = job
        self.user_message = USER_FAILURE_MESSAGE
