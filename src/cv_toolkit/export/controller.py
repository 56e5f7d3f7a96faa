"""
Module: export.controller

Purpose:
    Orchestrate the complete export pipeline.
    Capture → Resolve scale → Paginate → Assemble → Write

Key Functions:
    - export_document(): Run one export job end to end

Key Classes:
    - ExportState: Job lifecycle states
    - ExportJob: Per-request lifecycle object
    - ExportResult: Finished document and diagnostics
    - DocumentExporter: Serializes exports per document

Dependencies:
    - export.rasterizers: Capture boundary
    - export.layout: Scale resolution and pagination
    - export.assembly: Page assembly
    - export.output: Document writer and naming

Used By:
    - cli: Command line export
"""

from __future__ import annotations

import logging
import threading
from contextlib import ExitStack
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from cv_toolkit.core.models import Page, PageFormat, PaginationPlan, Surface

from .assembly import CancellationToken, assemble
from .config import ExportConfig
from .errors import AssemblyFailed, CaptureFailed, ExportError, ExportFailed, ExportInProgress
from .layout import paginate, resolve_scale
from .locking import document_lock
from .output import DocumentWriter, PdfDocumentWriter, document_filename, suggested_name
from .rasterizers import Rasterizer, capture_surface
from .timing import TimingLog, timed_phase

logger = logging.getLogger(__name__)


class ExportState(str, Enum):
    """Lifecycle state of an export job."""

    IDLE = "idle"
    CAPTURING = "capturing"
    PAGINATING = "paginating"
    ASSEMBLING = "assembling"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExportState.COMPLETE, ExportState.FAILED)


_TRANSITIONS: Dict[ExportState, tuple] = {
    ExportState.IDLE: (ExportState.CAPTURING, ExportState.FAILED),
    ExportState.CAPTURING: (ExportState.PAGINATING, ExportState.FAILED),
    ExportState.PAGINATING: (ExportState.ASSEMBLING, ExportState.FAILED),
    ExportState.ASSEMBLING: (ExportState.COMPLETE, ExportState.FAILED),
    ExportState.COMPLETE: (),
    ExportState.FAILED: (),
}


@dataclass
class ExportJob:
    """
    Lifecycle of a single user-initiated export.

    Created per request and discarded on completion or failure; nothing
    about a job is persisted.

    Attributes:
        document_id: Document being exported
        page_format: Target page format
        subject: Subject the output file is named after
        state: Current lifecycle state
        surface: Captured surface (after Capturing)
        scale: Resolved scale (after Paginating)
        plan: Pagination plan (after Paginating)
        pages: Assembled pages (during Assembling)
        failure: Error that moved the job to FAILED
        history: States visited, in order
        timings: Per-phase durations
    """
    document_id: str
    page_format: PageFormat
    subject: str = ""
    state: ExportState = ExportState.IDLE
    surface: Optional[Surface] = None
    scale: Optional[float] = None
    plan: Optional[PaginationPlan] = None
    pages: Optional[List[Page]] = None
    failure: Optional[ExportError] = None
    history: List[ExportState] = field(default_factory=lambda: [ExportState.IDLE])
    timings: TimingLog = field(default_factory=TimingLog)

    def advance(self, new_state: ExportState) -> None:
        """
        Move to ``new_state``.

        Raises:
            RuntimeError: If the transition is not allowed
        """
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Illegal export transition {self.state.value} -> {new_state.value}"
            )
        logger.debug(f"Export {self.document_id}: {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    def fail(self, error: ExportError) -> None:
        """Record ``error`` and move to FAILED."""
        self.failure = error
        self.advance(ExportState.FAILED)


@dataclass(frozen=True)
class ExportResult:
    """
    Finished export (immutable).

    Attributes:
        data: Document bytes produced by the writer
        suggested_name: Name stem derived from the subject
        filename: suggested_name plus the writer's extension
        page_count: Number of pages written
        scale: Output units per source pixel
        plan: Pagination plan used
        elapsed_seconds: Wall time of the whole export
        timings: Per-phase durations

    Example:
        >>> result = export_document(Path("cv.png"), rasterizer=ImageRasterizer(),
        ...                          subject="Jane Doe")
        >>> result.filename
        'Jane_Doe_CV.pdf'
    """
    data: bytes
    suggested_name: str
    filename: str
    page_count: int
    scale: float
    plan: PaginationPlan
    elapsed_seconds: float
    timings: Dict[str, float] = field(default_factory=dict)

    def save(self, directory: Path) -> Path:
        """Write ``data`` to ``directory/filename`` and return the path."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        path.write_bytes(self.data)
        logger.info(f"Saved {self.page_count} page(s) to {path}")
        return path


def run_job(
    job: ExportJob,
    view: Any,
    *,
    rasterizer: Rasterizer,
    writer: DocumentWriter,
    config: ExportConfig,
    cancel_token: Optional[CancellationToken] = None,
) -> ExportResult:
    """
    Drive ``job`` from IDLE to COMPLETE.

    Raises:
        ExportFailed: If any phase fails (job is left in FAILED)
    """
    try:
        job.advance(ExportState.CAPTURING)
        with timed_phase(job.timings, "capture"):
            job.surface = capture_surface(rasterizer, view)
        logger.info(
            f"Captured {job.document_id}: "
            f"{job.surface.width_px}x{job.surface.height_px}px"
        )

        job.advance(ExportState.PAGINATING)
        with timed_phase(job.timings, "paginate"):
            job.scale = resolve_scale(job.surface, job.page_format)
            job.plan = paginate(job.surface, job.page_format, job.scale)

        job.advance(ExportState.ASSEMBLING)
        with timed_phase(job.timings, "assemble"):
            job.pages = assemble(job.surface, job.plan, config=config, cancel_token=cancel_token)

        name = suggested_name(job.subject, config.name_suffix)
        with timed_phase(job.timings, "write"):
            try:
                data = writer.write(job.pages, name)
            except ExportError:
                raise
            except Exception as e:
                raise AssemblyFailed(f"Document writer failed: {e}") from e
            if not data:
                raise AssemblyFailed("Document writer produced no output")

        job.advance(ExportState.COMPLETE)
    except ExportError as e:
        raise _fail_job(job, e) from e
    except Exception as e:
        error = _wrap_unexpected(job, e)
        raise _fail_job(job, error) from error

    logger.info(
        f"Exported {job.document_id} as {name!r}: {job.plan.page_count} page(s) "
        f"in {job.timings.total:.2f}s ({job.timings.summary()})"
    )
    return ExportResult(
        data=data,
        suggested_name=name,
        filename=document_filename(name, getattr(writer, "extension", ".pdf")),
        page_count=job.plan.page_count,
        scale=job.scale,
        plan=job.plan,
        elapsed_seconds=job.timings.total,
        timings=dict(job.timings.phases),
    )


def _wrap_unexpected(job: ExportJob, error: Exception) -> ExportError:
    """Map an error outside the taxonomy to the failing phase's kind."""
    if job.state in (ExportState.IDLE, ExportState.CAPTURING):
        wrapped: ExportError = CaptureFailed(f"Capture failed: {error}")
    else:
        wrapped = AssemblyFailed(f"Export failed while {job.state.value}: {error}")
    wrapped.__cause__ = error
    return wrapped


def _fail_job(job: ExportJob, error: ExportError) -> ExportFailed:
    """Move ``job`` to FAILED and build the caller-facing error."""
    job.pages = None
    job.fail(error)
    logger.error(
        f"Export {job.document_id} failed during "
        f"{job.history[-2].value} ({error.kind.value if error.kind else 'error'}): {error}"
    )
    return ExportFailed(
        f"Export of {job.document_id!r} failed: {error}",
        kind=error.kind,
        job=job,
    )


class DocumentExporter:
    """
    Serializes exports per document.

    A second export of a document that is still exporting is rejected
    with ExportInProgress. Exports of different documents share no state
    and may run concurrently. With ``config.lock_dir`` set the rejection
    also holds across processes.

    Example:
        >>> exporter = DocumentExporter(ImageRasterizer())
        >>> result = exporter.export("cv-42", Path("cv.png"), subject="Jane Doe")
    """

    def __init__(
        self,
        rasterizer: Rasterizer,
        writer: Optional[DocumentWriter] = None,
        config: Optional[ExportConfig] = None,
    ) -> None:
        self.rasterizer = rasterizer
        self.writer = writer or PdfDocumentWriter()
        self.config = config or ExportConfig()
        self._lock = threading.Lock()
        self._active: Dict[str, ExportJob] = {}

    def is_exporting(self, document_id: str) -> bool:
        with self._lock:
            return document_id in self._active

    def active_job(self, document_id: str) -> Optional[ExportJob]:
        with self._lock:
            return self._active.get(document_id)

    def export(
        self,
        document_id: str,
        view: Any,
        *,
        subject: str = "",
        page_format: Optional[PageFormat] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ExportResult:
        """
        Export ``view`` for ``document_id``.

        Raises:
            ExportInProgress: If the document is already exporting
            ExportFailed: If the export fails
        """
        job = ExportJob(
            document_id=document_id,
            page_format=page_format or self.config.page_format,
            subject=subject,
        )

        with self._lock:
            if document_id in self._active:
                raise ExportInProgress(
                    f"Document {document_id!r} is already being exported"
                )
            self._active[document_id] = job

        try:
            with ExitStack() as stack:
                if self.config.lock_dir is not None:
                    stack.enter_context(document_lock(Path(self.config.lock_dir), document_id))
                return run_job(
                    job,
                    view,
                    rasterizer=self.rasterizer,
                    writer=self.writer,
                    config=self.config,
                    cancel_token=cancel_token,
                )
        finally:
            with self._lock:
                self._active.pop(document_id, None)


def export_document(
    view: Any,
    *,
    rasterizer: Rasterizer,
    writer: Optional[DocumentWriter] = None,
    config: Optional[ExportConfig] = None,
    subject: str = "",
    document_id: str = "document",
    cancel_token: Optional[CancellationToken] = None,
) -> ExportResult:
    """
    Export a document view to a paginated document in one call.

    Pipeline:
    1. Capture the view into a Surface
    2. Resolve the fit-width scale
    3. Paginate the surface
    4. Assemble one page per slice
    5. Hand the ordered pages to the writer

    Args:
        view: Document view understood by ``rasterizer``
        rasterizer: Capture boundary
        writer: Output boundary (default PdfDocumentWriter)
        config: Export configuration
        subject: Subject the file is named after
        document_id: Identifier used in logs and job state
        cancel_token: Optional cancellation token

    Returns:
        ExportResult with the document bytes

    Raises:
        ExportFailed: If any step fails; ``kind`` names the cause
    """
    config = config or ExportConfig()
    job = ExportJob(document_id=document_id, page_format=config.page_format, subject=subject)
    return run_job(
        job,
        view,
        rasterizer=rasterizer,
        writer=writer or PdfDocumentWriter(),
        config=config,
        cancel_token=cancel_token,
    )
