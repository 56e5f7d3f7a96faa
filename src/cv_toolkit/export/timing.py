"""
Module: export.timing

Purpose:
    Timing instrumentation for export jobs. Assembly cost grows with
    document length, so each phase duration is kept on the job.

Key Classes:
    - TimingLog: Collects per-phase durations for one export

Key Functions:
    - timed_phase: Context manager for timing code blocks

Used By:
    - export.controller: Export orchestration
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Generator


@dataclass
class TimingLog:
    """
    Phase durations for one export.

    Example:
        >>> log = TimingLog()
        >>> log.log("paginate", 0.002)
        >>> log.total
        0.002
    """
    phases: Dict[str, float] = field(default_factory=dict)

    def log(self, phase: str, duration: float) -> None:
        """Record (or accumulate) a phase duration."""
        self.phases[phase] = self.phases.get(phase, 0.0) + duration

    @property
    def total(self) -> float:
        return sum(self.phases.values())

    def summary(self) -> str:
        """Human-readable one-line summary."""
        parts = [f"{phase}={duration:.3f}s" for phase, duration in self.phases.items()]
        return ", ".join(parts) if parts else "no phases recorded"


@contextmanager
def timed_phase(log: TimingLog, phase: str) -> Generator[None, None, None]:
    """
    Context manager for timing a pipeline phase.

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "capture"):
        ...     surface = rasterizer.capture(view)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        log.log(phase, time.perf_counter() - start)
