"""
Module: timing

Purpose:
    Timing instrumentation for the render pipeline.

Key Classes:
    - RenderTimings: Collects per-phase durations for one render

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)

Used By:
    - controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Generator

logger = logging.getLogger(__name__)


@dataclass
class RenderTimings:
    """
    Phase durations for one render.

    Attributes:
        phases: Dict of phase_name -> duration_seconds, in run order

    Example:
        >>> timings = RenderTimings()
        >>> timings.log("plan", 0.002)
        >>> timings.total
        0.002
    """
    phases: Dict[str, float] = field(default_factory=dict)

    def log(self, phase: str, duration: float) -> None:
        """Record a phase duration (repeated phases accumulate)."""
        self.phases[phase] = self.phases.get(phase, 0.0) + duration

    @property
    def total(self) -> float:
        return sum(self.phases.values())

    def summary(self) -> str:
        """One-line summary, e.g. ``load=12.0ms plan=0.1ms total=12.1ms``."""
        parts = [f"{name}={seconds * 1000:.1f}ms" for name, seconds in self.phases.items()]
        parts.append(f"total={self.total * 1000:.1f}ms")
        return " ".join(parts)


@contextmanager
def timed_phase(timings: RenderTimings, phase: str) -> Generator[None, None, None]:
    """
    Time a block and record it under ``phase``.

    The duration is recorded even if the block raises.

    Example:
        >>> with timed_phase(timings, "render"):
        ...     surface = render(layout, items)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        timings.log(phase, duration)
        logger.debug(f"Phase {phase} took {duration * 1000:.1f}ms")
