"""Pre-flight workload estimation and progress reporting for the solver."""

import logging
import math
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .cells import EMPTY, UNKNOWN, classify_cell
from .config import DEFAULT_SETTINGS, SolverSettings
from .solver import constrained_unknowns
from .utils import flatten_grid

logger = logging.getLogger(__name__)


def estimate_unknown_count(
    grid: Sequence[Sequence[int]], width: int, height: int
) -> int:
    """
    Count the cells the solver would likely enumerate over.

    Every positive clue, green included, contributes its empty neighbors.
    The clearing pass of normalize_board() is skipped, so the count can
    exceed the number of unknowns the enumerator actually searches.

    Raises:
        ValueError: If the grid shape or any cell value is malformed.
    """
    board: List[int] = []
    for value in flatten_grid(grid, width, height):
        classify_cell(value)
        board.append(UNKNOWN if value == EMPTY else int(value))
    return len(constrained_unknowns(board, width, height, min_clue=1))


def estimate_seconds(
    unknown_count: int, settings: Optional[SolverSettings] = None
) -> int:
    """Rough runtime of a full enumeration: ``floor(2**count / throughput)``."""
    settings = settings or DEFAULT_SETTINGS
    return (1 << unknown_count) // settings.combinations_per_second


@dataclass(frozen=True)
class Workload:
    """Sizing of a solve, used to decide whether to warn before running it."""

    unknown_count: int
    combinations: int
    estimated_seconds: int
    is_heavy: bool
    requires_confirmation: bool


def assess_workload(
    grid: Sequence[Sequence[int]],
    width: int,
    height: int,
    settings: Optional[SolverSettings] = None,
) -> Workload:
    """Estimate how expensive solve() will be on this grid."""
    settings = settings or DEFAULT_SETTINGS
    count = estimate_unknown_count(grid, width, height)
    seconds = estimate_seconds(count, settings)
    workload = Workload(
        unknown_count=count,
        combinations=1 << count,
        estimated_seconds=seconds,
        is_heavy=count >= settings.heavy_computation_threshold,
        requires_confirmation=seconds > settings.confirmation_required_seconds,
    )
    if workload.is_heavy:
        logger.info(
            "Heavy computation ahead: %d unknowns, %d combinations, ~%ds.",
            count, workload.combinations, seconds,
        )
    return workload


def estimate_remaining_seconds(
    processed: int, total: int, elapsed_seconds: float
) -> int:
    """
    Extrapolate the time left in a running enumeration.

    Returns 0 until there is progress to extrapolate from, otherwise at
    least 1.
    """
    if processed <= 0 or elapsed_seconds <= 0:
        return 0
    rate = processed / elapsed_seconds
    remaining = max(0, total - processed)
    return max(1, math.ceil(remaining / rate))


class ProgressReporter:
    """
    Progress callback for solve() that logs at most once per interval.

    Keeps the latest (processed, total) pair so a host thread can poll it.
    """

    def __init__(self, interval_seconds: Optional[float] = None) -> None:
        if interval_seconds is None:
            interval_seconds = DEFAULT_SETTINGS.progress_interval_seconds
        self.interval_seconds = interval_seconds
        self.processed = 0
        self.total = 0
        self._started = time.perf_counter()
        self._last_report = self._started

    @property
    def elapsed_seconds(self) -> float:
        return time.perf_counter() - self._started

    @property
    def fraction(self) -> float:
        return self.processed / self.total if self.total else 0.0

    def __call__(self, processed: int, total: int) -> None:
        self.processed = processed
        self.total = total
        now = time.perf_counter()
        if now - self._last_report < self.interval_seconds and processed < total:
            return
        self._last_report = now
        eta = estimate_remaining_seconds(processed, total, now - self._started)
        logger.info(
            "Solver progress: %d/%d combinations (%.1f%%), ~%ds left.",
            processed, total, 100.0 * self.fraction, eta,
        )
