"""Exhaustive hazard-probability solver for Thrill Digger boards."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .cells import (
    CLEARED,
    EMPTY,
    GREEN_TIER,
    RUPOOR,
    UNKNOWN,
    SolvedCell,
    classify_cell,
    is_known_hazard,
)
from .config import DEFAULT_SETTINGS, MAX_UNKNOWN_CELLS, SolverSettings
from .utils import flatten_grid, get_neighborhoods

logger = logging.getLogger(__name__)

# Called with (combinations_processed, combinations_planned)
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class Constraint:
    """
    A clue cell's demand on its unknown neighbors.

    source   : flat index of the clue cell
    cells    : flat indices of the clue's unknown neighbors
    expected : clue value minus already-known adjacent hazards (may be negative)
    """

    source: int
    cells: Tuple[int, ...]
    expected: int


@dataclass(frozen=True)
class Enumeration:
    """Outcome of enumerating hazard placements over the constrained unknowns."""

    valid_count: int
    occurrences: Tuple[int, ...]
    tested: int
    total: int

    @property
    def truncated(self) -> bool:
        return self.tested < self.total


# -------------------------------------------------------------------------
# Board normalization
# -------------------------------------------------------------------------


def normalize_board(
    grid: Sequence[Sequence[int]], width: int, height: int
) -> List[int]:
    """
    Flatten a solve-mode grid into the solver's working representation.

    Empty cells become UNKNOWN. Then every unknown neighbor of a green clue
    or a rupoor becomes CLEARED: those cells are provably safe and take no
    part in the search. Clearing sources are collected before any cell is
    cleared, so the result does not depend on scan order.

    Raises:
        ValueError: If the grid shape or any cell value is malformed.
    """
    flat = flatten_grid(grid, width, height)

    board: List[int] = []
    for value in flat:
        classify_cell(value)
        board.append(UNKNOWN if value == EMPTY else int(value))

    neighborhoods = get_neighborhoods(width, height)
    sources = [
        idx for idx, value in enumerate(board) if value in (GREEN_TIER, RUPOOR)
    ]
    for idx in sources:
        for n in neighborhoods[idx]:
            if board[n] == UNKNOWN:
                board[n] = CLEARED

    return board


# -------------------------------------------------------------------------
# Constraint building
# -------------------------------------------------------------------------


def scan_neighbors(
    board: Sequence[int], neighbors: Sequence[int]
) -> Tuple[List[int], int]:
    """Split a clue's neighbors into unknown cells and a known-hazard count."""
    unknowns: List[int] = []
    hazards = 0
    for n in neighbors:
        value = board[n]
        if value == UNKNOWN:
            unknowns.append(n)
        elif is_known_hazard(value):
            hazards += 1
    return unknowns, hazards


def constrained_unknowns(
    board: Sequence[int], width: int, height: int, *, min_clue: int
) -> List[int]:
    """
    Unknown cells adjacent to any clue of value >= ``min_clue``.

    Cells are returned in discovery order: clue cells row-major, neighbors in
    neighborhood order. This order is the bit order used by the enumerator.
    """
    neighborhoods = get_neighborhoods(width, height)
    seen: Dict[int, None] = {}
    for idx, value in enumerate(board):
        if value < min_clue:
            continue
        unknowns, _ = scan_neighbors(board, neighborhoods[idx])
        for n in unknowns:
            seen.setdefault(n, None)
    return list(seen)


def build_constraints(
    board: Sequence[int], width: int, height: int
) -> Tuple[List[Constraint], List[int]]:
    """
    Build the constraint system of a normalized board.

    Every clue above the green tier yields one constraint over its unknown
    neighbors, its expected count reduced by each adjacent known hazard.
    Clues with no unknown neighbors are dropped.

    Returns:
        Tuple of (constraints in row-major order of their clue cells,
        constrained unknown cells in discovery order).
    """
    neighborhoods = get_neighborhoods(width, height)
    constraints: List[Constraint] = []

    for idx, value in enumerate(board):
        if value <= GREEN_TIER:
            continue
        unknowns, hazards = scan_neighbors(board, neighborhoods[idx])
        if unknowns:
            constraints.append(Constraint(idx, tuple(unknowns), value - hazards))

    unknown_indices = constrained_unknowns(board, width, height, min_clue=GREEN_TIER + 1)
    return constraints, unknown_indices


def count_known_hazards(board: Sequence[int]) -> int:
    """Number of revealed hazards and rupoors on a normalized board."""
    return sum(1 for value in board if is_known_hazard(value))


def count_free_cells(board: Sequence[int], unknown_indices: Sequence[int]) -> int:
    """Unknown cells that no constraint touches."""
    return sum(1 for value in board if value == UNKNOWN) - len(unknown_indices)


# -------------------------------------------------------------------------
# Enumeration
# -------------------------------------------------------------------------


def enumerate_placements(
    constraints: Sequence[Constraint],
    unknown_indices: Sequence[int],
    remaining_budget: int,
    free_cell_count: int,
    *,
    settings: Optional[SolverSettings] = None,
    progress: Optional[ProgressCallback] = None,
) -> Enumeration:
    """
    Count satisfying hazard placements over the constrained unknowns.

    Placement ``combo`` puts a hazard on ``unknown_indices[b]`` iff bit ``b``
    of ``combo`` is set. Combinations are walked in increasing order, in
    vectorised blocks of ``settings.block_size``:

    1. Placements whose hazard total falls outside
       ``[max(0, remaining_budget - free_cell_count), remaining_budget]``
       are discarded before any constraint is checked.
    2. A constraint holds when the hazards on its cells equal ``expected``,
       or ``expected - 1`` for a positive ``expected``.
    3. Placements meeting every constraint are counted, and so is each
       hazard they place.

    At most ``settings.max_combinations`` combinations are tested.

    Args:
        constraints: Constraints from build_constraints().
        unknown_indices: Constrained unknown cells, in bit order.
        remaining_budget: Hazards not yet revealed on the board.
        free_cell_count: Unknown cells outside every constraint.
        settings: Solver tunables; defaults to DEFAULT_SETTINGS.
        progress: Optional callback invoked after each block with
            (processed, planned). Exceptions it raises abort the run.

    Returns:
        The Enumeration with per-bit hazard occurrence counts.

    Raises:
        ValueError: If there are more than MAX_UNKNOWN_CELLS unknowns.
    """
    settings = settings or DEFAULT_SETTINGS
    k = len(unknown_indices)
    if k > MAX_UNKNOWN_CELLS:
        raise ValueError(
            f"{k} constrained unknown cells exceed the supported maximum of "
            f"{MAX_UNKNOWN_CELLS}."
        )

    position = {cell: bit for bit, cell in enumerate(unknown_indices)}
    membership = np.zeros((k, len(constraints)), dtype=np.int16)
    for c, constraint in enumerate(constraints):
        for cell in constraint.cells:
            membership[position[cell], c] = 1

    expected = np.array([c.expected for c in constraints], dtype=np.int16)
    lower_allowed = expected > 0

    max_hazards = remaining_budget
    min_hazards = max(0, remaining_budget - free_cell_count)

    total = 1 << k
    planned = min(total, settings.max_combinations)
    shifts = np.arange(k, dtype=np.int64)
    occurrences = np.zeros(k, dtype=np.int64)
    valid_count = 0

    logger.debug(
        "Enumerating %d of %d placements over %d unknowns, %d constraints, "
        "hazard window [%d, %d].",
        planned, total, k, len(constraints), min_hazards, max_hazards,
    )

    for start in range(0, planned, settings.block_size):
        stop = min(start + settings.block_size, planned)
        combos = np.arange(start, stop, dtype=np.int64)
        bits = ((combos[:, None] >> shifts) & 1).astype(np.int16)

        placed = bits.sum(axis=1)
        bits = bits[(placed >= min_hazards) & (placed <= max_hazards)]

        if bits.shape[0]:
            sums = bits @ membership
            satisfied = (sums == expected) | ((sums == expected - 1) & lower_allowed)
            valid = bits[satisfied.all(axis=1)]
            valid_count += int(valid.shape[0])
            occurrences += valid.sum(axis=0, dtype=np.int64)

        if progress is not None:
            progress(stop, planned)

    if planned < total:
        logger.warning(
            "Combination ceiling reached: tested %d of %d placements.",
            planned, total,
        )

    return Enumeration(
        valid_count=valid_count,
        occurrences=tuple(int(n) for n in occurrences),
        tested=planned,
        total=total,
    )


# -------------------------------------------------------------------------
# Probability projection
# -------------------------------------------------------------------------


def project_probabilities(
    board: Sequence[int],
    unknown_indices: Sequence[int],
    enumeration: Enumeration,
    remaining_budget: int,
    free_cell_count: int,
    *,
    has_constraints: bool,
) -> Optional[List[SolvedCell]]:
    """
    Turn occurrence counts into a solved board.

    Returns None when the board is inconsistent: constraints exist but no
    placement satisfies them, or the constrained cells already account for
    more hazards than the budget holds. Leftover hazards are spread evenly
    over the free cells.
    """
    if has_constraints and enumeration.valid_count == 0:
        logger.warning("Board is inconsistent: no placement satisfies the clues.")
        return None

    solved: List[Optional[SolvedCell]] = [None] * len(board)
    remaining_expected = float(remaining_budget)

    for bit, cell in enumerate(unknown_indices):
        hits = enumeration.occurrences[bit]
        if enumeration.truncated and hits == 0:
            solved[cell] = SolvedCell.undetermined()
            continue
        probability = hits / enumeration.valid_count
        remaining_expected -= probability
        solved[cell] = SolvedCell.probability(probability)

    residual = round(remaining_expected * 100)
    if residual < 0:
        logger.warning(
            "Board is inconsistent: clues demand %.2f more hazards than the budget.",
            -remaining_expected,
        )
        return None

    remaining_expected = max(0.0, remaining_expected)
    default_probability = (
        remaining_expected / free_cell_count if free_cell_count > 0 else 0.0
    )

    for idx, value in enumerate(board):
        if solved[idx] is not None:
            continue
        if value == UNKNOWN:
            solved[idx] = SolvedCell.probability(default_probability)
        elif value == CLEARED:
            solved[idx] = SolvedCell.cleared()
        else:
            solved[idx] = SolvedCell.revealed(value)

    return [cell for cell in solved if cell is not None]


# -------------------------------------------------------------------------
# Entry points
# -------------------------------------------------------------------------


def solve(
    grid: Sequence[Sequence[int]],
    width: int,
    height: int,
    bomb_count: int,
    rupoor_count: int,
    *,
    settings: Optional[SolverSettings] = None,
    progress: Optional[ProgressCallback] = None,
) -> Optional[List[SolvedCell]]:
    """
    Compute the hazard probability of every unknown cell on a solve-mode grid.

    Args:
        grid: ``height`` rows of ``width`` solve-mode cell values.
        width: Board width.
        height: Board height.
        bomb_count: Declared number of bombs.
        rupoor_count: Declared number of rupoors.
        settings: Solver tunables; defaults to DEFAULT_SETTINGS.
        progress: Optional (processed, planned) callback.

    Returns:
        A flat row-major list of SolvedCell, or None if the board cannot
        occur under the declared hazard counts.

    Raises:
        ValueError: If the input is malformed.
    """
    if bomb_count < 0 or rupoor_count < 0:
        raise ValueError("bomb_count and rupoor_count must be non-negative.")

    started = time.perf_counter()
    board = normalize_board(grid, width, height)
    constraints, unknown_indices = build_constraints(board, width, height)

    known_hazards = count_known_hazards(board)
    free_cell_count = count_free_cells(board, unknown_indices)
    remaining_budget = max(0, bomb_count + rupoor_count - known_hazards)

    enumeration = enumerate_placements(
        constraints,
        unknown_indices,
        remaining_budget,
        free_cell_count,
        settings=settings,
        progress=progress,
    )
    solved = project_probabilities(
        board,
        unknown_indices,
        enumeration,
        remaining_budget,
        free_cell_count,
        has_constraints=bool(constraints),
    )

    logger.info(
        "Solved %dx%d board in %.3fs: %d constraints, %d unknowns, %d valid placements%s.",
        width, height, time.perf_counter() - started, len(constraints),
        len(unknown_indices), enumeration.valid_count,
        "" if solved is not None else " (inconsistent)",
    )
    return solved


def solve_board_probabilities(
    grid: Sequence[Sequence[int]],
    width: int,
    height: int,
    bomb_count: int,
    rupoor_count: int,
    *,
    settings: Optional[SolverSettings] = None,
    progress: Optional[ProgressCallback] = None,
) -> Optional[List[float]]:
    """
    Same as solve(), in the compact numeric encoding.

    Revealed cells keep their value, cleared cells are 0, undetermined cells
    are UNDETERMINED and every other entry is a probability.
    """
    solved = solve(
        grid, width, height, bomb_count, rupoor_count,
        settings=settings, progress=progress,
    )
    if solved is None:
        return None
    return [cell.as_number() for cell in solved]
