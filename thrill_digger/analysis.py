"""Display helpers and benchmarking tools for the Thrill Digger solver."""

import random
import time
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .cells import HAZARD, RUPOOR, CellKind, SolvedCell
from .config import get_game_config
from .engine import ThrillDigger, is_play_hazard
from .estimate import estimate_unknown_count
from .solver import build_constraints, normalize_board, solve
from .utils import index_to_coords


def _cell_text(cell: SolvedCell) -> str:
    if cell.kind is CellKind.PROBABILITY:
        return f"{round(cell.value * 100):3d}%"
    if cell.kind is CellKind.UNDETERMINED:
        return "   ?"
    if cell.kind is CellKind.CLEARED:
        return "   -"
    if cell.value == HAZARD:
        return "   H"
    if cell.value == RUPOOR:
        return "   R"
    return f"  #{int(cell.value)}"


def format_solved_board(
    solved: Sequence[SolvedCell], width: int, *, show_coords: bool = True
) -> str:
    """
    Format a solved board as a human-readable grid.

    Args:
        solved: Flat row-major solver output.
        width: Board width.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid where unknown cells show their hazard percentage,
        clue cells show '#' and their value, revealed hazards show 'H',
        rupoors 'R', cleared cells '-' and undetermined cells '?'.
    """
    height = len(solved) // width
    lines: List[str] = []
    if show_coords:
        lines.append("   " + " ".join(f"{x:4d}" for x in range(width)))
        lines.append("   " + "-" * (5 * width - 1))

    for y in range(height):
        row = " ".join(_cell_text(solved[y * width + x]) for x in range(width))
        lines.append(f"{y:2d}|" + row if show_coords else row)

    return "\n".join(lines)


def probability_band(probability: float) -> str:
    """
    Bucket a probability into one of eleven display bands.

    Returns "prob-0" for certainly safe cells, then "prob-10" through
    "prob-100" in steps of ten percentage points.
    """
    percent = probability * 100
    if percent <= 0:
        return "prob-0"
    for upper in range(10, 100, 10):
        if percent <= upper:
            return f"prob-{upper}"
    return "prob-100"


def safest_cell(
    solved: Sequence[SolvedCell],
    width: int,
    last_changed: Optional[int] = None,
) -> Optional[int]:
    """
    Pick the unknown cell least likely to hide a hazard.

    Cleared cells count as probability 0. Returns None when every candidate
    shares the same probability, since no cell stands out. Ties are broken by
    Manhattan distance to ``last_changed`` when given, else by index.
    """
    candidates: Dict[int, float] = {}
    for idx, cell in enumerate(solved):
        if cell.kind is CellKind.PROBABILITY:
            candidates[idx] = cell.value
        elif cell.kind is CellKind.CLEARED:
            candidates[idx] = 0.0

    if not candidates:
        return None

    lowest = min(candidates.values())
    if lowest >= max(candidates.values()):
        return None

    best = [idx for idx, p in candidates.items() if abs(p - lowest) < 1e-4]
    if last_changed is None:
        return best[0]

    row, col = index_to_coords(last_changed, width)

    def distance(idx: int) -> int:
        r, c = index_to_coords(idx, width)
        return abs(r - row) + abs(c - col)

    return min(best, key=distance)


def run_solver_benchmark(
    difficulty: str,
    runs: int,
    *,
    dig_fraction: float = 0.3,
    seed: Optional[int] = None,
) -> Dict[str, np.ndarray]:
    """
    Time the solver on randomly dug boards of one difficulty.

    Each run generates a fresh board, digs a random share of its safe cells
    and solves the resulting grid.

    Args:
        difficulty: Difficulty preset name.
        runs: Number of boards to solve.
        dig_fraction: Share of safe cells dug before solving.
        seed: Seed for board generation and digging.

    Returns:
        Arrays (one entry per run) under "estimated_unknowns",
        "searched_unknowns", "seconds" and "consistent".
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")
    if not 0.0 <= dig_fraction <= 1.0:
        raise ValueError("dig_fraction must be within [0, 1].")

    config = get_game_config(difficulty)
    rng = random.Random(seed)

    estimated = np.zeros(runs, dtype=np.int64)
    searched = np.zeros(runs, dtype=np.int64)
    seconds = np.zeros(runs, dtype=np.float64)
    consistent = np.zeros(runs, dtype=bool)

    for run in range(runs):
        game = ThrillDigger(config, rng=rng)
        safe = [
            (x, y)
            for y in range(game.height)
            for x in range(game.width)
            if not is_play_hazard(game.board[y][x])
        ]
        for x, y in rng.sample(safe, int(len(safe) * dig_fraction)):
            game.reveal(x, y)

        grid = game.solver_grid()
        estimated[run] = estimate_unknown_count(grid, game.width, game.height)
        _, unknown_indices = build_constraints(
            normalize_board(grid, game.width, game.height), game.width, game.height
        )
        searched[run] = len(unknown_indices)

        started = time.perf_counter()
        solved = solve(grid, game.width, game.height, config.bomb_count, config.rupoor_count)
        seconds[run] = time.perf_counter() - started
        consistent[run] = solved is not None

    return {
        "estimated_unknowns": estimated,
        "searched_unknowns": searched,
        "seconds": seconds,
        "consistent": consistent,
    }


def plot_benchmark(results: Dict[str, np.ndarray], title: str = "") -> None:
    """Plot solve time against searched unknowns, and estimate vs. actual unknowns."""
    searched = results["searched_unknowns"]
    estimated = results["estimated_unknowns"]
    seconds = results["seconds"]

    # 1) Runtime grows with 2**unknowns
    plt.figure()  # type: ignore[misc]
    plt.scatter(searched, seconds)  # type: ignore[misc]
    plt.yscale("log")  # type: ignore[misc]
    plt.xlabel("Constrained unknowns")  # type: ignore[misc]
    plt.ylabel("Solve time (s)")  # type: ignore[misc]
    plt.title(f"Solve time vs. unknowns {title}".strip())  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Estimator overshoot
    lim = int(max(estimated.max(initial=0), searched.max(initial=0))) + 1
    plt.figure()  # type: ignore[misc]
    plt.scatter(searched, estimated)  # type: ignore[misc]
    plt.plot([0, lim], [0, lim], linestyle="--")  # type: ignore[misc]
    plt.xlabel("Searched unknowns")  # type: ignore[misc]
    plt.ylabel("Estimated unknowns")  # type: ignore[misc]
    plt.title(f"Workload estimate vs. actual search {title}".strip())  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]
