"""
Thrill Digger Solver

An exhaustive hazard-probability solver for Thrill Digger boards:
- Board normalization: unknown cells, and cells cleared by green clues or rupoors
- Constraint building: one constraint per clue above the green tier
- Enumeration: every bomb/no-bomb placement over the constrained unknowns
- Probability projection: per-cell probabilities plus a shared free-cell default
"""

from .cells import CellKind, InputKind, SolvedCell, UNDETERMINED
from .config import DIFFICULTY_CONFIGS, GameConfig, SolverSettings, get_game_config
from .engine import ThrillDigger, generate_play_board, play_cli, to_solver_grid
from .estimate import (
    ProgressReporter,
    Workload,
    assess_workload,
    estimate_remaining_seconds,
    estimate_seconds,
    estimate_unknown_count,
)
from .solver import solve, solve_board_probabilities
from .analysis import (
    format_solved_board,
    plot_benchmark,
    probability_band,
    run_solver_benchmark,
    safest_cell,
)

__version__ = "1.0.0"

__all__ = [
    # Solver
    "solve",
    "solve_board_probabilities",
    "CellKind",
    "InputKind",
    "SolvedCell",
    "UNDETERMINED",
    # Workload estimation
    "estimate_unknown_count",
    "estimate_seconds",
    "assess_workload",
    "estimate_remaining_seconds",
    "ProgressReporter",
    "Workload",
    # Configuration
    "SolverSettings",
    "GameConfig",
    "DIFFICULTY_CONFIGS",
    "get_game_config",
    # Play mode
    "ThrillDigger",
    "generate_play_board",
    "to_solver_grid",
    "play_cli",
    # Analysis functions
    "format_solved_board",
    "probability_band",
    "safest_cell",
    "run_solver_benchmark",
    "plot_benchmark",
]
