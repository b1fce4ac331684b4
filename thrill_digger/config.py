"""Solver tunables and game difficulty presets."""

from dataclasses import dataclass
from typing import Dict

# Hard cap on combinations tested in one solve.
DEFAULT_MAX_COMBINATIONS = 400_000_000

# Placements are bit patterns of a signed 64-bit integer.
MAX_UNKNOWN_CELLS = 62


@dataclass(frozen=True)
class SolverSettings:
    """
    Tunables for the enumerator and for workload estimation.

    Attributes:
        max_combinations: Ceiling on tested combinations; past it the
            enumeration stops and zero-evidence cells become undetermined.
        block_size: Number of combinations evaluated per vectorised block.
            Also the granularity of progress callbacks.
        heavy_computation_threshold: Constrained-unknown count at which a
            caller should warn before solving.
        confirmation_required_seconds: Estimated runtime above which a caller
            should ask for explicit confirmation.
        combinations_per_second: Throughput constant used by the runtime
            estimate.
        progress_interval_seconds: Minimum spacing between logged progress
            reports.
    """

    max_combinations: int = DEFAULT_MAX_COMBINATIONS
    block_size: int = 1 << 16
    heavy_computation_threshold: int = 22
    confirmation_required_seconds: int = 30
    combinations_per_second: int = 1_111_111
    progress_interval_seconds: float = 2.0

    def __post_init__(self) -> None:
        if self.max_combinations <= 0:
            raise ValueError("max_combinations must be positive.")
        if self.block_size <= 0:
            raise ValueError("block_size must be positive.")
        if self.combinations_per_second <= 0:
            raise ValueError("combinations_per_second must be positive.")


DEFAULT_SETTINGS = SolverSettings()


@dataclass(frozen=True)
class GameConfig:
    """Board size, hazard counts and entry fee for one difficulty."""

    name: str
    width: int
    height: int
    house_fee: int
    bomb_count: int
    rupoor_count: int

    @property
    def hazard_budget(self) -> int:
        return self.bomb_count + self.rupoor_count


DIFFICULTY_CONFIGS: Dict[str, GameConfig] = {
    "beginner": GameConfig("beginner", 5, 4, 30, 4, 0),
    "intermediate": GameConfig("intermediate", 6, 5, 50, 4, 4),
    "expert": GameConfig("expert", 8, 5, 70, 8, 8),
}


def get_game_config(difficulty: str) -> GameConfig:
    """
    Look up a difficulty preset by name.

    Raises:
        ValueError: If the difficulty is unknown.
    """
    try:
        return DIFFICULTY_CONFIGS[difficulty]
    except KeyError:
        raise ValueError(
            f"difficulty must be one of {sorted(DIFFICULTY_CONFIGS)}, got {difficulty!r}."
        ) from None
