"""Cell value encoding for solve-mode grids and solver output."""

import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

# Solve-mode input values
EMPTY = 0
GREEN_TIER = 1
HAZARD = -2
RUPOOR = -10

# Clue tiers shown on the board: green, blue, red, silver, gold
CLUE_TIERS: Tuple[int, ...] = (1, 2, 4, 6, 8)
MAX_CLUE = CLUE_TIERS[-1]

# Internal normalized values
UNKNOWN = -1
CLEARED = 0

# Numeric output marker for cells that got no evidence before the ceiling hit.
# Shares its value with HAZARD; callers tell them apart by context.
UNDETERMINED = -2

RUPEE_TO_TIER: Dict[int, int] = {1: 1, 5: 2, 20: 4, 100: 6, 300: 8}
TIER_TO_RUPEE: Dict[int, int] = {tier: rupee for rupee, tier in RUPEE_TO_TIER.items()}

TIER_NAMES: Dict[int, str] = {
    1: "Green rupee",
    2: "Blue rupee",
    4: "Red rupee",
    6: "Silver rupee",
    8: "Gold rupee",
}


class InputKind(Enum):
    """What a solve-mode grid value stands for."""

    UNKNOWN = "unknown"
    CLUE = "clue"
    HAZARD = "hazard"
    PENALTY_HAZARD = "penalty_hazard"


class CellKind(Enum):
    """What a solved-board entry holds."""

    REVEALED = "revealed"
    CLEARED = "cleared"
    PROBABILITY = "probability"
    UNDETERMINED = "undetermined"


def classify_cell(value: int) -> InputKind:
    """
    Classify one solve-mode grid value.

    Raises:
        ValueError: If the value is not part of the solve-mode encoding.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"Cell values must be integers, got {value!r}.")
    if value == EMPTY:
        return InputKind.UNKNOWN
    if value == HAZARD:
        return InputKind.HAZARD
    if value == RUPOOR:
        return InputKind.PENALTY_HAZARD
    if 0 < value <= MAX_CLUE:
        return InputKind.CLUE
    raise ValueError(f"Unrecognized cell value: {value!r}.")


def is_known_hazard(value: int) -> bool:
    return value == HAZARD or value == RUPOOR


def tier_for_hazards(hazards: int) -> int:
    """Map an adjacent hazard count to the clue tier a player would see."""
    if hazards <= 0:
        return 1
    if hazards <= 2:
        return 2
    if hazards <= 4:
        return 4
    if hazards <= 6:
        return 6
    return 8


def rupee_for_hazards(hazards: int) -> int:
    """Map an adjacent hazard count to the rupee value found in play mode."""
    return TIER_TO_RUPEE[tier_for_hazards(hazards)]


def rupee_to_tier(value: int) -> int:
    """Convert a play-mode rupee value to its clue tier; other values pass through."""
    return RUPEE_TO_TIER.get(value, value)


@dataclass(frozen=True)
class SolvedCell:
    """
    One entry of a solved board.

    ``value`` is the original grid value for REVEALED cells, the hazard
    probability for PROBABILITY cells, and unused (0.0) otherwise.
    """

    kind: CellKind
    value: float = 0.0

    @classmethod
    def revealed(cls, value: int) -> "SolvedCell":
        return cls(CellKind.REVEALED, value)

    @classmethod
    def cleared(cls) -> "SolvedCell":
        return cls(CellKind.CLEARED, 0.0)

    @classmethod
    def probability(cls, p: float) -> "SolvedCell":
        return cls(CellKind.PROBABILITY, p)

    @classmethod
    def undetermined(cls) -> "SolvedCell":
        return cls(CellKind.UNDETERMINED, 0.0)

    @property
    def is_probability(self) -> bool:
        return self.kind is CellKind.PROBABILITY

    def as_number(self) -> float:
        """Compact numeric encoding used by the original board arrays."""
        if self.kind is CellKind.UNDETERMINED:
            return UNDETERMINED
        if self.kind is CellKind.CLEARED:
            return CLEARED
        return self.value
