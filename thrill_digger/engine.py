"""Thrill Digger play-mode engine: hidden board, digging, and solver hand-off."""

import random
from typing import Dict, List, Optional, Tuple

from .cells import HAZARD, RUPOOR, SolvedCell, rupee_for_hazards, tier_for_hazards
from .config import GameConfig
from .solver import solve
from .utils import get_neighborhoods

# Play-mode cell values. Safe cells hold their rupee value (1, 5, 20, 100, 300).
BOMB = -1
RUPOOR_PENALTY = 10

RUPEE_NAMES: Dict[int, str] = {
    1: "Green rupee",
    5: "Blue rupee",
    20: "Red rupee",
    100: "Silver rupee",
    300: "Gold rupee",
}


def is_play_hazard(value: int) -> bool:
    return value == BOMB or value == RUPOOR


def count_adjacent_hazards(
    board: List[List[int]], row: int, col: int, width: int, height: int
) -> int:
    """Number of bombs and rupoors around (row, col) on a play-mode board."""
    neighbors = get_neighborhoods(width, height)[row * width + col]
    return sum(1 for n in neighbors if is_play_hazard(board[n // width][n % width]))


def generate_play_board(
    width: int,
    height: int,
    bomb_count: int,
    rupoor_count: int,
    rng: Optional[random.Random] = None,
) -> List[List[int]]:
    """
    Hide bombs and rupoors uniformly at random and fill the rest with rupees.

    Each safe cell's rupee reflects how many hazards surround it.

    Raises:
        ValueError: If the hazards do not fit on the board.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Width and height must be positive.")
    if bomb_count < 0 or rupoor_count < 0:
        raise ValueError("bomb_count and rupoor_count must be non-negative.")
    if bomb_count + rupoor_count > width * height:
        raise ValueError("Cannot place more hazards than there are cells.")

    rng = rng or random.Random()
    cells = rng.sample(range(width * height), bomb_count + rupoor_count)

    board = [[0 for _ in range(width)] for _ in range(height)]
    for i, idx in enumerate(cells):
        board[idx // width][idx % width] = BOMB if i < bomb_count else RUPOOR

    for row in range(height):
        for col in range(width):
            if board[row][col] == 0:
                hazards = count_adjacent_hazards(board, row, col, width, height)
                board[row][col] = rupee_for_hazards(hazards)

    return board


def to_solver_grid(
    board: List[List[int]],
    revealed: List[List[bool]],
    width: int,
    height: int,
) -> List[List[int]]:
    """
    Convert a play-mode board into the solve-mode grid the solver expects.

    Undug cells become 0, dug bombs and rupoors become the HAZARD marker, and
    dug rupees become the clue tier matching their true adjacent hazard count.
    """
    grid: List[List[int]] = []
    for row in range(height):
        out_row: List[int] = []
        for col in range(width):
            value = board[row][col]
            if not revealed[row][col]:
                out_row.append(0)
            elif is_play_hazard(value):
                out_row.append(HAZARD)
            else:
                hazards = count_adjacent_hazards(board, row, col, width, height)
                out_row.append(tier_for_hazards(hazards))
        grid.append(out_row)
    return grid


class ThrillDigger:
    """One play-mode round: a hidden board the player digs into cell by cell."""

    def __init__(self, config: GameConfig, rng: Optional[random.Random] = None) -> None:
        """
        Initialize a round with a freshly generated hidden board.

        Args:
            config: Difficulty preset (board size and hazard counts).
            rng: Random source for board generation; a new one if omitted.
        """
        self.config = config
        self.width: int = config.width
        self.height: int = config.height
        self.board: List[List[int]] = generate_play_board(
            config.width, config.height, config.bomb_count, config.rupoor_count, rng
        )
        self.revealed: List[List[bool]] = [
            [False for _ in range(self.width)] for _ in range(self.height)
        ]
        self.rupees: int = 0
        self.safe_remaining: int = (
            self.width * self.height - config.bomb_count - config.rupoor_count
        )
        self.game_over: bool = False

    def reveal(self, x: int, y: int) -> Tuple[int, Dict[str, object]]:
        """
        Dig up one cell.

        Returns:
            Tuple of (status, payload) where status is:
                - -1: bomb dug (loss)
                - 0: non-terminal dig (or no-op)
                - 1: every rupee dug (win)

            Payload holds "value" (the play-mode cell value) and "rupees"
            (the running total) for any dig that happened.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            raise ValueError("Cell coordinates are outside the board.")

        if self.game_over or self.revealed[y][x]:
            return 0, {}

        self.revealed[y][x] = True
        value = self.board[y][x]

        if value == BOMB:
            self.game_over = True
            return -1, {"value": value, "rupees": self.rupees}

        if value == RUPOOR:
            self.rupees = max(0, self.rupees - RUPOOR_PENALTY)
        else:
            self.rupees += value
            self.safe_remaining -= 1

        if self.safe_remaining == 0:
            self.game_over = True
            return 1, {"value": value, "rupees": self.rupees}

        return 0, {"value": value, "rupees": self.rupees}

    def solver_grid(self) -> List[List[int]]:
        """The dug state of this round in solve-mode encoding."""
        return to_solver_grid(self.board, self.revealed, self.width, self.height)

    def solve(self) -> Optional[List[SolvedCell]]:
        """Hazard probabilities for the current dug state."""
        return solve(
            self.solver_grid(),
            self.width,
            self.height,
            self.config.bomb_count,
            self.config.rupoor_count,
        )

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_HAZARD = "\033[91m"

    _SYMBOLS: Dict[int, str] = {1: "g", 5: "b", 20: "r", 100: "s", 300: "G"}

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _h(self, s: str) -> str:
        """Wrap string in hazard color (red)."""
        return f"{self._ANSI_HAZARD}{s}{self._ANSI_RESET}"

    def format_board(self, reveal_all: bool = False) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Rupees are shown by initial (g, b, r, s, G for gold), bombs as B and
        rupoors as R.
        """
        def cell_str(x: int, y: int) -> str:
            if not (reveal_all or self.revealed[y][x]):
                return "."
            v = self.board[y][x]
            if v == BOMB:
                return self._h("B")
            if v == RUPOOR:
                return self._h("R")
            return self._SYMBOLS[v]

        header_cells = " ".join(f"{x:2d}" for x in range(self.width))
        out = [self._c("   ") + self._c(header_cells)]
        out.append(self._c("   " + "-" * (3 * self.width - 1)))

        for y in range(self.height):
            row_cells = " ".join(f" {cell_str(x, y)}" for x in range(self.width))
            out.append(self._c(f"{y:2d} ") + self._c("|") + row_cells)

        return "\n".join(out)


def play_cli(game: ThrillDigger) -> None:
    """
    Run a simple terminal UI for playing Thrill Digger.

    Args:
        game: A ThrillDigger round to play.
    """
    from .analysis import format_solved_board

    print("Thrill Digger CLI (enter: x y). Coordinates are 0-based.")
    print("Type 'hint' for hazard probabilities, 'q' to quit.\n")
    print(game.format_board(reveal_all=False))

    while True:
        s = input("\nDig (x y): ").strip()
        if s.lower() in {"q", "quit", "exit"}:
            print("Quit.")
            return

        if s.lower() == "hint":
            solved = game.solve()
            if solved is None:
                print("The dug cells contradict the hazard counts.")
            else:
                print(format_solved_board(solved, game.width))
            continue

        parts = s.replace(",", " ").split()
        if len(parts) != 2:
            print("Invalid input. Example: 3 2")
            continue

        try:
            x = int(parts[0])
            y = int(parts[1])
        except ValueError:
            print("Invalid input. Coordinates must be integers.")
            continue

        try:
            status, payload = game.reveal(x, y)
        except ValueError as exc:
            print(exc)
            continue

        print(f"\nYou dug at ({x}, {y}).\n")
        print(game.format_board(reveal_all=False))
        if payload:
            value = payload["value"]
            if value == RUPOOR:
                print(f"\nRupoor! -{RUPOOR_PENALTY} rupees.")
            elif value != BOMB:
                print(f"\nFound a {RUPEE_NAMES[value]}.")
            print(f"Rupees: {payload['rupees']}")

        if status == -1:
            print("\nYou dug up a bomb. Game over.")
            print("\nFull board:")
            print(game.format_board(reveal_all=True))
            return

        if status == 1:
            print("\nYou dug up every rupee. You won!")
            print("\nFull board:")
            print(game.format_board(reveal_all=True))
            return
