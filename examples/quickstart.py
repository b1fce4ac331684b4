"""
Quickstart example for the Thrill Digger Solver.

This script demonstrates basic usage of the solver.
"""

import random

from thrill_digger import (
    CellKind,
    ThrillDigger,
    assess_workload,
    format_solved_board,
    get_game_config,
    run_solver_benchmark,
    safest_cell,
    solve,
)


def main():
    print("=" * 60)
    print("Thrill Digger Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: Solve an authored board
    print("\n1. Solving an Intermediate board (6x5, 4 bombs, 4 rupoors)...")
    print("-" * 60)

    grid = [
        [0, 0, 0, 0, 0, 0],
        [-10, 0, 0, 0, 0, 0],
        [0, 4, 0, 0, 0, 0],
        [0, 0, 0, 2, 0, 0],
        [0, 0, 0, 0, 0, 0],
    ]

    workload = assess_workload(grid, 6, 5)
    print(f"Cells to search: {workload.unknown_count} (~{workload.estimated_seconds}s)")

    solved = solve(grid, 6, 5, bomb_count=4, rupoor_count=4)
    if solved is None:
        print("Not a valid board.")
    else:
        print(format_solved_board(solved, 6))
        best = safest_cell(solved, 6)
        if best is not None:
            print(f"Safest dig: ({best % 6}, {best // 6})")

    # Example 2: Contradictory board
    print("\n2. A gold rupee with a single bomb on the board...")
    print("-" * 60)

    impossible = [[0, 0, 0], [0, 8, 0], [0, 0, 0]]
    print(f"Result: {solve(impossible, 3, 3, bomb_count=1, rupoor_count=0)}")

    # Example 3: Play a round, solving after every dig
    print("\n3. Playing a Beginner round guided by the solver...")
    print("-" * 60)

    game = ThrillDigger(get_game_config("beginner"), rng=random.Random(7))
    last = None
    while not game.game_over:
        solved = game.solve()
        if solved is None:
            break
        target = safest_cell(solved, game.width, last)
        if target is None:
            target = next(
                i for i, cell in enumerate(solved)
                if cell.kind in (CellKind.PROBABILITY, CellKind.CLEARED)
            )
        last = target
        status, payload = game.reveal(target % game.width, target // game.width)
        print(f"Dig ({target % game.width}, {target // game.width}) -> {payload['value']}")
        if status == -1:
            print("Hit a bomb.")
        elif status == 1:
            print("Cleared the board!")
    print(f"Rupees collected: {game.rupees}")
    print(game.format_board(reveal_all=True))

    # Example 4: Benchmark
    print("\n4. Solve times on 20 Intermediate boards...")
    print("-" * 60)

    results = run_solver_benchmark("intermediate", 20, seed=1)
    print(f"Mean solve time: {results['seconds'].mean() * 1000:.1f} ms")
    print(f"Mean searched unknowns: {results['searched_unknowns'].mean():.1f}")
    print(f"Mean estimated unknowns: {results['estimated_unknowns'].mean():.1f}")

    print("\n" + "=" * 60)
    print("Done! See README.md for more detailed usage instructions.")
    print("=" * 60)


if __name__ == "__main__":
    main()
