"""Utility functions for the Thrill Digger solver."""

from typing import Dict, List, Sequence, Tuple

# Module-level cache: (width, height) -> ((neighbor_idx, ...), ...) indexed by flat cell index
_NEIGHBORHOODS_CACHE: Dict[Tuple[int, int], Tuple[Tuple[int, ...], ...]] = {}


def get_neighborhoods(width: int, height: int) -> Tuple[Tuple[int, ...], ...]:
    """
    Precompute and cache 8-connected neighbor indices for every cell in a grid.

    Cells are addressed by their flattened row-major index
    (``index = row * width + col``). Neighbors are listed column offset first
    (-1, 0, 1) and row offset second, which fixes the order in which unknown
    cells are discovered by the constraint builder.

    Args:
        width: Grid width (number of columns). Must be positive.
        height: Grid height (number of rows). Must be positive.

    Returns:
        A tuple where entry ``i`` holds the flat indices of the valid
        neighbors of cell ``i``.

    Raises:
        ValueError: If width or height is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    key = (width, height)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: List[Tuple[int, ...]] = []
    for idx in range(width * height):
        col, row = idx % width, idx // width
        nbrs: List[int] = []
        for dc in (-1, 0, 1):
            for dr in (-1, 0, 1):
                if dc == 0 and dr == 0:
                    continue
                nc, nr = col + dc, row + dr
                if 0 <= nc < width and 0 <= nr < height:
                    nbrs.append(nr * width + nc)
        neighborhoods.append(tuple(nbrs))

    result = tuple(neighborhoods)
    _NEIGHBORHOODS_CACHE[key] = result
    return result


def flatten_grid(grid: Sequence[Sequence[int]], width: int, height: int) -> List[int]:
    """
    Copy a ``height`` x ``width`` grid into a flat row-major list.

    Raises:
        ValueError: If the grid shape does not match the declared dimensions.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")
    if len(grid) != height:
        raise ValueError(f"Expected {height} rows, got {len(grid)}.")

    flat: List[int] = []
    for row_idx, row in enumerate(grid):
        if len(row) != width:
            raise ValueError(
                f"Row {row_idx} has {len(row)} cells, expected {width}."
            )
        flat.extend(row)
    return flat


def index_to_coords(index: int, width: int) -> Tuple[int, int]:
    """Convert a flat index to (row, col)."""
    return index // width, index % width
