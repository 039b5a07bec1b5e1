from typing import List, NamedTuple


class Coord(NamedTuple):
    """Grid index pair (x, y)."""

    x: int
    y: int


# Column-major: grid[x][y]
Grid = List[List[int]]
Region = List[Coord]

# Neighbour expansion order shared by flood fill and edge tile detection
ORTHOGONAL = ((-1, 0), (0, -1), (0, 1), (1, 0))
