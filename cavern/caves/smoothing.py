from .cells import Grid
from .tiles import OPEN, SOLID


def in_map_range(grid: Grid, x: int, y: int) -> bool:
    return 0 <= x < len(grid) and 0 <= y < len(grid[0])


def surrounding_wall_count(grid: Grid, gx: int, gy: int) -> int:
    """Count solid cells among the 8 neighbours; off-grid neighbours count as solid."""
    count = 0
    for nx in range(gx - 1, gx + 2):
        for ny in range(gy - 1, gy + 2):
            if nx == gx and ny == gy:
                continue
            if in_map_range(grid, nx, ny):
                count += grid[nx][ny]
            else:
                count += 1
    return count


def smooth_map(grid: Grid, iterations: int) -> Grid:
    """Apply ``iterations`` majority-rule passes to ``grid`` in place.

    Every pass reads from a snapshot of its input so freshly written cells never
    feed into their neighbours within the same pass.
    """
    if iterations < 0:
        raise ValueError("iterations must be >= 0")
    width = len(grid)
    height = len(grid[0]) if width else 0
    for _ in range(iterations):
        source = [column[:] for column in grid]
        for x in range(width):
            for y in range(height):
                walls = surrounding_wall_count(source, x, y)
                if walls > 4:
                    grid[x][y] = SOLID
                elif walls < 4:
                    grid[x][y] = OPEN
    return grid


__all__ = ["smooth_map", "surrounding_wall_count", "in_map_range"]
