"""Region labeling and small-region pruning.

Regions are 4-connected components of equal-valued cells found by breadth-first
flood fill. Scan order is x-major then y-minor, which fixes region discovery
order (and therefore room order and the main-room tie-break) for a given grid.
"""
from __future__ import annotations

from collections import deque
from typing import List, Tuple

from .cells import ORTHOGONAL, Coord, Grid, Region
from .rooms import Room
from .tiles import OPEN, SOLID


def get_region_tiles(grid: Grid, start_x: int, start_y: int, flags: List[List[bool]]) -> Region:
    """Flood fill from (start_x, start_y), marking ``flags`` as cells are queued."""
    width, height = len(grid), len(grid[0])
    tile_type = grid[start_x][start_y]
    tiles: Region = []
    queue = deque([Coord(start_x, start_y)])
    flags[start_x][start_y] = True
    while queue:
        tile = queue.popleft()
        tiles.append(tile)
        for dx, dy in ORTHOGONAL:
            nx, ny = tile.x + dx, tile.y + dy
            if 0 <= nx < width and 0 <= ny < height and not flags[nx][ny] and grid[nx][ny] == tile_type:
                flags[nx][ny] = True
                queue.append(Coord(nx, ny))
    return tiles


def get_regions(grid: Grid, tile_value: int) -> List[Region]:
    """Return every 4-connected region of ``tile_value`` cells, in discovery order."""
    width = len(grid)
    height = len(grid[0]) if width else 0
    flags = [[False for _ in range(height)] for _ in range(width)]
    regions: List[Region] = []
    for x in range(width):
        for y in range(height):
            if not flags[x][y] and grid[x][y] == tile_value:
                regions.append(get_region_tiles(grid, x, y, flags))
    return regions


def fill_region(grid: Grid, region: Region, value: int) -> None:
    for tile in region:
        grid[tile.x][tile.y] = value


def prune_wall_regions(grid: Grid, min_size: int) -> Tuple[int, int]:
    """Open up wall regions smaller than ``min_size``.

    Returns (wall_region_count, removed_count).
    """
    regions = get_regions(grid, SOLID)
    removed = 0
    for region in regions:
        if len(region) < min_size:
            fill_region(grid, region, OPEN)
            removed += 1
    return len(regions), removed


def collect_rooms(grid: Grid, min_size: int, remove_small: bool = True) -> Tuple[List[Room], int, int]:
    """Fill in floor regions smaller than ``min_size`` and wrap the rest as rooms.

    Returns (rooms, room_region_count, removed_count).
    """
    regions = get_regions(grid, OPEN)
    surviving: List[Region] = []
    removed = 0
    for region in regions:
        if remove_small and len(region) < min_size:
            fill_region(grid, region, SOLID)
            removed += 1
        else:
            surviving.append(region)
    rooms = [Room.from_region(region, grid) for region in surviving]
    return rooms, len(regions), removed


__all__ = [
    "get_regions",
    "get_region_tiles",
    "prune_wall_regions",
    "collect_rooms",
    "fill_region",
]
