"""Rooms: surviving floor regions plus their connection graph.

Connections are symmetric. Reachability from the main room only ever flips
from False to True and spreads through the whole connected component.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import List

from .cells import ORTHOGONAL, Coord, Grid, Region
from .tiles import SOLID


def find_edge_tiles(tiles: Region, grid: Grid) -> List[Coord]:
    """Tiles with a solid orthogonal neighbour, once per such neighbour.

    Neighbours outside the grid count as solid (the padded map is walled in).
    """
    width, height = len(grid), len(grid[0])
    edges: List[Coord] = []
    for tile in tiles:
        for dx, dy in ORTHOGONAL:
            nx, ny = tile.x + dx, tile.y + dy
            if not (0 <= nx < width and 0 <= ny < height) or grid[nx][ny] == SOLID:
                edges.append(tile)
    return edges


@dataclass(eq=False)
class Room:
    tiles: Region = field(repr=False)
    edge_tiles: List[Coord] = field(repr=False)
    connected_rooms: List["Room"] = field(default_factory=list, repr=False)
    is_main_room: bool = False
    is_reachable_from_main: bool = False

    @classmethod
    def from_region(cls, region: Region, grid: Grid) -> "Room":
        return cls(tiles=list(region), edge_tiles=find_edge_tiles(region, grid))

    @property
    def size(self) -> int:
        return len(self.tiles)

    def is_connected(self, other: "Room") -> bool:
        return any(r is other for r in self.connected_rooms)

    def set_reachable_from_main(self) -> None:
        """Mark this room and everything connected to it as reachable from the main room."""
        if self.is_reachable_from_main:
            return
        self.is_reachable_from_main = True
        seen = {id(self)}
        queue = deque([self])
        while queue:
            room = queue.popleft()
            for other in room.connected_rooms:
                if id(other) in seen:
                    continue
                seen.add(id(other))
                other.is_reachable_from_main = True
                queue.append(other)


def connect_rooms(a: Room, b: Room) -> None:
    a.connected_rooms.append(b)
    b.connected_rooms.append(a)
    if a.is_reachable_from_main:
        b.set_reachable_from_main()
    elif b.is_reachable_from_main:
        a.set_reachable_from_main()


def room_sort_key(room: Room) -> int:
    return -room.size


def sort_rooms(rooms: List[Room]) -> List[Room]:
    """Largest first; equal sizes keep discovery order (``sorted`` is stable)."""
    return sorted(rooms, key=room_sort_key)


def mark_main_room(rooms: List[Room]) -> Room | None:
    if not rooms:
        return None
    main = rooms[0]
    main.is_main_room = True
    main.is_reachable_from_main = True
    return main


__all__ = ["Room", "find_edge_tiles", "connect_rooms", "sort_rooms", "mark_main_room", "room_sort_key"]
