"""Room connection: guarantee every room is reachable from the main room.

Two greedy phases, both carving straight passages between edge tiles:

  * Phase 1: every room with no connection yet is linked to its closest other
    room (closest edge-tile pair by squared distance).
  * Phase 2: while some room is not reachable from the main room, carve the
    single closest (unreachable room, reachable room) pair.

Scan order (rooms in sorted order, then room A edge tiles, then room B edge
tiles, each in stored order) with a strict ``<`` comparison makes the first pair
found win ties, so results are reproducible for a given grid. Phase 2 may add a
passage between rooms already joined through a third room; that density is
part of the look and is kept.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from .cells import Coord, Grid
from .errors import CaveInvariantError
from .passages import create_passage
from .rooms import Room

log = get_logger("cavern.caves")

Candidate = Tuple[int, Coord, Coord, Room, Room]


def squared_distance(a: Coord, b: Coord) -> int:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2


def closest_tile_pair(room_a: Room, room_b: Room) -> Optional[Tuple[int, Coord, Coord]]:
    best: Optional[Tuple[int, Coord, Coord]] = None
    for tile_a in room_a.edge_tiles:
        for tile_b in room_b.edge_tiles:
            d = squared_distance(tile_a, tile_b)
            if best is None or d < best[0]:
                best = (d, tile_a, tile_b)
    return best


def _best_between(rooms_a: List[Room], rooms_b: List[Room]) -> Optional[Candidate]:
    best: Optional[Candidate] = None
    for room_a in rooms_a:
        for room_b in rooms_b:
            if room_a is room_b or room_a.is_connected(room_b):
                continue
            pair = closest_tile_pair(room_a, room_b)
            if pair is None:
                continue
            if best is None or pair[0] < best[0]:
                best = (pair[0], pair[1], pair[2], room_a, room_b)
    return best


def _check_edge_tiles(rooms: List[Room]) -> None:
    for index, room in enumerate(rooms):
        if not room.edge_tiles:
            log.error(event="cave_invariant_failed", reason="room_without_edge_tiles", room=index, size=room.size)
            raise CaveInvariantError(f"room {index} (size {room.size}) has no edge tiles")


def connect_isolated_rooms(grid: Grid, rooms: List[Room], radius: int = 1) -> int:
    """Phase 1. Returns the number of passages carved."""
    carved = 0
    for room_a in rooms:
        if room_a.connected_rooms:
            continue
        best = _best_between([room_a], rooms)
        if best is not None:
            _, tile_a, tile_b, _, room_b = best
            create_passage(grid, room_a, room_b, tile_a, tile_b, radius)
            carved += 1
    return carved


def force_reachability(grid: Grid, rooms: List[Room], radius: int = 1) -> int:
    """Phase 2. Returns the number of passages carved."""
    carved = 0
    while True:
        reachable = [r for r in rooms if r.is_reachable_from_main]
        unreachable = [r for r in rooms if not r.is_reachable_from_main]
        if not unreachable or not reachable:
            break
        best = _best_between(unreachable, reachable)
        if best is None:
            break
        _, tile_a, tile_b, room_a, room_b = best
        create_passage(grid, room_a, room_b, tile_a, tile_b, radius)
        carved += 1
    return carved


def connect_closest_rooms(
    grid: Grid, rooms: List[Room], radius: int = 1, metrics: Optional[Dict[str, Any]] = None
) -> int:
    """Connect ``rooms`` (sorted, main room first and marked) by carving into ``grid``.

    Returns the total number of passages carved.
    """
    if not rooms:
        return 0
    _check_edge_tiles(rooms)
    carved = connect_isolated_rooms(grid, rooms, radius)
    carved += force_reachability(grid, rooms, radius)
    if metrics is not None:
        metrics['passages_carved'] = metrics.get('passages_carved', 0) + carved
    return carved


__all__ = [
    "connect_closest_rooms",
    "connect_isolated_rooms",
    "force_reachability",
    "closest_tile_pair",
    "squared_distance",
]
