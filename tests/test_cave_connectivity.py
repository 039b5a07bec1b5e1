import pytest

from cavern.caves.cells import Coord
from cavern.caves.connectivity import closest_tile_pair, connect_closest_rooms, squared_distance
from cavern.caves.errors import CaveInvariantError
from cavern.caves.regions import collect_rooms
from cavern.caves.rooms import Room, mark_main_room, sort_rooms
from tests.cave_test_utils import bfs_open, open_rect, solid_grid


def _prepared_rooms(grid):
    rooms, _, _ = collect_rooms(grid, 0)
    rooms = sort_rooms(rooms)
    mark_main_room(rooms)
    return rooms


def test_squared_distance():
    assert squared_distance(Coord(1, 1), Coord(4, 5)) == 25


def test_closest_pair_first_found_wins_ties():
    a = Room(tiles=[Coord(0, 1)], edge_tiles=[Coord(0, 1)])
    b = Room(tiles=[Coord(2, 0), Coord(2, 2)], edge_tiles=[Coord(2, 0), Coord(2, 2)])
    assert closest_tile_pair(a, b) == (5, Coord(0, 1), Coord(2, 0))


def test_two_rooms_single_passage():
    grid = solid_grid(12, 5)
    open_rect(grid, 1, 1, 3, 3)
    open_rect(grid, 8, 1, 10, 3)
    rooms = _prepared_rooms(grid)
    assert closest_tile_pair(rooms[0], rooms[1])[0] == 25
    assert connect_closest_rooms(grid, rooms) == 1
    assert all(r.is_reachable_from_main for r in rooms)
    assert (10, 3) in bfs_open(grid, (1, 1))


def test_isolated_pair_is_forced_onto_main():
    grid = solid_grid(30, 6)
    open_rect(grid, 1, 1, 5, 4)  # main room, 20 cells
    open_rect(grid, 8, 1, 9, 2)
    open_rect(grid, 18, 1, 19, 2)
    open_rect(grid, 23, 1, 24, 2)
    rooms = _prepared_rooms(grid)
    assert rooms[0].size == 20 and rooms[0].is_main_room
    metrics = {}
    # main<->B and C<->D in the first phase, then C<->B to reach the main room
    assert connect_closest_rooms(grid, rooms, metrics=metrics) == 3
    assert metrics["passages_carved"] == 3
    assert all(r.is_reachable_from_main for r in rooms)
    reached = bfs_open(grid, (1, 1))
    for room in rooms:
        assert all((t.x, t.y) in reached for t in room.tiles)


def test_single_room_needs_no_passage():
    grid = solid_grid(8, 8)
    open_rect(grid, 2, 2, 5, 5)
    rooms = _prepared_rooms(grid)
    assert connect_closest_rooms(grid, rooms) == 0
    assert connect_closest_rooms(grid, []) == 0


def test_room_without_edge_tiles_is_an_invariant_failure():
    main = Room(tiles=[Coord(1, 1)], edge_tiles=[Coord(1, 1)])
    broken = Room(tiles=[Coord(5, 5)], edge_tiles=[])
    mark_main_room([main, broken])
    with pytest.raises(CaveInvariantError):
        connect_closest_rooms(solid_grid(8, 8), [main, broken])
