"""Straight passages between rooms.

The line walker is an integer incremental (Bresenham style) rasteriser: one
point per step along the longer axis, the shorter axis advancing whenever the
accumulated gradient reaches the major length. The end point itself is not
emitted; with radius >= 1 the disk stamped around the last point reaches it.
"""
from __future__ import annotations

from typing import List

from .cells import Coord, Grid
from .rooms import Room, connect_rooms
from .tiles import OPEN


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def get_line(start: Coord, end: Coord) -> List[Coord]:
    x, y = start
    dx = end[0] - start[0]
    dy = end[1] - start[1]

    inverted = False
    step = _sign(dx)
    gradient_step = _sign(dy)
    longest = abs(dx)
    shortest = abs(dy)

    if longest < shortest:
        inverted = True
        longest, shortest = shortest, longest
        step, gradient_step = gradient_step, step

    line: List[Coord] = []
    gradient_accumulation = longest // 2
    for _ in range(longest):
        line.append(Coord(x, y))
        if inverted:
            y += step
        else:
            x += step
        gradient_accumulation += shortest
        if gradient_accumulation >= longest:
            if inverted:
                x += gradient_step
            else:
                y += gradient_step
            gradient_accumulation -= longest
    return line


def draw_circle(grid: Grid, center: Coord, radius: int) -> int:
    """Open every in-bounds cell within ``radius`` of ``center``; returns cells changed."""
    width, height = len(grid), len(grid[0])
    opened = 0
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if dx * dx + dy * dy > radius * radius:
                continue
            rx, ry = center[0] + dx, center[1] + dy
            if 0 <= rx < width and 0 <= ry < height and grid[rx][ry] != OPEN:
                grid[rx][ry] = OPEN
                opened += 1
    return opened


def create_passage(grid: Grid, room_a: Room, room_b: Room, tile_a: Coord, tile_b: Coord, radius: int = 1) -> List[Coord]:
    connect_rooms(room_a, room_b)
    line = get_line(tile_a, tile_b)
    for point in line:
        draw_circle(grid, point, radius)
    return line


__all__ = ["get_line", "draw_circle", "create_passage"]
