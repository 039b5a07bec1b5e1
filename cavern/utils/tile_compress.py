"""Utility helpers for compact encoding of grid rows in API payloads.

Format strategy:
  - Input: one row of the grid as a string of cell digits (e.g. ``"1110001"``).
  - Runs of the same digit become ``<digit>*<count>`` tokens joined by commas,
    prefixed with an ``R:`` marker.
  - If the encoded payload is not shorter than the raw row, the raw row is kept.

Compressed grammar (simple):
  R:d0*n0,d1*n1,...

Limitations:
  - Cells must be single characters other than ``*`` and ``,``.
  - Decoding returns an empty string on malformed input.
"""

from __future__ import annotations

from typing import List

from ..caves.cells import Grid


def compress_row(raw: str) -> str:
    """Return the run-length representation of ``raw`` or ``raw`` itself.

    Args:
        raw: Row of single-character cells (e.g. ``"111000"``).

    Returns:
        String starting with ``R:`` when that is shorter, otherwise ``raw``.
    """
    if not raw:
        return raw
    runs = []
    current = raw[0]
    count = 0
    for ch in raw:
        if ch == current:
            count += 1
        else:
            runs.append(f"{current}*{count}")
            current, count = ch, 1
    runs.append(f"{current}*{count}")
    compressed = "R:" + ",".join(runs)
    return compressed if len(compressed) < len(raw) else raw


def decompress_row(data: str) -> str:
    """Inverse of :func:`compress_row`.

    Input without the ``R:`` marker is returned unchanged. On a parse failure an
    empty string is returned (callers treat it as a failed decode).
    """
    if not data or not data.startswith("R:"):
        return data
    try:
        out = []
        for token in data[2:].split(","):
            ch, n = token.split("*")
            if len(ch) != 1 or int(n) <= 0:
                return ""
            out.append(ch * int(n))
        return "".join(out)
    except ValueError:
        return ""


def grid_to_rows(grid: Grid) -> List[str]:
    """Row-major strings (one per y) from a column-major ``grid[x][y]``."""
    width = len(grid)
    height = len(grid[0]) if width else 0
    return ["".join(str(grid[x][y]) for x in range(width)) for y in range(height)]


def rows_to_grid(rows: List[str]) -> Grid:
    height = len(rows)
    width = len(rows[0]) if height else 0
    return [[int(rows[y][x]) for y in range(height)] for x in range(width)]


def compress_grid(grid: Grid) -> List[str]:
    return [compress_row(row) for row in grid_to_rows(grid)]


def decompress_grid(rows: List[str]) -> Grid:
    return rows_to_grid([decompress_row(row) for row in rows])


__all__ = [
    "compress_row",
    "decompress_row",
    "grid_to_rows",
    "rows_to_grid",
    "compress_grid",
    "decompress_grid",
]
