"""Pipeline orchestration for cave generation.

``CaveGenerator`` owns one grid per run and walks it through the phases in a
fixed order:

    random fill -> smoothing -> wall pruning -> room collection
        -> room connection -> border padding -> mesh builder hand-off

Everything runs on a local grid. Results (``grid``, ``bordered_grid``,
``rooms``, ``seed``, ``metrics``) are only published on the instance once every
phase has succeeded, so a failed run never leaves a half-carved map behind.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Optional

from ..logging_utils import get_logger
from .cells import Grid
from .config import CaveConfig, apply_env_overrides
from .connectivity import connect_closest_rooms
from .errors import CaveConfigError
from .metrics import init_metrics
from .noise import random_fill_map, resolve_seed
from .regions import collect_rooms, prune_wall_regions
from .rooms import Room, mark_main_room, sort_rooms
from .smoothing import smooth_map
from .tiles import OPEN, SOLID

log = get_logger("cavern.caves")

MeshBuilder = Callable[[Grid, float], Any]


def add_border(grid: Grid, border_size: int = 5) -> Grid:
    """Return a new grid with ``border_size`` solid cells on every side."""
    width = len(grid)
    height = len(grid[0]) if width else 0
    bordered: Grid = []
    for x in range(width + border_size * 2):
        column = []
        for y in range(height + border_size * 2):
            inside = border_size <= x < width + border_size and border_size <= y < height + border_size
            column.append(grid[x - border_size][y - border_size] if inside else SOLID)
        bordered.append(column)
    return bordered


def count_tiles(grid: Grid, value: int) -> int:
    return sum(column.count(value) for column in grid)


class CaveGenerator:
    def __init__(
        self,
        config: CaveConfig | None = None,
        *,
        mesh_builder: Optional[MeshBuilder] = None,
        seed_source: Optional[Callable[[], str]] = None,
        env_overrides: bool = False,
    ):
        self.config = config if config is not None else CaveConfig()
        if env_overrides:
            apply_env_overrides(self.config)
        self.mesh_builder = mesh_builder
        self.seed_source = seed_source
        # Published results of the last successful generation
        self.seed: Optional[str] = None
        self.grid: Optional[Grid] = None
        self.bordered_grid: Optional[Grid] = None
        self.rooms: List[Room] = []
        self.metrics: Dict[str, Any] = {}

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def generate(self) -> None:
        """Run one full generation and store the finished map on the instance."""
        cfg = self.config
        try:
            cfg.validate()
        except CaveConfigError as exc:
            log.warn(event="cave_config_invalid", error=str(exc))
            raise

        metrics: Dict[str, Any] = init_metrics() if cfg.enable_metrics else {}
        phase_times: Dict[str, int] = {}
        start = time.perf_counter()

        def _phase(label, fn, *a, **k):
            if not cfg.enable_metrics:
                return fn(*a, **k)
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            return r

        seed = resolve_seed(cfg.seed, cfg.use_random_seed, self.seed_source)
        grid = _phase('random_fill', random_fill_map, cfg.width, cfg.height, cfg.random_fill_percent, seed)
        _phase('smooth', smooth_map, grid, cfg.smooth_iterations)

        wall_min = cfg.wall_region_min_size if cfg.remove_small_regions else 0
        wall_regions, walls_removed = _phase('prune_walls', prune_wall_regions, grid, wall_min)
        rooms, room_regions, rooms_removed = _phase(
            'collect_rooms', collect_rooms, grid, cfg.room_region_min_size, cfg.remove_small_regions
        )

        carved = 0
        if cfg.connect_regions and rooms:
            rooms = sort_rooms(rooms)
            mark_main_room(rooms)
            carved = _phase(
                'connect_rooms',
                connect_closest_rooms,
                grid,
                rooms,
                cfg.passage_radius,
                metrics if cfg.enable_metrics else None,
            )

        bordered = _phase('add_border', add_border, grid, cfg.border_size)

        if cfg.enable_metrics:
            metrics['wall_regions'] = wall_regions
            metrics['wall_regions_removed'] = walls_removed
            metrics['room_regions'] = room_regions
            metrics['room_regions_removed'] = rooms_removed
            metrics['rooms'] = len(rooms)
            metrics['tiles_open'] = count_tiles(grid, OPEN)
            metrics['tiles_solid'] = count_tiles(grid, SOLID)
            metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
            metrics['phase_ms'] = phase_times

        # Publish only after every phase succeeded
        self.seed = seed
        self.grid = grid
        self.bordered_grid = bordered
        self.rooms = rooms
        self.metrics = metrics
        log.info(
            event="cave_generated",
            seed=seed,
            width=cfg.width,
            height=cfg.height,
            rooms=len(rooms),
            passages=carved,
        )

        if self.mesh_builder is not None:
            self.mesh_builder(bordered, cfg.square_size)


__all__ = ["CaveGenerator", "add_border", "count_tiles", "MeshBuilder"]
