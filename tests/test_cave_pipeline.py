"""End-to-end generation tests for CaveGenerator."""

import pytest

from cavern.caves import CaveConfig, CaveConfigError, CaveGenerator, add_border
from cavern.caves.tiles import OPEN, SOLID
from tests.cave_test_utils import bfs_open


def small_config(**overrides):
    params = dict(width=60, height=40, seed="granite")
    params.update(overrides)
    return CaveConfig(**params)


def open_cells(grid):
    return {(x, y) for x in range(len(grid)) for y in range(len(grid[0])) if grid[x][y] == OPEN}


def test_same_seed_same_cave():
    a = CaveGenerator(small_config())
    b = CaveGenerator(small_config())
    a.generate()
    b.generate()
    assert a.bordered_grid == b.bordered_grid
    assert a.seed == b.seed == "granite"


def test_different_seeds_differ():
    a = CaveGenerator(small_config(seed="granite"))
    b = CaveGenerator(small_config(seed="basalt"))
    a.generate()
    b.generate()
    assert a.grid != b.grid


def test_border_padding_is_solid():
    gen = CaveGenerator(small_config(border_size=5))
    gen.generate()
    bordered = gen.bordered_grid
    assert len(bordered) == 70 and len(bordered[0]) == 50
    for x in range(70):
        for y in range(50):
            if x < 5 or x >= 65 or y < 5 or y >= 45:
                assert bordered[x][y] == SOLID
            else:
                assert bordered[x][y] == gen.grid[x - 5][y - 5]


def test_add_border_wraps_grid_in_solid_ring():
    grid = [[OPEN, OPEN], [OPEN, OPEN]]
    padded = add_border(grid, 1)
    assert len(padded) == 4 and len(padded[0]) == 4
    assert padded[1][1:3] == [OPEN, OPEN] and padded[2][1:3] == [OPEN, OPEN]
    assert padded[0] == [SOLID] * 4 and padded[3] == [SOLID] * 4


def test_zero_border_rejected():
    gen = CaveGenerator(small_config(border_size=0))
    with pytest.raises(CaveConfigError):
        gen.generate()
    assert gen.bordered_grid is None


@pytest.mark.parametrize("seed", [str(i) for i in range(25, 33)])
def test_outer_ring_solid_with_wide_passages(seed):
    gen = CaveGenerator(small_config(seed=seed, border_size=1, passage_radius=3))
    gen.generate()
    bordered = gen.bordered_grid
    width, height = len(bordered), len(bordered[0])
    ring = [(x, y) for x in range(width) for y in range(height) if x in (0, width - 1) or y in (0, height - 1)]
    assert all(bordered[x][y] == SOLID for x, y in ring)


@pytest.mark.parametrize("seed", ["granite", "basalt", "shale", "42", "obsidian"])
def test_all_open_cells_connected(seed):
    gen = CaveGenerator(small_config(seed=seed))
    gen.generate()
    cells = open_cells(gen.grid)
    if not cells:
        assert gen.rooms == []
        return
    assert bfs_open(gen.grid, next(iter(cells))) == cells
    assert all(r.is_reachable_from_main for r in gen.rooms)
    assert sum(1 for r in gen.rooms if r.is_main_room) == 1
    assert gen.rooms[0].is_main_room


def test_rooms_sorted_largest_first():
    gen = CaveGenerator(small_config(seed="shale"))
    gen.generate()
    sizes = [r.size for r in gen.rooms]
    assert sizes == sorted(sizes, reverse=True)
    assert all(size >= 20 for size in sizes)


@pytest.mark.parametrize("field,value", [("width", 0), ("height", 0), ("random_fill_percent", 101)])
def test_invalid_config_publishes_nothing(field, value):
    gen = CaveGenerator(small_config(**{field: value}))
    with pytest.raises(CaveConfigError):
        gen.generate()
    assert gen.grid is None and gen.bordered_grid is None and gen.seed is None


def test_failed_regeneration_keeps_previous_map():
    gen = CaveGenerator(small_config())
    gen.generate()
    previous = gen.bordered_grid
    gen.config.width = 0
    with pytest.raises(CaveConfigError):
        gen.generate()
    assert gen.bordered_grid is previous
    assert gen.seed == "granite"


def test_random_seed_is_recorded_and_replayable():
    gen = CaveGenerator(small_config(seed="ignored", use_random_seed=True), seed_source=lambda: "1700000000.5")
    gen.generate()
    assert gen.seed == "1700000000.5"
    replay = CaveGenerator(small_config(seed=gen.seed))
    replay.generate()
    assert replay.bordered_grid == gen.bordered_grid


def test_full_fill_has_no_rooms():
    gen = CaveGenerator(small_config(random_fill_percent=100))
    gen.generate()
    assert gen.rooms == []
    assert not open_cells(gen.bordered_grid)
    assert gen.metrics["passages_carved"] == 0


def test_zero_smoothing_is_allowed():
    gen = CaveGenerator(small_config(smooth_iterations=0))
    gen.generate()
    assert gen.grid is not None


def test_mesh_builder_receives_padded_grid():
    calls = []
    gen = CaveGenerator(small_config(square_size=2.5), mesh_builder=lambda grid, size: calls.append((grid, size)))
    gen.generate()
    assert len(calls) == 1
    assert calls[0][0] is gen.bordered_grid
    assert calls[0][1] == 2.5


def test_mesh_builder_not_called_on_failure():
    calls = []
    gen = CaveGenerator(small_config(width=0), mesh_builder=lambda grid, size: calls.append(grid))
    with pytest.raises(CaveConfigError):
        gen.generate()
    assert calls == []


def test_metrics_keys():
    gen = CaveGenerator(small_config())
    gen.generate()
    m = gen.metrics
    for key in (
        "wall_regions",
        "wall_regions_removed",
        "room_regions",
        "room_regions_removed",
        "rooms",
        "passages_carved",
        "tiles_open",
        "tiles_solid",
        "runtime_ms",
        "phase_ms",
    ):
        assert key in m
    assert m["rooms"] == len(gen.rooms)
    assert m["tiles_open"] + m["tiles_solid"] == 60 * 40
    assert "random_fill" in m["phase_ms"] and "add_border" in m["phase_ms"]


def test_passages_counted_once_per_connection():
    gen = CaveGenerator(small_config(seed="basalt"))
    gen.generate()
    links = sum(len(r.connected_rooms) for r in gen.rooms)
    assert gen.metrics["passages_carved"] == links // 2


def test_metrics_disabled():
    gen = CaveGenerator(small_config(enable_metrics=False))
    gen.generate()
    assert gen.metrics == {}


def test_connection_disabled_leaves_rooms_unmarked():
    gen = CaveGenerator(small_config(seed="basalt", connect_regions=False))
    gen.generate()
    assert not any(r.is_main_room for r in gen.rooms)
    assert gen.metrics["passages_carved"] == 0


def test_region_removal_disabled_keeps_small_regions():
    kept = CaveGenerator(small_config(remove_small_regions=False, connect_regions=False))
    kept.generate()
    pruned = CaveGenerator(small_config(connect_regions=False))
    pruned.generate()
    assert kept.metrics["room_regions_removed"] == 0
    assert kept.metrics["wall_regions_removed"] == 0
    assert len(kept.rooms) >= len(pruned.rooms)


def test_env_overrides_applied(monkeypatch):
    monkeypatch.setenv("CAVE_BORDER_SIZE", "2")
    monkeypatch.setenv("CAVE_ENABLE_GENERATION_METRICS", "0")
    gen = CaveGenerator(small_config(), env_overrides=True)
    gen.generate()
    assert len(gen.bordered_grid) == 64
    assert gen.metrics == {}


def test_generation_logs_event(capsys):
    gen = CaveGenerator(small_config())
    gen.generate()
    out = capsys.readouterr().out
    assert "event=cave_generated" in out
    assert "seed=granite" in out


@pytest.mark.performance
def test_default_size_generation_time():
    import time

    gen = CaveGenerator(CaveConfig(seed="perf"))
    start = time.perf_counter()
    gen.generate()
    elapsed = time.perf_counter() - start
    # Generous guardrail against large regressions, not a benchmark
    assert elapsed < 30.0, f"default-size generation took {elapsed:.2f}s"
    assert len(gen.bordered_grid) == 138 and len(gen.bordered_grid[0]) == 82
