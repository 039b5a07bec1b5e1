from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'wall_regions': 0,
        'wall_regions_removed': 0,
        'room_regions': 0,
        'room_regions_removed': 0,
        'rooms': 0,
        'passages_carved': 0,
        'tiles_open': 0,
        'tiles_solid': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
