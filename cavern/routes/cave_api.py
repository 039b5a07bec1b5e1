"""
project: Cavern
module: cave_api.py
License: MIT

Cave generation API routes.

A generation request carries the same parameters as ``CaveConfig``; keys may
be given in camelCase (``randomFillPercent``) or snake_case
(``random_fill_percent``). Omitted keys fall back to the defaults, with the
CAVE_* flags from the environment / app config applied first.
"""

import os
import threading
from dataclasses import astuple, fields

from flask import Blueprint, jsonify, request

from cavern.caves import CaveConfig, CaveConfigError, CaveGenerator, apply_env_overrides
from cavern.logging_utils import get_logger
from cavern.utils.tile_compress import compress_grid

log = get_logger("cavern.api")

bp_cave = Blueprint("cave", __name__)

# camelCase request key -> CaveConfig attribute
_CAMEL_KEYS = {
    "randomFillPercent": "random_fill_percent",
    "useRandomSeed": "use_random_seed",
    "smoothIterations": "smooth_iterations",
    "removeSmallRegions": "remove_small_regions",
    "wallRegionMinSize": "wall_region_min_size",
    "roomRegionMinSize": "room_region_min_size",
    "connectRegions": "connect_regions",
    "borderSize": "border_size",
    "squareSize": "square_size",
    "passageRadius": "passage_radius",
    "enableMetrics": "enable_metrics",
}
_FIELD_NAMES = {f.name for f in fields(CaveConfig)}

# Simple in-process cache keyed by the full config tuple. Only fixed seeds are
# cached; random-seed requests always regenerate.
_cave_cache = {}
_cave_cache_lock = threading.Lock()
_CAVE_CACHE_MAX = 8


def config_from_payload(payload: dict) -> CaveConfig:
    """Build a validated ``CaveConfig`` from a request body."""
    if not isinstance(payload, dict):
        raise CaveConfigError("request body must be a JSON object")
    config = apply_env_overrides(CaveConfig())
    for key, value in payload.items():
        attr = _CAMEL_KEYS.get(key, key)
        if attr not in _FIELD_NAMES:
            raise CaveConfigError(f"unknown parameter: {key}")
        if attr == "seed":
            value = "" if value is None else str(value)
        setattr(config, attr, value)
    return config.validate()


def get_cached_cave(config: CaveConfig) -> CaveGenerator:
    if config.use_random_seed or os.environ.get("CAVE_DISABLE_CACHE") == "1":
        gen = CaveGenerator(config)
        gen.generate()
        return gen
    key = astuple(config)
    with _cave_cache_lock:
        gen = _cave_cache.get(key)
        if gen is not None:
            return gen
    gen = CaveGenerator(config)
    gen.generate()
    with _cave_cache_lock:
        _cave_cache[key] = gen
        if len(_cave_cache) > _CAVE_CACHE_MAX:
            first_key = next(iter(_cave_cache.keys()))
            if first_key != key:
                _cave_cache.pop(first_key, None)
    return gen


def cave_payload(gen: CaveGenerator) -> dict:
    return {
        "seed": gen.seed,
        "width": gen.width,
        "height": gen.height,
        "border": gen.config.border_size,
        "rooms": len(gen.rooms),
        "grid": compress_grid(gen.bordered_grid),
        "metrics": gen.metrics,
    }


@bp_cave.route("/api/cave/generate", methods=["POST"])
def generate_cave():
    """Generate (or fetch from cache) a cave map.

    Body JSON (all optional): any ``CaveConfig`` field, camelCase or snake_case.

    Response: { "seed": <str>, "width": <int>, "height": <int>, "border": <int>,
                "rooms": <int>, "grid": [<row>...], "metrics": {...} }
    Rows are y-major strings of the padded grid ('1' wall, '0' floor), run-length
    encoded with an ``R:`` prefix when that is shorter.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    try:
        config = config_from_payload(data)
    except CaveConfigError as exc:
        log.warn(event="cave_request_rejected", error=str(exc))
        return jsonify({"error": str(exc)}), 400
    gen = get_cached_cave(config)
    return jsonify(cave_payload(gen))


@bp_cave.route("/api/cave/defaults")
def cave_defaults():
    """
    Return the default generation parameters (after CAVE_* overrides).
    Response: { "width": 128, "height": 72, ... }
    """
    return jsonify(apply_env_overrides(CaveConfig()).to_dict())
