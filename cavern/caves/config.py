import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from .errors import CaveConfigError

MAX_SMOOTH_ITERATIONS = 10
MAX_DIMENSION = 512
MAX_BORDER_SIZE = 64
MAX_PASSAGE_RADIUS = 8
BOOL_FIELDS = ("use_random_seed", "remove_small_regions", "connect_regions", "enable_metrics")

# Environment / app config keys -> dataclass attribute
BOOL_OVERRIDES = {
    "CAVE_REMOVE_SMALL_REGIONS": "remove_small_regions",
    "CAVE_CONNECT_REGIONS": "connect_regions",
    "CAVE_ENABLE_GENERATION_METRICS": "enable_metrics",
}
INT_OVERRIDES = {
    "CAVE_BORDER_SIZE": "border_size",
}


@dataclass
class CaveConfig:
    width: int = 128
    height: int = 72
    random_fill_percent: int = 47
    seed: str = ""
    use_random_seed: bool = False
    smooth_iterations: int = 5
    remove_small_regions: bool = True
    wall_region_min_size: int = 5
    room_region_min_size: int = 20
    connect_regions: bool = True
    border_size: int = 5
    square_size: float = 1.0
    passage_radius: int = 1
    enable_metrics: bool = True

    def validate(self) -> "CaveConfig":
        """Reject out-of-range parameters. Returns self so calls can be chained."""
        for name in ("width", "height"):
            value = getattr(self, name)
            if not _is_int(value) or not 0 < value <= MAX_DIMENSION:
                raise CaveConfigError(f"{name} must be within [1, {MAX_DIMENSION}] (got {value!r})")
        if not _is_int(self.random_fill_percent) or not 0 <= self.random_fill_percent <= 100:
            raise CaveConfigError(f"random_fill_percent must be within [0, 100] (got {self.random_fill_percent!r})")
        if not _is_int(self.smooth_iterations) or not 0 <= self.smooth_iterations <= MAX_SMOOTH_ITERATIONS:
            raise CaveConfigError(
                f"smooth_iterations must be within [0, {MAX_SMOOTH_ITERATIONS}] (got {self.smooth_iterations!r})"
            )
        for name in ("wall_region_min_size", "room_region_min_size"):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                raise CaveConfigError(f"{name} must be a non-negative integer (got {value!r})")
        # At least one solid ring around the carved map
        if not _is_int(self.border_size) or not 1 <= self.border_size <= MAX_BORDER_SIZE:
            raise CaveConfigError(f"border_size must be within [1, {MAX_BORDER_SIZE}] (got {self.border_size!r})")
        if not _is_int(self.passage_radius) or not 1 <= self.passage_radius <= MAX_PASSAGE_RADIUS:
            raise CaveConfigError(
                f"passage_radius must be within [1, {MAX_PASSAGE_RADIUS}] (got {self.passage_radius!r})"
            )
        if isinstance(self.square_size, bool) or not isinstance(self.square_size, (int, float)) or self.square_size <= 0:
            raise CaveConfigError(f"square_size must be a positive number (got {self.square_size!r})")
        for name in BOOL_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise CaveConfigError(f"{name} must be a boolean (got {getattr(self, name)!r})")
        if not isinstance(self.seed, str):
            raise CaveConfigError(f"seed must be a string (got {type(self.seed).__name__})")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _is_int(value) -> bool:
    # bool is an int subclass; a flag is never a valid size
    return isinstance(value, int) and not isinstance(value, bool)


def _truthy(raw: str) -> bool:
    return str(raw).strip().lower() not in {"0", "false", "no", "off", ""}


def apply_env_overrides(config: CaveConfig, environ: Optional[Mapping[str, str]] = None) -> CaveConfig:
    """Apply CAVE_* overrides from the environment, then from the Flask app config (highest precedence)."""
    env = os.environ if environ is None else environ
    for key, attr in BOOL_OVERRIDES.items():
        if key in env:
            setattr(config, attr, _truthy(env[key]))
    for key, attr in INT_OVERRIDES.items():
        if key in env:
            try:
                setattr(config, attr, int(env[key]))
            except ValueError:
                raise CaveConfigError(f"{key} must be an integer (got {env[key]!r})")
    from flask import current_app, has_app_context

    if has_app_context():
        cfg = current_app.config
        for key, attr in BOOL_OVERRIDES.items():
            if key in cfg:
                setattr(config, attr, bool(cfg.get(key)))
        for key, attr in INT_OVERRIDES.items():
            if key in cfg:
                setattr(config, attr, int(cfg.get(key)))
    return config


__all__ = [
    "CaveConfig",
    "CaveConfigError",
    "apply_env_overrides",
    "MAX_SMOOTH_ITERATIONS",
    "MAX_DIMENSION",
    "MAX_BORDER_SIZE",
    "MAX_PASSAGE_RADIUS",
]
