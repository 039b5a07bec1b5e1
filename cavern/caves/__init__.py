"""Public cave package interface."""

from .cells import Coord, Grid  # noqa: F401
from .config import CaveConfig, apply_env_overrides  # noqa: F401
from .errors import CaveConfigError, CaveInvariantError  # noqa: F401
from .pipeline import CaveGenerator, add_border  # noqa: F401
from .regions import get_regions  # noqa: F401
from .rooms import Room  # noqa: F401
from .tiles import OPEN, SOLID  # noqa: F401

__all__ = [
    "CaveGenerator",
    "CaveConfig",
    "CaveConfigError",
    "CaveInvariantError",
    "Coord",
    "Grid",
    "Room",
    "OPEN",
    "SOLID",
    "add_border",
    "apply_env_overrides",
    "get_regions",
]
