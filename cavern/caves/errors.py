class CaveConfigError(ValueError):
    """Raised when generation parameters are out of range, before any grid is allocated."""


class CaveInvariantError(RuntimeError):
    """Raised when an internal algorithm precondition does not hold (e.g. a room without edge tiles)."""


__all__ = ["CaveConfigError", "CaveInvariantError"]
