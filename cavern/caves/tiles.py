# Tile constants centralized for modular imports
OPEN = 0  # floor
SOLID = 1  # wall

TILE_CHARS = {OPEN: ".", SOLID: "#"}


def tile_to_char(value: int) -> str:
    return TILE_CHARS.get(value, "?")


__all__ = ["OPEN", "SOLID", "TILE_CHARS", "tile_to_char"]
