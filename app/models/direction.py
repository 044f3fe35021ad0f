"""
Orientation helpers shared by elements and nodes.

Older documents stored directions as single-letter tokens ('l', 'r', 'u', 'd');
FIX_DIRECTION maps every accepted token onto the canonical name.
"""

DIRECTIONS = ("RIGHT", "DOWN", "LEFT", "UP")

FIX_DIRECTION = {
    "LEFT": "LEFT",
    "l": "LEFT",
    "RIGHT": "RIGHT",
    "r": "RIGHT",
    "UP": "UP",
    "u": "UP",
    "DOWN": "DOWN",
    "d": "DOWN",
}

OPPOSITE_DIRECTION = {
    "RIGHT": "LEFT",
    "LEFT": "RIGHT",
    "DOWN": "UP",
    "UP": "DOWN",
}


def normalize_direction(direction: str) -> str:
    """Return the canonical name for a direction token (unknown tokens pass through)."""
    return FIX_DIRECTION.get(direction, direction)


def opposite_direction(direction: str) -> str:
    """Return the direction facing away from ``direction``.

    Legacy tokens are normalized first. Unrecognized values fall back to
    'LEFT', the opposite of the default 'RIGHT' orientation.
    """
    return OPPOSITE_DIRECTION.get(normalize_direction(direction), "LEFT")


def rotate(x: float, y: float, direction: str) -> tuple[float, float]:
    """Rotate a local (x, y) offset drawn for a RIGHT-facing element."""
    direction = normalize_direction(direction)
    if direction == "LEFT":
        return (-x, y)
    if direction == "DOWN":
        return (y, x)
    if direction == "UP":
        return (y, -x)
    return (x, y)
