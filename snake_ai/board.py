"""
Board geometry for the snake arena.

Positions are (x, y) tuples with (0, 0) at the top-left corner, so moving
UP decreases y and moving DOWN increases y.
"""

import typing

Position = typing.Tuple[int, int]

# Constants
LEFT = 'left'
RIGHT = 'right'
DOWN = 'down'
UP = 'up'

# Enumeration order matters: neighbor order and tie-breaks follow it.
DIRECTIONS = [UP, DOWN, LEFT, RIGHT]

DIR_DELTA = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

OPPOSITES = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}


def get_next_position(pos: Position, direction: str) -> Position:
    """Calculate the next position given a position and direction."""
    dx, dy = DIR_DELTA[direction]
    return pos[0] + dx, pos[1] + dy


def direction_towards(src: Position, dst: Position) -> typing.Optional[str]:
    """Cardinal direction from src to an adjacent dst, horizontal first."""
    if dst[0] > src[0]:
        return RIGHT
    elif dst[0] < src[0]:
        return LEFT
    elif dst[1] > src[1]:
        return DOWN
    elif dst[1] < src[1]:
        return UP
    return None


class Board:
    """Fixed-size grid. Holds no state beyond its dimensions."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_distance(self, x1: int, y1: int, x2: int, y2: int) -> int:
        """Manhattan distance between two cells."""
        return abs(x1 - x2) + abs(y1 - y2)

    def get_neighbors(self, x: int, y: int) -> typing.List[Position]:
        """In-bounds neighbors of (x, y) in up, down, left, right order."""
        neighbors = []
        for direction in DIRECTIONS:
            dx, dy = DIR_DELTA[direction]
            nx, ny = x + dx, y + dy
            if self.is_valid_position(nx, ny):
                neighbors.append((nx, ny))
        return neighbors
