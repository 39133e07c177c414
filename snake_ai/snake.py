"""
Snake entity: body segments, buffered direction and growth.
"""

import typing
from collections import deque

from snake_ai.board import OPPOSITES, Position, get_next_position


class MobileEntity(typing.Protocol):
    """What the game loop and the AI need from anything that moves on the board."""

    @property
    def head(self) -> Position: ...

    @property
    def body(self) -> typing.Sequence[Position]: ...

    def set_direction(self, direction: str) -> None: ...

    def update(self) -> None: ...


class Snake:
    """
    A snake on the grid.

    Attributes
    ----------
    body           : deque – [(x, y), ...] ordered head → tail; body[0] is the HEAD.
    direction      : str   – direction committed on the last update.
    next_direction : str   – buffered intent, applied on the next update.
    growth_pending : int   – segments to keep instead of dropping the tail.
    score          : int   – points collected so far.
    """

    def __init__(self, x: int, y: int, direction: str, color: str = "#00ff41"):
        self.body = deque([(x, y)])
        self.direction = direction
        self.next_direction = direction
        self.color = color
        self.score = 0
        self.growth_pending = 0

    @property
    def head(self) -> Position:
        return self.body[0]

    @property
    def length(self) -> int:
        return len(self.body)

    def update(self):
        """Commit the buffered direction (unless it reverses) and move one cell."""
        if self.is_valid_direction_change(self.next_direction):
            self.direction = self.next_direction

        self.body.appendleft(get_next_position(self.head, self.direction))

        if self.growth_pending > 0:
            self.growth_pending -= 1
        else:
            self.body.pop()

    def set_direction(self, direction: str):
        self.next_direction = direction

    def is_valid_direction_change(self, direction: str) -> bool:
        """A snake may never turn straight back into its own neck."""
        return OPPOSITES[self.direction] != direction

    def grow(self):
        self.growth_pending += 1

    def add_score(self, points: int):
        self.score += points

    def occupies_position(self, x: int, y: int) -> bool:
        return (x, y) in self.body

    def get_predicted_positions(self, steps: int = 3) -> typing.List[Position]:
        """
        Current body plus the next *steps* head cells along the current direction.

        The snake itself is not modified.
        """
        positions = list(self.body)
        head = self.head
        for _ in range(steps):
            head = get_next_position(head, self.direction)
            positions.append(head)
        return positions
