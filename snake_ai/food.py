"""
Food pellet: a single active cell plus its type.
"""

import typing

from snake_ai.board import Position

NORMAL = 'normal'
BONUS = 'bonus'
SUPER = 'super'

# type -> (points, display color)
FOOD_TYPES = {
    NORMAL: (10, "#ffff41"),
    BONUS: (25, "#ff41ff"),
    SUPER: (50, "#41ffff"),
}


class Food:
    def __init__(self):
        self.x = 0
        self.y = 0
        self.food_type = NORMAL
        self.value, self.color = FOOD_TYPES[NORMAL]

    def spawn(self, x: int, y: int, food_type: str = NORMAL):
        """Move the pellet to (x, y) and retype it."""
        if food_type not in FOOD_TYPES:
            raise ValueError(
                f"Unknown food type '{food_type}'. "
                f"Expected one of: {', '.join(FOOD_TYPES)}")
        self.x = x
        self.y = y
        self.food_type = food_type
        self.value, self.color = FOOD_TYPES[food_type]

    @property
    def position(self) -> Position:
        return self.x, self.y

    def __repr__(self) -> str:
        return f"Food({self.food_type} at {self.position}, value={self.value})"
