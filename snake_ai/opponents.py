"""
Scripted stand-ins for the human player, so games can run unattended.

A controller receives (player, ai, food, board) once per tick and returns
the direction the player should press, or None to keep the current heading.
"""

import typing

from snake_ai.board import DIRECTIONS, Board, get_next_position
from snake_ai.food import Food
from snake_ai.pathfinding import BFSPathfinder
from snake_ai.snake import MobileEntity, Snake

Controller = typing.Callable[[Snake, MobileEntity, Food, Board], typing.Optional[str]]

TRAP_PENALTY = 100


def idle_player(player: Snake, ai: MobileEntity, food: Food, board: Board) -> typing.Optional[str]:
    """Never touches the keys; runs straight until it hits something."""
    return None


def greedy_player(player: Snake, ai: MobileEntity, food: Food, board: Board) -> typing.Optional[str]:
    """
    Step toward the food along any open neighbor, avoiding pockets smaller
    than the snake. Returns None when every neighbor is blocked.
    """
    # The current head becomes a body segment after the move
    obstacles = set(player.body) | set(ai.body)
    pathfinder = BFSPathfinder(board)

    best_move = None
    best_score = -float('inf')

    for direction in DIRECTIONS:
        if not player.is_valid_direction_change(direction):
            continue
        next_pos = get_next_position(player.head, direction)
        if not board.is_valid_position(*next_pos) or next_pos in obstacles:
            continue

        score = -board.get_distance(*next_pos, *food.position)
        space = pathfinder.evaluate_position_safety(next_pos, obstacles)
        if space < player.length:
            score -= TRAP_PENALTY

        if score > best_score:
            best_score = score
            best_move = direction

    return best_move


OPPONENTS: typing.Dict[str, Controller] = {
    "idle": idle_player,
    "greedy": greedy_player,
}
