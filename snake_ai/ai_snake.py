"""
AI-controlled snake.

Each tick the AI reads the opponent and the food, refreshes its cached path
when the path is stale, and steers along it. Path selection falls through
a fixed ladder of states:

  SEEKING_FOOD           -> shortest path to the food
  STRATEGIC_POSITIONING  -> opponent is clearly closer, park next to the food
  INTERCEPTING           -> no path to the food, cut the opponent off
  SURVIVAL               -> nothing reachable, follow the longest safe walk

A coarse score comparison picks a posture (aggressive / defensive /
balanced) that only tunes the recompute interval and how eagerly the snake
prefers safe walks over short paths.
"""

import time
import typing

import numpy as np

from snake_ai.board import DIRECTIONS, Board, Position, direction_towards, get_next_position
from snake_ai.food import Food
from snake_ai.pathfinding import BFSPathfinder, Path
from snake_ai.snake import Snake

# Decision states
SEEKING_FOOD = 'SEEKING_FOOD'
INTERCEPTING = 'INTERCEPTING'
SURVIVAL = 'SURVIVAL'
STRATEGIC_POSITIONING = 'STRATEGIC_POSITIONING'

# Postures
AGGRESSIVE = 'aggressive'
DEFENSIVE = 'defensive'
BALANCED = 'balanced'

# Difficulty levels
EASY = 'easy'
MEDIUM = 'medium'
HARD = 'hard'

# difficulty -> (path update interval in ms, competitive mode)
DIFFICULTY_SETTINGS = {
    EASY: (500, False),
    MEDIUM: (200, True),
    HARD: (100, True),
}

# Strategy thresholds
SCORE_DIFFERENCE_THRESHOLD = 20
AGGRESSIVE_INTERVAL_REDUCTION = 50
MIN_PATH_UPDATE_INTERVAL = 50
DEFENSIVE_INTERVAL_INCREASE = 100
MAX_DEFENSIVE_INTERVAL = 300

# Opponent body is treated as occupying this many cells ahead of its head
OPPONENT_PREDICTION_STEPS = 2

# Give up the race when the opponent's path is this many steps shorter
COMPETITIVE_MARGIN = 3
MIN_INTERCEPT_PATH = 2

SURVIVAL_PATH_STEPS = 5
DEFENSIVE_MIN_PATH = 3
DEFENSIVE_SAFE_PATH_DEPTH = 10
DEFENSIVE_PATH_STEPS = 8


def _wall_clock_ms() -> float:
    return time.time() * 1000


class AISnake:
    """
    A Snake steered by BFS pathfinding.

    Owns its Snake rather than extending it and forwards the movement
    interface, so the game loop can treat both players alike.
    """

    def __init__(self, x: int, y: int, direction: str, color: str, board: Board,
                 difficulty: str = MEDIUM,
                 clock: typing.Callable[[], float] = _wall_clock_ms,
                 pathfinder: typing.Optional[BFSPathfinder] = None,
                 verbose: bool = False):
        """
        Initialize the AI snake.

        Args:
            x, y: Starting head cell
            direction: Starting direction
            color: Display color
            board: Board to plan on
            difficulty: One of easy, medium, hard
            clock: Current time in milliseconds, used when update() gets no timestamp
            pathfinder: Search engine; a BFSPathfinder over board by default
            verbose: Print each path recompute
        """
        self.snake = Snake(x, y, direction, color)
        self.board = board
        self.pathfinder = pathfinder or BFSPathfinder(board, verbose=verbose)
        self.clock = clock
        self.verbose = verbose

        self.last_path_update = 0.0
        self.current_path: Path = []
        self.state = SEEKING_FOOD
        self.strategy = BALANCED
        self.ticks = 0

        self.set_difficulty(difficulty)

    # Movement interface, forwarded to the owned snake

    @property
    def head(self) -> Position:
        return self.snake.head

    @property
    def body(self):
        return self.snake.body

    @property
    def direction(self) -> str:
        return self.snake.direction

    @property
    def color(self) -> str:
        return self.snake.color

    @property
    def score(self) -> int:
        return self.snake.score

    @property
    def length(self) -> int:
        return self.snake.length

    def set_direction(self, direction: str):
        self.snake.set_direction(direction)

    def is_valid_direction_change(self, direction: str) -> bool:
        return self.snake.is_valid_direction_change(direction)

    def grow(self):
        self.snake.grow()

    def add_score(self, points: int):
        self.snake.add_score(points)

    def occupies_position(self, x: int, y: int) -> bool:
        return self.snake.occupies_position(x, y)

    def get_predicted_positions(self, steps: int = 3) -> typing.List[Position]:
        return self.snake.get_predicted_positions(steps)

    # Configuration

    def set_difficulty(self, difficulty: str):
        """Difficulty only changes timing and competitiveness, never the search."""
        if difficulty not in DIFFICULTY_SETTINGS:
            raise ValueError(
                f"Unknown difficulty '{difficulty}'. "
                f"Expected one of: {', '.join(DIFFICULTY_SETTINGS)}")
        self.difficulty = difficulty
        self.path_update_interval, self.competitive_mode = DIFFICULTY_SETTINGS[difficulty]

    # Decision cycle

    def update(self, opponent: Snake, food: Food, now: typing.Optional[float] = None):
        """
        Run one decision cycle and move one cell.

        Args:
            opponent: The other snake
            food: Current food pellet
            now: Current time in milliseconds; read from the clock when omitted
        """
        if now is None:
            now = self.clock()
        self.ticks += 1

        self.analyze_game_state(opponent, food)
        self.make_decision(opponent, food, now)
        self.snake.update()

    def analyze_game_state(self, opponent: Snake, food: Food) -> typing.Dict:
        """Read the score gap and pick a posture for this tick."""
        fx, fy = food.position
        analysis = {
            'player_score': opponent.score,
            'ai_score': self.score,
            'score_difference': self.score - opponent.score,
            'player_length': len(opponent.body),
            'ai_length': self.length,
            'distance_to_food': self.board.get_distance(*self.head, fx, fy),
            'player_distance_to_food': self.board.get_distance(*opponent.head, fx, fy),
        }

        if analysis['score_difference'] < -SCORE_DIFFERENCE_THRESHOLD:
            self.strategy = AGGRESSIVE  # Behind, take more risks
        elif analysis['score_difference'] > SCORE_DIFFERENCE_THRESHOLD:
            self.strategy = DEFENSIVE  # Ahead, play it safe
        else:
            self.strategy = BALANCED

        return analysis

    def effective_update_interval(self) -> float:
        """Recompute interval for the current posture."""
        base = self.path_update_interval
        if self.strategy == AGGRESSIVE:
            return max(MIN_PATH_UPDATE_INTERVAL, base - AGGRESSIVE_INTERVAL_REDUCTION)
        if self.strategy == DEFENSIVE:
            return max(base, min(MAX_DEFENSIVE_INTERVAL, base + DEFENSIVE_INTERVAL_INCREASE))
        return base

    def needs_new_path(self, now: float) -> bool:
        # A single remaining entry means the goal has been reached
        return (now - self.last_path_update > self.effective_update_interval()
                or len(self.current_path) <= 1)

    def make_decision(self, opponent: Snake, food: Food, now: float):
        if self.needs_new_path(now):
            self.update_path(opponent, food)
            self.last_path_update = now

        if self.strategy == DEFENSIVE:
            self.prefer_safe_path(opponent)

        self.follow_path()

    def create_obstacle_map(self, opponent: Snake) -> typing.Set[Position]:
        """Opponent body and its likely next cells, plus our own body except the head."""
        obstacles = set(opponent.get_predicted_positions(OPPONENT_PREDICTION_STEPS))
        obstacles.update(list(self.body)[1:])
        return obstacles

    def update_path(self, opponent: Snake, food: Food):
        obstacles = self.create_obstacle_map(opponent)

        self.state = SEEKING_FOOD
        self.current_path = self.pathfinder.find_path(self.head, food.position, obstacles)

        if not self.current_path:
            self.implement_competitive_strategy(opponent, food, obstacles)
        elif len(self.current_path) > 1 and self.competitive_mode:
            self.evaluate_competitive_opportunity(opponent, food, obstacles)

        if len(self.current_path) <= 1:
            self.find_safe_movement(obstacles)

        if self.verbose:
            print(f"TICK {self.ticks}: {self.state} | Strategy: {self.strategy} | "
                  f"Path: {len(self.current_path)} | Head: {self.head} | Food: {food.position}")

    def evaluate_competitive_opportunity(self, opponent: Snake, food: Food,
                                         obstacles: typing.Set[Position]):
        """Stop racing for food the opponent will clearly reach first."""
        ai_distance = len(self.current_path)
        player_path = self.pathfinder.find_path(opponent.head, food.position, obstacles)

        if player_path and ai_distance > len(player_path) + COMPETITIVE_MARGIN:
            self.find_strategic_position(food, obstacles)

    def find_strategic_position(self, food: Food, obstacles: typing.Set[Position]):
        """Head for the closest free cell next to the food instead of the food itself."""
        targets = [cell for cell in self.board.get_neighbors(*food.position)
                   if cell not in obstacles]
        if not targets:
            return

        best_path = self.pathfinder.find_best_path(self.head, targets, obstacles)
        if best_path:
            self.current_path = best_path
            self.state = STRATEGIC_POSITIONING

    def implement_competitive_strategy(self, opponent: Snake, food: Food,
                                       obstacles: typing.Set[Position]):
        """No path to the food: try to cut the opponent off, else just survive."""
        player_to_food = self.pathfinder.find_path(opponent.head, food.position, obstacles)

        if len(player_to_food) > MIN_INTERCEPT_PATH:
            intercept_point = player_to_food[len(player_to_food) // 2]
            self.current_path = self.pathfinder.find_path(self.head, intercept_point, obstacles)
            if self.current_path:
                self.state = INTERCEPTING

        if not self.current_path:
            self.state = SURVIVAL
            safe_path = self.pathfinder.find_longest_safe_path(self.head, obstacles)
            self.current_path = safe_path[:SURVIVAL_PATH_STEPS]

    def find_safe_movement(self, obstacles: typing.Set[Position]) -> str:
        """
        Steer toward the open neighbor with the most room.

        With no open neighbor, take the first non-reversing direction and
        leave collision handling to the game loop.
        """
        candidates = []
        safety_scores = []

        for direction in DIRECTIONS:
            if not self.is_valid_direction_change(direction):
                continue
            next_pos = get_next_position(self.head, direction)
            if self.board.is_valid_position(*next_pos) and next_pos not in obstacles:
                candidates.append(direction)
                safety_scores.append(self.pathfinder.evaluate_position_safety(next_pos, obstacles))

        if candidates:
            # argmax returns the first maximum, so ties keep enumeration order
            best = candidates[int(np.argmax(safety_scores))]
            self.set_direction(best)
            return best

        if self.verbose:
            print(f"TICK {self.ticks}: No safe moves detected! Picking emergency move")
        for direction in DIRECTIONS:
            if self.is_valid_direction_change(direction):
                self.set_direction(direction)
                return direction
        return self.direction

    def prefer_safe_path(self, opponent: Snake):
        """Defensive posture: trade a short path for a longer safe walk."""
        if len(self.current_path) >= DEFENSIVE_MIN_PATH:
            return

        obstacles = self.create_obstacle_map(opponent)
        safe_path = self.pathfinder.find_longest_safe_path(
            self.head, obstacles, DEFENSIVE_SAFE_PATH_DEPTH)
        if len(safe_path) > len(self.current_path):
            self.current_path = safe_path[:DEFENSIVE_PATH_STEPS]
            self.state = SURVIVAL

    def follow_path(self):
        """Aim at the next cell of the cached path and consume the current one."""
        if len(self.current_path) > 1:
            direction = direction_towards(self.head, self.current_path[1])
            if direction is not None:
                self.set_direction(direction)
            self.current_path.pop(0)
