"""
Headless game loop: a player snake against the AI snake.

One tick advances the player, then the AI, then resolves food and
collisions, in that fixed order. Nothing here draws, plays sound or
persists anything; callers hook in through the callbacks or read
get_result().
"""

import random
import typing
from dataclasses import dataclass

from snake_ai.ai_snake import MEDIUM, AISnake
from snake_ai.board import LEFT, RIGHT, Board
from snake_ai.food import BONUS, NORMAL, SUPER, Food
from snake_ai.opponents import Controller
from snake_ai.snake import Snake

PLAYER_COLOR = "#00ff41"
AI_COLOR = "#ff4141"

MIN_WIDTH = 6
MIN_HEIGHT = 3

# Winners
PLAYER = "player"
AI = "ai"
DRAW = "draw"


@dataclass
class GameConfig:
    """Settings for a single game"""
    width: int = 40
    height: int = 30
    game_speed: int = 150  # ms between ticks
    difficulty: str = MEDIUM
    max_ticks: int = 2000
    bonus_food_chance: float = 0.0
    super_food_chance: float = 0.0
    verbose: bool = False


class Game:
    def __init__(self, config: typing.Optional[GameConfig] = None,
                 player_controller: typing.Optional[Controller] = None,
                 seed: typing.Optional[int] = None):
        self.config = config or GameConfig()
        if self.config.width < MIN_WIDTH or self.config.height < MIN_HEIGHT:
            raise ValueError(
                f"Board {self.config.width}x{self.config.height} is too small; "
                f"need at least {MIN_WIDTH}x{MIN_HEIGHT}.")

        self.board = Board(self.config.width, self.config.height)
        self.rng = random.Random(seed)
        self.player_controller = player_controller

        self.is_running = False
        self.player: typing.Optional[Snake] = None
        self.ai: typing.Optional[AISnake] = None
        self.food: typing.Optional[Food] = None

        self.tick_count = 0
        self.now = 0.0
        self.winner: typing.Optional[str] = None
        self.death_reasons: typing.Dict[str, str] = {}

        # Callbacks
        self.on_score_update: typing.Optional[typing.Callable[[int, int], None]] = None
        self.on_game_over: typing.Optional[typing.Callable[[str, int, int], None]] = None

    def initialize_game(self):
        """Place both snakes facing each other across the middle row and spawn food."""
        mid_y = self.config.height // 2
        player_x = min(5, self.config.width // 4)
        ai_x = self.config.width - player_x

        self.player = Snake(player_x, mid_y, RIGHT, PLAYER_COLOR)
        self.ai = AISnake(ai_x, mid_y, LEFT, AI_COLOR, self.board,
                          difficulty=self.config.difficulty,
                          clock=lambda: self.now,
                          verbose=self.config.verbose)
        self.food = Food()

        self.tick_count = 0
        self.now = 0.0
        self.winner = None
        self.death_reasons = {}
        self.is_running = True

        self.spawn_food()

    def tick(self, now: typing.Optional[float] = None):
        """Advance the game by one step. `now` defaults to the previous time plus game_speed."""
        if not self.is_running:
            return

        self.now = self.now + self.config.game_speed if now is None else now
        self.tick_count += 1

        if self.player_controller is not None:
            direction = self.player_controller(self.player, self.ai, self.food, self.board)
            if direction is not None:
                self.player.set_direction(direction)

        self.player.update()
        self.ai.update(self.player, self.food, self.now)

        self.check_food_consumption()
        if self.is_running:
            self.check_collisions()

        if self.on_score_update:
            self.on_score_update(self.player.score, self.ai.score)

    def check_food_consumption(self):
        # Player is checked first; the AI is then checked against the respawned food
        for snake in (self.player, self.ai):
            if snake.head == self.food.position:
                snake.grow()
                snake.add_score(self.food.value)
                if not self.spawn_food():
                    self.end_game(False, False)
                    return

    def check_collisions(self):
        player_reason = self.check_snake_collision(self.player, self.ai)
        ai_reason = self.check_snake_collision(self.ai, self.player)

        if player_reason:
            self.death_reasons[PLAYER] = player_reason
        if ai_reason:
            self.death_reasons[AI] = ai_reason

        if player_reason or ai_reason:
            self.end_game(player_reason is not None, ai_reason is not None)

    def check_snake_collision(self, snake, other) -> typing.Optional[str]:
        """Return why *snake* just died, or None if it survived the move."""
        head = snake.head

        if not self.board.is_valid_position(*head):
            return "out-of-bounds"

        if head in list(snake.body)[1:]:
            return "self-collision"

        if head == other.head:
            return "head-collision"

        if head in other.body:
            return "snake-collision"

        return None

    def end_game(self, player_collision: bool, ai_collision: bool):
        self.is_running = False

        if player_collision and ai_collision:
            self.winner = DRAW
        elif player_collision:
            self.winner = AI
        elif ai_collision:
            self.winner = PLAYER
        elif self.player.score > self.ai.score:
            self.winner = PLAYER
        elif self.ai.score > self.player.score:
            self.winner = AI
        else:
            self.winner = DRAW

        if self.on_game_over:
            self.on_game_over(self.winner, self.player.score, self.ai.score)

    def spawn_food(self) -> bool:
        """Move the food to a random free cell. Returns False if the board is full."""
        occupied = set(self.player.body) | set(self.ai.body)
        free = [(x, y)
                for x in range(self.board.width)
                for y in range(self.board.height)
                if (x, y) not in occupied]
        if not free:
            return False

        x, y = self.rng.choice(free)

        roll = self.rng.random()
        if roll < self.config.super_food_chance:
            food_type = SUPER
        elif roll < self.config.super_food_chance + self.config.bonus_food_chance:
            food_type = BONUS
        else:
            food_type = NORMAL

        self.food.spawn(x, y, food_type)
        return True

    def run(self) -> typing.Dict:
        """Play a full game on a simulated clock and return its result."""
        if not self.is_running:
            self.initialize_game()

        while self.is_running and self.tick_count < self.config.max_ticks:
            self.tick()

        if self.is_running:
            # Tick cap reached, decide on score
            self.end_game(False, False)

        return self.get_result()

    def get_result(self) -> typing.Dict:
        return {
            "winner": self.winner,
            "ticks": self.tick_count,
            "player_score": self.player.score,
            "ai_score": self.ai.score,
            "player_length": self.player.length,
            "ai_length": self.ai.length,
            "death_reasons": dict(self.death_reasons),
        }
