from collections import deque

import pytest

from snake_ai.ai_snake import (
    AGGRESSIVE, BALANCED, DEFENSIVE, DEFENSIVE_PATH_STEPS, EASY, HARD, INTERCEPTING,
    MEDIUM, SEEKING_FOOD, STRATEGIC_POSITIONING, SURVIVAL, SURVIVAL_PATH_STEPS, AISnake,
)
from snake_ai.board import DOWN, LEFT, RIGHT, UP, Board
from snake_ai.food import Food
from snake_ai.pathfinding import BFSPathfinder
from snake_ai.snake import Snake


def frozen_clock():
    return 0.0


class FirstSearchTimesOut(BFSPathfinder):
    """Loses its first shortest-path search to the budget, then behaves normally."""

    def __init__(self, board):
        super().__init__(board, clock=frozen_clock)
        self.searches = 0

    def find_path(self, start, goal, obstacles):
        self.searches += 1
        if self.searches == 1:
            return []
        return super().find_path(start, goal, obstacles)


class EverySearchTimesOut(BFSPathfinder):
    """Shortest-path searches always run out of time."""

    def find_path(self, start, goal, obstacles):
        return []


def make_ai(board, x, y, direction, pathfinder=None, **kwargs):
    pathfinder = pathfinder or BFSPathfinder(board, clock=frozen_clock)
    return AISnake(x, y, direction, "#ff4141", board, pathfinder=pathfinder, **kwargs)


def make_food(x, y):
    food = Food()
    food.spawn(x, y)
    return food


@pytest.fixture
def board():
    return Board(10, 10)


@pytest.mark.parametrize("difficulty,interval,competitive", [
    (EASY, 500, False),
    (MEDIUM, 200, True),
    (HARD, 100, True),
])
def test_difficulty_settings(board, difficulty, interval, competitive):
    ai = make_ai(board, 5, 5, LEFT, difficulty=difficulty)
    assert ai.path_update_interval == interval
    assert ai.competitive_mode is competitive


def test_unknown_difficulty_raises(board):
    with pytest.raises(ValueError, match="Unknown difficulty"):
        make_ai(board, 5, 5, LEFT, difficulty="nightmare")

    ai = make_ai(board, 5, 5, LEFT)
    with pytest.raises(ValueError):
        ai.set_difficulty("impossible")
    assert ai.difficulty == MEDIUM


def test_forwards_movement_interface(board):
    ai = make_ai(board, 5, 5, LEFT)
    ai.grow()
    ai.add_score(10)
    ai.set_direction(UP)
    ai.snake.update()

    assert ai.head == (5, 4)
    assert ai.length == 2
    assert ai.score == 10
    assert ai.direction == UP
    assert ai.occupies_position(5, 5)
    assert not ai.is_valid_direction_change(DOWN)
    assert ai.get_predicted_positions(1) == [(5, 4), (5, 5), (5, 3)]


def test_obstacle_map_has_opponent_prediction_and_own_tail(board):
    opponent = Snake(5, 5, RIGHT)
    opponent.body = deque([(5, 5), (4, 5), (3, 5)])
    ai = make_ai(board, 1, 1, DOWN)
    ai.snake.body = deque([(1, 1), (1, 0), (0, 0)])

    obstacles = ai.create_obstacle_map(opponent)

    assert obstacles == {(5, 5), (4, 5), (3, 5), (6, 5), (7, 5), (1, 0), (0, 0)}
    assert ai.head not in obstacles


def test_analysis_reports_distances_and_scores(board):
    ai = make_ai(board, 8, 8, LEFT)
    opponent = Snake(1, 1, RIGHT)
    opponent.add_score(10)

    analysis = ai.analyze_game_state(opponent, make_food(4, 4))

    assert analysis['distance_to_food'] == 8
    assert analysis['player_distance_to_food'] == 6
    assert analysis['score_difference'] == -10
    assert analysis['ai_length'] == 1
    assert ai.strategy == BALANCED


@pytest.mark.parametrize("ai_points,opponent_points,posture", [
    (0, 50, AGGRESSIVE),
    (50, 0, DEFENSIVE),
    (20, 0, BALANCED),
    (0, 20, BALANCED),
    (0, 21, AGGRESSIVE),
])
def test_posture_follows_score_gap(board, ai_points, opponent_points, posture):
    ai = make_ai(board, 8, 8, LEFT)
    opponent = Snake(1, 1, RIGHT)
    ai.add_score(ai_points)
    opponent.add_score(opponent_points)

    ai.analyze_game_state(opponent, make_food(4, 4))

    assert ai.strategy == posture


@pytest.mark.parametrize("difficulty,posture,interval", [
    (MEDIUM, BALANCED, 200),
    (MEDIUM, AGGRESSIVE, 150),
    (MEDIUM, DEFENSIVE, 300),
    (HARD, AGGRESSIVE, 50),
    (HARD, DEFENSIVE, 200),
    (EASY, AGGRESSIVE, 450),
    (EASY, DEFENSIVE, 500),
])
def test_posture_intervals_do_not_accumulate(board, difficulty, posture, interval):
    ai = make_ai(board, 5, 5, LEFT, difficulty=difficulty)
    ai.strategy = posture
    for _ in range(5):
        assert ai.effective_update_interval() == interval


def test_seeks_food_along_shortest_path(board):
    ai = make_ai(board, 2, 5, RIGHT)
    opponent = Snake(0, 0, DOWN)
    food = make_food(6, 5)

    ai.update(opponent, food, now=0)

    assert ai.state == SEEKING_FOOD
    assert ai.head == (3, 5)
    assert ai.current_path == [(3, 5), (4, 5), (5, 5), (6, 5)]
    assert ai.ticks == 1


def test_cached_path_is_followed_without_recompute(board):
    ai = make_ai(board, 2, 5, RIGHT)
    opponent = Snake(0, 0, DOWN)
    food = make_food(6, 5)
    ai.current_path = [(2, 5), (3, 5), (4, 5)]

    recomputes = []
    original = ai.update_path

    def spy(opp, f):
        recomputes.append(ai.ticks)
        original(opp, f)

    ai.update_path = spy

    ai.update(opponent, food, now=1)
    assert recomputes == []
    assert ai.head == (3, 5)

    ai.update(opponent, food, now=250)
    assert recomputes == [2]


def test_single_entry_path_forces_recompute(board):
    ai = make_ai(board, 2, 5, RIGHT)
    opponent = Snake(0, 0, DOWN)
    food = make_food(6, 5)
    ai.current_path = [(2, 5)]
    ai.last_path_update = 0

    recomputes = []
    original = ai.update_path

    def spy(opp, f):
        recomputes.append(ai.ticks)
        original(opp, f)

    ai.update_path = spy
    ai.update(opponent, food, now=1)

    assert recomputes == [1]
    assert ai.last_path_update == 1
    assert ai.head == (3, 5)


def test_defensive_posture_waits_longer_before_recompute(board):
    ai = make_ai(board, 2, 5, RIGHT)
    ai.current_path = [(2, 5), (3, 5), (4, 5)]

    ai.strategy = BALANCED
    assert ai.needs_new_path(250)

    ai.strategy = DEFENSIVE
    assert not ai.needs_new_path(250)
    assert ai.needs_new_path(301)


def test_concedes_food_to_much_closer_opponent():
    board = Board(20, 10)
    ai = make_ai(board, 18, 5, LEFT)
    opponent = Snake(0, 5, UP)
    food = make_food(3, 5)

    ai.update(opponent, food, now=0)

    assert ai.state == STRATEGIC_POSITIONING
    assert ai.current_path[-1] == (4, 5)
    assert ai.head == (17, 5)


def test_easy_difficulty_always_races_for_food():
    board = Board(20, 10)
    ai = make_ai(board, 18, 5, LEFT, difficulty=EASY)
    opponent = Snake(0, 5, UP)
    food = make_food(3, 5)

    ai.update(opponent, food, now=0)

    assert ai.state == SEEKING_FOOD
    assert ai.current_path[-1] == (3, 5)


def test_intercepts_midpoint_of_opponent_path(board):
    ai = make_ai(board, 8, 8, LEFT, pathfinder=FirstSearchTimesOut(board))
    opponent = Snake(0, 5, RIGHT)
    food = make_food(5, 0)

    obstacles = ai.create_obstacle_map(opponent)
    opponent_path = BFSPathfinder(board, clock=frozen_clock).find_path(
        opponent.head, food.position, obstacles)
    midpoint = opponent_path[len(opponent_path) // 2]

    ai.update(opponent, food, now=0)

    assert ai.state == INTERCEPTING
    assert ai.current_path[-1] == midpoint


def test_survival_walk_when_no_path_is_found(board):
    ai = AISnake(5, 5, LEFT, "#ff4141", board, pathfinder=EverySearchTimesOut(board))
    opponent = Snake(0, 0, DOWN)
    food = make_food(9, 9)

    ai.update(opponent, food, now=0)

    assert ai.state == SURVIVAL
    assert len(ai.current_path) == SURVIVAL_PATH_STEPS - 1
    assert ai.head == (5, 4)


def test_emergency_move_when_boxed_in(board, capsys):
    ai = make_ai(board, 0, 0, UP, verbose=True)
    opponent = Snake(1, 0, RIGHT)
    opponent.body = deque([(1, 0), (1, 1), (0, 1)])
    food = make_food(5, 5)

    ai.update(opponent, food, now=0)

    assert ai.state == SURVIVAL
    assert ai.direction == UP
    assert ai.head == (0, -1)
    assert "No safe moves" in capsys.readouterr().out


def test_safe_movement_prefers_more_room(board):
    ai = make_ai(board, 5, 5, RIGHT)
    obstacles = {(5, 5), (4, 4), (6, 4), (5, 3)}

    # Up leads into a dead end; down and right tie, down comes first
    assert ai.find_safe_movement(obstacles) == DOWN
    assert ai.snake.next_direction == DOWN

    obstacles |= {(4, 6), (6, 6), (5, 7)}
    assert ai.find_safe_movement(obstacles) == RIGHT


def test_safe_movement_never_reverses(board):
    ai = make_ai(board, 5, 5, RIGHT)
    obstacles = {(5, 4), (5, 6), (6, 5)}

    # Left is the only open cell but would reverse into the neck
    assert ai.find_safe_movement(obstacles) == UP


def test_defensive_posture_swaps_short_path_for_safe_walk(board):
    ai = AISnake(5, 5, RIGHT, "#ff4141", board)
    ai.add_score(50)
    opponent = Snake(0, 9, RIGHT)
    food = make_food(6, 5)

    ai.update(opponent, food, now=0)

    assert ai.strategy == DEFENSIVE
    assert ai.state == SURVIVAL
    assert len(ai.current_path) == DEFENSIVE_PATH_STEPS - 1


def test_verbose_update_logs_decision(board, capsys):
    ai = make_ai(board, 2, 5, RIGHT, verbose=True)
    ai.update(Snake(0, 0, DOWN), make_food(6, 5), now=0)

    out = capsys.readouterr().out
    assert "TICK 1: SEEKING_FOOD" in out
    assert "Strategy: balanced" in out


def test_reads_clock_when_no_time_given(board):
    times = iter([1000.0, 1001.0])
    ai = make_ai(board, 2, 5, RIGHT, clock=lambda: next(times))
    opponent = Snake(0, 0, DOWN)
    food = make_food(6, 5)

    ai.update(opponent, food)
    assert ai.last_path_update == 1000.0

    ai.update(opponent, food)
    assert ai.last_path_update == 1000.0
    assert ai.head == (4, 5)
