"""
Breadth-first pathfinding for the AI snake.

Every search runs under a wall-clock budget so that a decision never
stalls the game loop:
- Shortest paths (BFS with parent pointers)
- Best of several targets
- Flood-fill safety score
- Depth-bounded longest safe path (DFS with backtracking)

Searches never raise. A search that runs out of time returns the same
empty path as an unreachable goal, so callers treat [] as "try the next
fallback", not as proof that the goal is unreachable.
"""

import time
import typing
from collections import deque

from snake_ai.board import Board, Position

# Budget per search, tuned for a 60 Hz frame
TIME_LIMIT_MS = 16

# Flood fill stops counting after this many cells
MAX_SAFETY_EVALUATION = 50

DEFAULT_SAFE_PATH_DEPTH = 20

Path = typing.List[Position]


class BFSPathfinder:
    """
    Time-bounded grid searches over a Board.
    """

    def __init__(self, board: Board, time_limit_ms: float = TIME_LIMIT_MS,
                 clock: typing.Callable[[], float] = time.perf_counter,
                 verbose: bool = False):
        """
        Initialize the pathfinder.

        Args:
            board: Board supplying bounds and adjacency
            time_limit_ms: Budget for a single search in milliseconds
            clock: Returns the current time in seconds
            verbose: Print a warning when a search runs out of time
        """
        self.board = board
        self.time_limit = time_limit_ms / 1000.0  # Convert to seconds
        self.clock = clock
        self.verbose = verbose
        self.start_time = 0.0

    def _start_timer(self):
        self.start_time = self.clock()

    def is_time_up(self) -> bool:
        """Check if the current search has exceeded its budget."""
        return self.clock() - self.start_time > self.time_limit

    def find_path(self, start: Position, goal: Position,
                  obstacles: typing.AbstractSet[Position]) -> Path:
        """
        Shortest path from start to goal.

        Args:
            start: Search origin (never checked against obstacles)
            goal: Target cell
            obstacles: Cells that may not be entered

        Returns:
            Cells from start to goal inclusive, or [] if the goal was not
            reached within the budget
        """
        self._start_timer()
        queue = deque([start])
        visited = {start}
        parent = {}

        while queue:
            if self.is_time_up():
                if self.verbose:
                    print(f"BFS exceeded {self.time_limit * 1000:.0f}ms budget, "
                          f"abandoning search {start} -> {goal}")
                break

            current = queue.popleft()

            if current == goal:
                return self.reconstruct_path(parent, current)

            for neighbor in self.board.get_neighbors(*current):
                if neighbor in visited or neighbor in obstacles:
                    continue
                visited.add(neighbor)
                parent[neighbor] = current
                queue.append(neighbor)

        return []

    @staticmethod
    def reconstruct_path(parent: typing.Dict[Position, Position], current: Position) -> Path:
        """Walk parent pointers back to the search origin."""
        path = [current]
        while current in parent:
            current = parent[current]
            path.append(current)
        path.reverse()
        return path

    def find_best_path(self, start: Position, targets: typing.Sequence[Position],
                       obstacles: typing.AbstractSet[Position]) -> Path:
        """
        Shortest path to any of several targets.

        Ties keep the earliest target in iteration order.
        """
        if not targets:
            return []
        if len(targets) == 1:
            return self.find_path(start, targets[0], obstacles)

        best_path = []
        shortest = float('inf')

        for target in targets:
            path = self.find_path(start, target, obstacles)
            if path and len(path) < shortest:
                best_path = path
                shortest = len(path)

        return best_path

    def evaluate_position_safety(self, position: Position,
                                 obstacles: typing.AbstractSet[Position]) -> int:
        """
        Count open cells reachable from position, capped at MAX_SAFETY_EVALUATION.

        Used to rank moves when no goal path exists; a cheap proxy for how much
        room a move leads into rather than an exact area.
        """
        queue = deque([position])
        visited = {position}
        safe_spaces = 0

        while queue and safe_spaces < MAX_SAFETY_EVALUATION:
            x, y = queue.popleft()
            safe_spaces += 1

            for neighbor in self.board.get_neighbors(x, y):
                if neighbor in visited or neighbor in obstacles:
                    continue
                visited.add(neighbor)
                queue.append(neighbor)

        return safe_spaces

    def find_longest_safe_path(self, start: Position, obstacles: typing.AbstractSet[Position],
                               max_depth: int = DEFAULT_SAFE_PATH_DEPTH) -> Path:
        """
        Longest obstacle-free walk from start, for survival mode.

        Args:
            start: Walk origin
            obstacles: Cells that may not be entered
            max_depth: Maximum number of cells in the returned path

        Returns:
            The longest walk found before the depth bound or the budget cut
            the search off; at least [start]
        """
        self._start_timer()
        visited = set()
        longest = [start]

        def dfs(current: Position, path: Path, depth: int):
            nonlocal longest
            if self.is_time_up() or depth >= max_depth:
                return

            visited.add(current)

            if len(path) > len(longest):
                longest = list(path)

            for neighbor in self.board.get_neighbors(*current):
                if neighbor in visited or neighbor in obstacles:
                    continue
                path.append(neighbor)
                dfs(neighbor, path, depth + 1)
                path.pop()

            # Backtrack so sibling branches may pass through this cell
            visited.discard(current)

        dfs(start, [start], 0)
        return longest
