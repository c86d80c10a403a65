"""Four-connected grid maps and goal distance heuristics."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

MAX_TIMESTEP = (2**31 - 1) // 2

Coordinate = tuple[int, int]


@dataclass(frozen=True)
class Grid:
    """A rectangular grid with blocked cells, addressed by linear location."""

    rows: int
    cols: int
    obstacles: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError("a grid needs at least one row and one column")
        object.__setattr__(self, "obstacles", frozenset(self.obstacles))

    def linearize(self, row: int, col: int) -> int:
        """Location index of the cell at (row, col)."""
        return row * self.cols + col

    def coordinate(self, loc: int) -> Coordinate:
        """(row, col) of a location index."""
        return divmod(loc, self.cols)

    def row_of(self, loc: int) -> int:
        return loc // self.cols

    def col_of(self, loc: int) -> int:
        return loc % self.cols

    def is_obstacle(self, loc: int) -> bool:
        return loc in self.obstacles

    def _inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def neighbors(self, loc: int) -> list[int]:
        """Free cells one step away from ``loc``."""
        row, col = self.coordinate(loc)
        result = []
        for d_row, d_col in ((0, 1), (0, -1), (1, 0), (-1, 0)):
            r, c = row + d_row, col + d_col
            if self._inside(r, c):
                nxt = self.linearize(r, c)
                if not self.is_obstacle(nxt):
                    result.append(nxt)
        return result

    def next_locations(self, loc: int) -> list[int]:
        """Cells reachable in one timestep: the neighbours and ``loc`` itself."""
        return [*self.neighbors(loc), loc]

    def manhattan(self, a: int | Coordinate, b: int | Coordinate) -> int:
        """Manhattan distance between two locations or two coordinates."""
        ra, ca = a if isinstance(a, tuple) else self.coordinate(a)
        rb, cb = b if isinstance(b, tuple) else self.coordinate(b)
        return abs(ra - rb) + abs(ca - cb)


def distance_map(grid: Grid, goal: int) -> list[int]:
    """Shortest step count from every cell to ``goal``; unreachable cells get MAX_TIMESTEP."""
    distances = [MAX_TIMESTEP] * (grid.rows * grid.cols)
    distances[goal] = 0
    queue = deque([goal])
    while queue:
        curr = queue.popleft()
        for nxt in grid.neighbors(curr):
            if distances[nxt] > distances[curr] + 1:
                distances[nxt] = distances[curr] + 1
                queue.append(nxt)
    return distances


def compute_heuristics(grid: Grid, goals: Sequence[int]) -> tuple[list[list[int]], list[int]]:
    """Distance maps for a goal sequence and the remaining travel after each goal.

    The second list holds, for goal ``i``, the distance from goal ``i`` through
    every later goal to the last one.
    """
    distances = [distance_map(grid, goal) for goal in goals]
    landmarks = [0] * len(goals)
    for i in reversed(range(len(goals) - 1)):
        landmarks[i] = landmarks[i + 1] + distances[i + 1][goals[i]]
    return distances, landmarks