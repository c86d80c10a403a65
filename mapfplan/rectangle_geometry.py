"""Geometry of rectangle conflicts between two agents on a grid."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from .grid import Coordinate, Grid
from .paths import Path


class Barrier(NamedTuple):
    """A barrier constraint on a straight segment of cells.

    The agent must not occupy ``end`` at ``time``, the cell before it at
    ``time - 1``, and so on back to ``start``.
    """

    agent: int
    start: int
    end: int
    time: int


def get_rs(s1: Coordinate, s2: Coordinate, g1: Coordinate) -> Coordinate:
    """Start corner of the rectangle spanned by two agents' moves."""
    if s1[0] == g1[0]:
        x = s1[0]
    elif s1[0] < g1[0]:
        x = max(s1[0], s2[0])
    else:
        x = min(s1[0], s2[0])
    if s1[1] == g1[1]:
        y = s1[1]
    elif s1[1] < g1[1]:
        y = max(s1[1], s2[1])
    else:
        y = min(s1[1], s2[1])
    return x, y


def get_rg(s1: Coordinate, g1: Coordinate, g2: Coordinate) -> Coordinate:
    """Goal corner of the rectangle spanned by two agents' moves."""
    if s1[0] == g1[0]:
        x = g1[0]
    elif s1[0] < g1[0]:
        x = min(g1[0], g2[0])
    else:
        x = max(g1[0], g2[0])
    if s1[1] == g1[1]:
        y = g1[1]
    elif s1[1] < g1[1]:
        y = min(g1[1], g2[1])
    else:
        y = max(g1[1], g2[1])
    return x, y


def is_rectangle_conflict(
    s1: Coordinate, s2: Coordinate, g1: Coordinate, g2: Coordinate
) -> bool:
    """True when the two segments form a rectangle conflict (RM variant)."""
    if s1 == s2 or s1 == g1 or s2 == g2:
        return False
    if (s1[0] - g1[0]) * (s2[0] - g2[0]) < 0 or (s1[1] - g1[1]) * (s2[1] - g2[1]) < 0:
        return False
    return not (
        (s1[0] == g1[0] and s2[1] == g2[1]) or (s1[1] == g1[1] and s2[0] == g2[0])
    )


def is_manhattan_rectangle(
    s1: Coordinate, s2: Coordinate, g1: Coordinate, g2: Coordinate, g1_t: int, g2_t: int
) -> bool:
    """True when both moves are Manhattan-optimal and go the same way."""
    return (
        g1_t == abs(s1[0] - g1[0]) + abs(s1[1] - g1[1])
        and g2_t == abs(s2[0] - g2[0]) + abs(s2[1] - g2[1])
        and (s1[0] - g1[0]) * (s2[0] - g2[0]) >= 0
        and (s1[1] - g1[1]) * (s2[1] - g2[1]) >= 0
    )


def classify_rectangle_conflict(
    s1: Coordinate, s2: Coordinate, g1: Coordinate, g2: Coordinate, rg: Coordinate
) -> int:
    """2 for cardinal, 1 for semi-cardinal, 0 for non-cardinal (RM variant)."""
    if (s2[0] - s1[0]) * (s1[0] - g1[0]) < 0 and (s2[1] - s1[1]) * (s1[1] - g1[1]) < 0:
        return 0
    if (s1[0] - s2[0]) * (s2[0] - g2[0]) < 0 and (s1[1] - s2[1]) * (s2[1] - g2[1]) < 0:
        return 0

    if (s1[0] == s2[0] and (s1[1] - s2[1]) * (s2[1] - rg[1]) >= 0) or (
        s1[0] != s2[0] and (s1[0] - s2[0]) * (s2[0] - rg[0]) < 0
    ):
        cardinal1 = int(rg[0] == g1[0])
        cardinal2 = int(rg[1] == g2[1])
    else:
        cardinal1 = int(rg[1] == g1[1])
        cardinal2 = int(rg[0] == g2[0])
    return cardinal1 + cardinal2


def classify_by_corners(
    s1: Coordinate, s2: Coordinate, g1: Coordinate, g2: Coordinate
) -> int:
    """2 for cardinal, 1 for semi-cardinal, 0 for non-cardinal (CR/R variant)."""
    cardinal1 = int((s1[0] - s2[0]) * (g1[0] - g2[0]) <= 0)
    cardinal2 = int((s1[1] - s2[1]) * (g1[1] - g2[1]) <= 0)
    return cardinal1 + cardinal2


def _ends(grid: Grid, barrier: Barrier) -> tuple[Coordinate, Coordinate]:
    return grid.coordinate(barrier.start), grid.coordinate(barrier.end)


def is_cut(grid: Grid, barrier: Barrier, rs: Coordinate, rg: Coordinate) -> bool:
    """True when the barrier cuts across the rectangle from ``rs`` to ``rg``."""
    b_l, b_u = _ends(grid, barrier)
    if b_l == b_u:
        return (
            (rs[0] <= b_l[0] and b_u[0] <= rg[0]) or (rs[0] >= b_l[0] and b_u[0] >= rg[0])
        ) and (
            (rs[1] <= b_l[1] and b_u[1] <= rg[1]) or (rs[1] >= b_l[1] and b_u[1] >= rg[1])
        )
    if rs[0] <= b_l[0] <= b_u[0] <= rg[0] and b_l[1] == b_u[1]:
        return True
    if rs[1] <= b_l[1] <= b_u[1] <= rg[1] and b_l[0] == b_u[0]:
        return True
    if rs[0] >= b_l[0] >= b_u[0] >= rg[0] and b_l[1] == b_u[1]:
        return True
    if rs[1] >= b_l[1] >= b_u[1] >= rg[1] and b_l[0] == b_u[0]:
        return True
    return False


def is_entry_barrier(grid: Grid, b1: Barrier, b2: Barrier, dir1: int) -> bool:
    """True when ``b2`` starts within the span of ``b1`` along ``dir1``."""
    b1_l, b1_u = _ends(grid, b1)
    b2_l = grid.coordinate(b2.start)
    if dir1 == grid.cols:
        return b1_u[0] >= b2_l[0] >= b1_l[0]
    if dir1 == -grid.cols:
        return b1_u[0] <= b2_l[0] <= b1_l[0]
    if dir1 == 1:
        return b1_u[1] >= b2_l[1] >= b1_l[1]
    if dir1 == -1:
        return b1_u[1] <= b2_l[1] <= b1_l[1]
    return False


def is_exit_barrier(grid: Grid, b1: Barrier, b2: Barrier, dir1: int) -> bool:
    """True when ``b2`` ends before ``b1`` starts along ``dir1``."""
    b1_l = grid.coordinate(b1.start)
    b2_u = grid.coordinate(b2.end)
    if dir1 == grid.cols:
        return b2_u[0] <= b1_l[0]
    if dir1 == -grid.cols:
        return b2_u[0] >= b1_l[0]
    if dir1 == 1:
        return b2_u[1] <= b1_l[1]
    if dir1 == -1:
        return b2_u[1] >= b1_l[1]
    return False


def intersection(grid: Grid, b1: Barrier, b2: Barrier) -> Coordinate:
    """Cell where the lines through two perpendicular barriers cross."""
    b1_l, b1_u = _ends(grid, b1)
    b2_l, b2_u = _ends(grid, b2)
    if b1_l[0] == b1_u[0] and b2_l[1] == b2_u[1]:
        return b1_l[0], b2_l[1]
    return b2_l[0], b1_l[1]


def start_candidates(grid: Grid, path: Path, timestep: int) -> list[int]:
    """Timesteps up to ``timestep`` that are single and Manhattan-optimal to it."""
    target = path[timestep].location
    return [
        t
        for t in range(timestep + 1)
        if path[t].is_single() and grid.manhattan(path[t].location, target) == timestep - t
    ]


def goal_candidates(grid: Grid, path: Path, timestep: int) -> list[int]:
    """Timesteps from the end back to ``timestep`` that are single and Manhattan-optimal."""
    target = path[timestep].location
    return [
        t
        for t in range(len(path) - 1, timestep - 1, -1)
        if path[t].is_single() and grid.manhattan(path[t].location, target) == t - timestep
    ]


def start_candidate(path: Path, dir1: int, dir2: int, timestep: int) -> int:
    """Latest timestep at or before ``timestep`` reached by a move other than ``dir1``/``dir2``."""
    for t in range(timestep, 0, -1):
        move = path[t].location - path[t - 1].location
        if move not in (dir1, dir2):
            return t
    return 0


def goal_candidate(path: Path, dir1: int, dir2: int, timestep: int) -> int:
    """Earliest timestep from ``timestep`` left by a move other than ``dir1``/``dir2``."""
    for t in range(timestep, len(path) - 1):
        move = path[t + 1].location - path[t].location
        if move not in (dir1, dir2):
            return t
    return len(path) - 1


def traverse(path: Path, loc: int, t: int) -> bool:
    """True when the path is at ``loc`` at ``t``; it stays at its end afterwards."""
    if t >= len(path):
        return loc == path[-1].location
    return t >= 0 and path[t].location == loc


def blocked(grid: Grid, path: Path, constraints: Iterable[Barrier]) -> bool:
    """True when the path violates any of the barrier constraints."""
    for barrier in constraints:
        t = barrier.time
        x1, y1 = grid.coordinate(barrier.start)
        x2, y2 = grid.coordinate(barrier.end)
        if x1 == x2:
            step = -1 if y1 < y2 else 1
            cells = (grid.linearize(x1, y2 + step * i) for i in range(min(abs(y2 - y1), t) + 1))
        else:
            step = -1 if x1 < x2 else 1
            cells = (grid.linearize(x2 + step * i, y1) for i in range(min(abs(x2 - x1), t) + 1))
        if any(traverse(path, loc, t - i) for i, loc in enumerate(cells)):
            return True
    return False


def blocked_nodes(
    grid: Grid, path: Path, rs: Coordinate, rg: Coordinate, rg_t: int, direction: int
) -> bool:
    """True when the path crosses the rectangle border that runs along ``direction``."""
    if abs(direction) == 1:
        b_l = (rg[0], rs[1])
    else:
        b_l = (rs[0], rg[1])
    t_max = min(rg_t, len(path) - 1)
    t_b_l = rg_t - abs(b_l[0] - rg[0]) - abs(b_l[1] - rg[1])
    t_min = max(0, t_b_l)
    base = grid.linearize(*b_l)
    return any(
        path[t].location == base + (t - t_b_l) * direction for t in range(t_min, t_max + 1)
    )