"""Detection of rectangle conflicts and the barrier constraints that resolve them."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import product

from .grid import MAX_TIMESTEP, Coordinate, Grid
from .paths import Path
from .rectangle_geometry import (
    Barrier,
    blocked,
    blocked_nodes,
    classify_rectangle_conflict,
    get_rg,
    get_rs,
    goal_candidate,
    goal_candidates,
    intersection,
    is_cut,
    is_entry_barrier,
    is_exit_barrier,
    is_rectangle_conflict,
    start_candidate,
    start_candidates,
)


class ConflictPriority(IntEnum):
    """How strongly resolving a conflict raises the solution cost."""

    CARDINAL = 0
    PSEUDO_CARDINAL = 1
    SEMI = 2
    NON = 3
    UNKNOWN = 4


@dataclass(eq=False)
class MDDNode:
    """A location reachable at a given level of a multi-valued decision diagram."""

    location: int
    level: int
    parents: list[MDDNode] = field(default_factory=list)
    children: list[MDDNode] = field(default_factory=list)


@dataclass
class MDD:
    """All shortest-path nodes of one agent, grouped by timestep."""

    levels: list[list[MDDNode]] = field(default_factory=list)


@dataclass
class RectangleConflict:
    """A rectangle conflict between two agents with its barrier constraints."""

    a1: int
    a2: int
    rs: Coordinate
    rg: Coordinate
    rg_t: int
    constraint1: list[Barrier]
    constraint2: list[Barrier]
    priority: ConflictPriority = ConflictPriority.UNKNOWN


def _priority(kind: int) -> ConflictPriority:
    if kind == 2:
        return ConflictPriority.CARDINAL
    if kind == 1:
        return ConflictPriority.SEMI
    return ConflictPriority.NON


def _has_location(level: Sequence[MDDNode], loc: int) -> bool:
    return any(node.location == loc for node in level)


BarrierPair = tuple[list[Barrier], list[Barrier]]


class RectangleReasoning:
    """Finds rectangle conflicts on a four-connected grid."""

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        self.accumulated_runtime = 0.0

    def run(self, paths: Sequence[Path], timestep: int, a1: int, a2: int,
            mdd1: MDD, mdd2: MDD) -> RectangleConflict | None:
        """Look for a rectangle conflict at ``timestep``, timing the search."""
        started = time.perf_counter()
        try:
            return self.find_by_rm(paths, timestep, a1, a2, mdd1, mdd2)
        finally:
            self.accumulated_runtime += time.perf_counter() - started

    def _segments(self, path: Path, timestep: int) -> Iterator[tuple[Coordinate, Coordinate]]:
        starts = start_candidates(self.grid, path, timestep)
        goals = goal_candidates(self.grid, path, timestep)
        for t_start, t_end in product(starts, goals):
            s = self.grid.coordinate(path[t_start].location)
            g = self.grid.coordinate(path[t_end].location)
            if self.grid.manhattan(s, g) == t_end - t_start:
                yield s, g

    def find_by_rm(self, paths: Sequence[Path], timestep: int, a1: int, a2: int,
                   mdd1: MDD, mdd2: MDD) -> RectangleConflict | None:
        """Best rectangle conflict over all single, Manhattan-optimal segments."""
        segments1 = list(self._segments(paths[a1], timestep))
        segments2 = list(self._segments(paths[a2], timestep))
        row, col = self.grid.coordinate(paths[a1][timestep].location)
        best: RectangleConflict | None = None
        best_type = -1
        best_area = 0
        for (s1, g1), (s2, g2) in product(segments1, segments2):
            if not is_rectangle_conflict(s1, s2, g1, g2):
                continue
            rg = get_rg(s1, g1, g2)
            rs = get_rs(s1, s2, g1)
            area = (abs(rs[0] - rg[0]) + 1) * (abs(rs[1] - rg[1]) + 1)
            kind = classify_rectangle_conflict(s1, s2, g1, g2, rg)
            if not (kind > best_type or (kind == best_type and area > best_area)):
                continue
            rg_t = timestep + abs(rg[0] - row) + abs(rg[1] - col)
            constraints = self.add_modified_barrier_constraints(
                a1, a2, rs, rg, s1, s2, rg_t, mdd1, mdd2)
            if constraints is None:
                continue
            c1, c2 = constraints
            if blocked(self.grid, paths[a1], c1) and blocked(self.grid, paths[a2], c2):
                best_type, best_area = kind, area
                best = RectangleConflict(a1, a2, rs, rg, rg_t, c1, c2, _priority(kind))
                if kind == 2:
                    return best
        return best

    def find_by_gr(self, paths: Sequence[Path], timestep: int, a1: int, a2: int,
                   mdd1: MDD, mdd2: MDD) -> RectangleConflict | None:
        """Rectangle conflict found through barriers extracted from the MDDs."""
        if timestep <= 0:
            raise ValueError("a rectangle conflict needs a timestep after the start")
        path1, path2 = paths[a1], paths[a2]
        from1 = path1[timestep - 1].location
        from2 = path2[timestep - 1].location
        loc = path1[timestep].location
        if (from1 == from2 or from1 == loc or from2 == loc
                or abs(from1 - from2) in (2, self.grid.cols * 2)):
            return None
        d1, d2 = loc - from1, loc - from2

        t_start = start_candidate(path1, d1, d2, timestep)
        t_end = goal_candidate(path1, d1, d2, timestep)
        barriers1 = self.extract_barriers(mdd1, loc, timestep, d1, d2,
                                          path1[t_start].location, path1[t_end].location, t_start)
        if not barriers1:
            return None
        t_start = start_candidate(path2, d1, d2, timestep)
        t_end = goal_candidate(path2, d1, d2, timestep)
        barriers2 = self.extract_barriers(mdd2, loc, timestep, d2, d1,
                                          path2[t_start].location, path2[t_end].location, t_start)
        if not barriers2:
            return None

        kind, rs, rg = self.generalized_rectangle(path1, path2, barriers1, barriers2, timestep)
        if kind < 0 or rs is None or rg is None:
            return None
        rg_t = timestep + self.grid.manhattan(self.grid.coordinate(loc), rg)
        if abs(d1) == 1 or abs(d2) > 1:
            c1 = self.vertical_barrier(a1, mdd1, rg[1], rs[0], rg[0], rg_t)
            c2 = self.horizontal_barrier(a2, mdd2, rg[0], rs[1], rg[1], rg_t)
        else:
            c1 = self.horizontal_barrier(a1, mdd1, rg[0], rs[1], rg[1], rg_t)
            c2 = self.vertical_barrier(a2, mdd2, rg[1], rs[0], rg[0], rg_t)
        if not blocked(self.grid, path1, c1) or not blocked(self.grid, path2, c2):
            return None
        return RectangleConflict(a1, a2, rs, rg, rg_t, c1, c2, _priority(kind))

    def extract_barriers(self, mdd: MDD, loc: int, timestep: int, dir1: int, dir2: int,
                         start: int, goal: int, start_time: int) -> list[Barrier]:
        """Barriers that every path in the MDD must cross between ``start`` and ``goal``."""
        grid = self.grid
        sign1 = 1 if dir1 > 0 else -1
        sign2 = 1 if dir2 > 0 else -1
        vertical = abs(dir1) == 1
        along = grid.col_of if vertical else grid.row_of
        across = grid.row_of if vertical else grid.col_of

        count = sign1 * (along(goal) - along(start)) + 1
        if count <= 0 or not mdd.levels:
            return []
        extent_l = [MAX_TIMESTEP] * count
        extent_u = [-1] * count

        def barrier_time(location: int) -> int:
            return (timestep + sign1 * (along(location) - along(loc))
                    + sign2 * (across(location) - across(loc)))

        root = mdd.levels[0][0]
        block = [False] * count
        if barrier_time(root.location) == 0:
            extent_l[0] = extent_u[0] = 0
            block[0] = True
        blocking: dict[MDDNode, list[bool]] = {root: block}

        for level in mdd.levels[1:]:
            for node in level:
                block = [all(blocking[parent][i] for parent in node.parents) for i in range(count)]
                barrier_id = sign1 * (along(node.location) - along(start))
                if (0 <= barrier_id < count and not block[barrier_id]
                        and barrier_time(node.location) == node.level):
                    stays_on_barrier = (
                        len(node.children) == 1
                        and extent_l[barrier_id] == MAX_TIMESTEP
                        and abs(dir1) * abs(node.location - node.children[0].location) == grid.cols
                    )
                    if not stays_on_barrier:
                        extent_l[barrier_id] = min(extent_l[barrier_id], node.level)
                        extent_u[barrier_id] = max(extent_u[barrier_id], node.level)
                        block[barrier_id] = True
                blocking[node] = block

        barriers = []
        for i, is_blocked in enumerate(blocking[mdd.levels[-1][0]]):
            if not is_blocked:
                continue
            line = along(start) + sign1 * i
            offset = timestep + i - sign1 * (along(loc) - along(start))
            low = across(loc) + sign2 * (extent_l[i] - offset)
            high = across(loc) + sign2 * (extent_u[i] - offset)
            if vertical:
                first, last = grid.linearize(low, line), grid.linearize(high, line)
            else:
                first, last = grid.linearize(line, low), grid.linearize(line, high)
            barriers.append(Barrier(-1, first, last, extent_u[i]))
        return barriers

    def generalized_rectangle(
        self, path1: Path, path2: Path, barriers1: Sequence[Barrier],
        barriers2: Sequence[Barrier], timestep: int,
    ) -> tuple[int, Coordinate | None, Coordinate | None]:
        """Best (type, Rs, Rg) formed by entry and exit barriers; type -1 if none."""
        grid = self.grid
        loc = path1[timestep].location
        dir1 = loc - path1[timestep - 1].location
        dir2 = loc - path2[timestep - 1].location
        best: tuple[int, Coordinate | None, Coordinate | None] = (-1, None, None)
        for b1_entry, b2_entry in product(barriers1, barriers2):
            if not (is_entry_barrier(grid, b1_entry, b2_entry, dir1)
                    and is_entry_barrier(grid, b2_entry, b1_entry, dir2)):
                continue
            rs = intersection(grid, b1_entry, b2_entry)
            i, j = len(barriers1) - 1, len(barriers2) - 1
            while i >= 0 and j >= 0:
                b1_exit, b2_exit = barriers1[i], barriers2[j]
                if not is_exit_barrier(grid, b1_exit, b2_entry, dir1):
                    break
                if not is_exit_barrier(grid, b2_exit, b1_entry, dir2):
                    break
                rg = intersection(grid, b1_exit, b2_exit)
                rg_t = timestep + grid.manhattan(rg, grid.coordinate(loc))
                if not blocked_nodes(grid, path1, rs, rg, rg_t, dir2):
                    i -= 1
                    continue
                if not blocked_nodes(grid, path2, rs, rg, rg_t, dir1):
                    j -= 1
                    continue
                cut1 = is_cut(grid, b1_exit, rs, rg)
                cut2 = is_cut(grid, b2_exit, rs, rg)
                kind = int(cut1) + int(cut2)
                if kind > best[0]:
                    best = (kind, rs, rg)
                    if kind == 2:
                        return best
                if not cut1:
                    i -= 1
                elif not cut2:
                    j -= 1
        return best

    def add_modified_barrier_constraints(
        self, a1: int, a2: int, rs: Coordinate, rg: Coordinate, s1: Coordinate,
        s2: Coordinate, rg_t: int, mdd1: MDD, mdd2: MDD,
    ) -> BarrierPair | None:
        """Barrier constraints for both agents, or None when one cannot be built."""

        def h1() -> list[Barrier]:
            return self.horizontal_barrier(a1, mdd1, rg[0], rs[1], rg[1], rg_t)

        def v1() -> list[Barrier]:
            return self.vertical_barrier(a1, mdd1, rg[1], rs[0], rg[0], rg_t)

        def h2() -> list[Barrier]:
            return self.horizontal_barrier(a2, mdd2, rg[0], rs[1], rg[1], rg_t)

        def v2() -> list[Barrier]:
            return self.vertical_barrier(a2, mdd2, rg[1], rs[0], rg[0], rg_t)

        def both(first: Callable[[], list[Barrier]],
                 second: Callable[[], list[Barrier]]) -> BarrierPair | None:
            c1 = first()
            if not c1:
                return None
            c2 = second()
            if not c2:
                return None
            return c1, c2

        def middle(mdd: MDD, horizontal_first: BarrierPair | None,
                   vertical_first: tuple) -> BarrierPair | None:
            rs_t = rg_t - self.grid.manhattan(rs, rg)
            offset = 1 if rs[0] > rg[0] else -1
            if not self.has_node_on_barrier(mdd, rs[1], rg[1], rs[0] + offset, rs_t - 1, True):
                return both(*horizontal_first)
            offset = 1 if rs[1] > rg[1] else -1
            if not self.has_node_on_barrier(mdd, rs[0], rg[0], rs[1] + offset, rs_t - 1, False):
                return both(*vertical_first)
            return [], []

        if ((s2[0] - s1[0]) * (s1[0] - rg[0]) > 0
                and (s2[1] - s1[1]) * (s1[1] - rg[1]) > 0):  # s1 in the middle
            return middle(mdd2, (h1, v2), (v1, h2))
        if ((s1[0] - s2[0]) * (s2[0] - rg[0]) > 0
                and (s1[1] - s2[1]) * (s2[1] - rg[1]) > 0):  # s2 in the middle
            return middle(mdd1, (v1, h2), (h1, v2))
        if s1[0] == s2[0]:
            if (s1[1] - s2[1]) * (s2[1] - rg[1]) >= 0:
                return both(v1, h2)
            return both(h1, v2)
        if (s1[0] - s2[0]) * (s2[0] - rg[0]) >= 0:
            return both(h1, v2)
        return both(v1, h2)

    def has_node_on_barrier(self, mdd: MDD, y_start: int, y_end: int, x: int,
                            t_min: int, horizontal: bool) -> bool:
        """True when the MDD has a node on the barrier from ``y_start`` to ``y_end``."""
        sign = 1 if y_start < y_end else -1
        t_max = t_min + abs(y_start - y_end)
        for t2 in range(t_min + 1, min(t_max, len(mdd.levels) - 1) + 1):
            y = y_start + (t2 - t_min) * sign
            loc = self.grid.linearize(x, y) if horizontal else self.grid.linearize(y, x)
            if _has_location(mdd.levels[t2], loc):
                return True
        return False

    def _modified_barrier(self, agent: int, mdd: MDD, ri: int, rg: int, rg_t: int,
                          cell: Callable[[int], int]) -> list[Barrier]:
        sign = 1 if ri < rg else -1
        ri_t = rg_t - abs(ri - rg)
        t_min = max(ri_t, 0)
        t_max = min(rg_t, len(mdd.levels) - 1)

        def at(t: int) -> int:
            return cell(ri + (t - ri_t) * sign)

        barriers = []
        t1 = -1
        for t2 in range(t_min, t_max + 1):
            loc = at(t2)
            present = _has_location(mdd.levels[t2], loc)
            if not present and t1 >= 0:
                barriers.append(Barrier(agent, at(t1), at(t2 - 1), t2 - 1))
                t1 = -1
                continue
            if present and t1 < 0:
                t1 = t2
            if present and t2 == t_max:
                barriers.append(Barrier(agent, at(t1), loc, t2))
        return barriers

    def horizontal_barrier(self, agent: int, mdd: MDD, x: int, ri_y: int, rg_y: int,
                           rg_t: int) -> list[Barrier]:
        """Modified barrier constraints along row ``x``; empty when none apply."""
        return self._modified_barrier(agent, mdd, ri_y, rg_y, rg_t,
                                      lambda y: self.grid.linearize(x, y))

    def vertical_barrier(self, agent: int, mdd: MDD, y: int, ri_x: int, rg_x: int,
                         rg_t: int) -> list[Barrier]:
        """Modified barrier constraints along column ``y``; empty when none apply."""
        return self._modified_barrier(agent, mdd, ri_x, rg_x, rg_t,
                                      lambda x: self.grid.linearize(x, y))