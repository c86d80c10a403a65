"""Minimum weighted vertex cover over agent dependency graphs."""

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Sequence

MAX_COST = (2**31 - 1) // 2


class CoverTimeout(TimeoutError):
    """The cover search ran past its time limit."""


def dp_vertex_cover(
    edges: Sequence[Sequence[int]],
    ranges: Sequence[int],
    deadline: float | None = None,
) -> int:
    """Exact minimum weighted vertex cover by depth-first branch and bound.

    ``edges[j][k]`` for ``j < k`` is the weight that ``x[j] + x[k]`` must reach;
    ``ranges[i]`` is the largest value vertex ``i`` may take. ``deadline`` is a
    ``time.monotonic()`` value. Returns MAX_COST when no assignment exists.
    """
    n = len(ranges)
    values = [0] * n
    best = MAX_COST

    def search(i: int, total: int) -> int:
        nonlocal best
        if total >= best:
            return MAX_COST
        if deadline is not None and time.monotonic() > deadline:
            raise CoverTimeout("vertex cover search timed out")
        if i == n:
            best = total
            return total
        if ranges[i] == 0:
            best = min(best, search(i + 1, total))
            return best

        min_cost = 0
        for value, row in zip(values[:i], edges):
            if min_cost + value < row[i]:
                min_cost = row[i] - value

        best_cost = -1
        for cost in range(min_cost, ranges[i] + 1):
            values[i] = cost
            result = search(i + 1, total + cost)
            if result < best:
                best = result
                best_cost = cost
        if best_cost >= 0:
            values[i] = best_cost
        return best

    return search(0, 0)


def _edge(weights: Sequence[Sequence[int]], j: int, k: int) -> int:
    if weights[j][k] > 0:
        return weights[j][k]
    if weights[k][j] > 0:
        return weights[k][j]
    return 0


def weighted_vertex_cover(weights: Sequence[Sequence[int]], time_limit: float = math.inf) -> int:
    """Sum of minimum weighted vertex covers of each connected component.

    ``weights`` is a square matrix; an edge exists where either direction is
    positive. Raises CoverTimeout when ``time_limit`` seconds are exceeded.
    """
    n = len(weights)
    start = time.monotonic()
    deadline = start + time_limit
    done = [False] * n
    total = 0
    for root in range(n):
        if done[root]:
            continue
        ranges: list[int] = []
        members: list[int] = []
        queue = deque([root])
        done[root] = True
        while queue:
            j = queue.popleft()
            members.append(j)
            reach = 0
            for k in range(n):
                w = _edge(weights, j, k)
                if w > 0:
                    reach = max(reach, w)
                    if not done[k]:
                        queue.append(k)
                        done[k] = True
            ranges.append(reach)
        if len(members) == 1:
            continue
        if len(members) == 2:
            a, b = members
            total += max(weights[a][b], weights[b][a])
            continue
        component = [
            [
                max(weights[a][b], weights[b][a]) if jb > ja else 0
                for jb, b in enumerate(members)
            ]
            for ja, a in enumerate(members)
        ]
        total += dp_vertex_cover(component, ranges, deadline)
        if time.monotonic() - start > time_limit:
            raise CoverTimeout("vertex cover search timed out")
    return total