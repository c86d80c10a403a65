"""Safe-interval reservation tables built from hard and soft constraints."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from typing import NamedTuple

from .grid import MAX_TIMESTEP
from .paths import Path


class Interval(NamedTuple):
    """A half-open time range ``[low, high)`` and its number of soft conflicts."""

    low: int
    high: int
    conflicts: int = 0


class ReservationTable:
    """Safe intervals of the locations and edges of one agent's search.

    Hard constraints forbid a location during ``[t_min, t_max)``; soft
    constraints (the conflict avoidance table) only count conflicts. Edges are
    addressed by :meth:`edge_index`, which never collides with a location.
    """

    def __init__(
        self,
        map_size: int,
        goal_location: int | None = None,
        length_min: int = 0,
        length_max: int = MAX_TIMESTEP,
    ) -> None:
        self.map_size = map_size
        self.goal_location = goal_location
        self.length_min = length_min
        self.length_max = length_max
        self.ct: dict[int, list[tuple[int, int]]] = defaultdict(list)
        self.cat: dict[int, list[tuple[int, int]]] = defaultdict(list)
        self.landmarks: dict[int, int] = {}
        self.sit: dict[int, list[Interval]] = {}

    @property
    def latest_timestep(self) -> int:
        return min(self.length_max, MAX_TIMESTEP - 1) + 1

    def edge_index(self, source: int, target: int) -> int:
        """Key of the directed edge ``source -> target``."""
        return (1 + source) * self.map_size + target

    def add_constraint(self, location: int, t_min: int, t_max: int) -> None:
        """Forbid ``location`` (a cell or an edge index) during ``[t_min, t_max)``."""
        if t_min < 0 or t_min >= t_max:
            raise ValueError(f"invalid time range [{t_min}, {t_max})")
        self.ct[location].append((t_min, t_max))

    def add_landmark(self, timestep: int, location: int) -> None:
        """Require the agent to be at ``location`` at ``timestep``."""
        self.landmarks[timestep] = location

    def build_cat(self, agent: int, paths: Sequence[Path | None]) -> None:
        """Record the other agents' paths as soft constraints."""
        for ag, path in enumerate(paths):
            if ag == agent or path is None or len(path) == 0:
                continue
            if len(path) == 1:
                self.cat[path[0].location].append((0, MAX_TIMESTEP))
                continue
            prev_location = path[0].location
            prev_timestep = 0
            for timestep, entry in enumerate(path):
                curr_location = entry.location
                if curr_location != prev_location:
                    self.cat[prev_location].append((prev_timestep, timestep))
                    self.cat[self.edge_index(curr_location, prev_location)].append(
                        (timestep, timestep + 1)
                    )
                    prev_location = curr_location
                    prev_timestep = timestep
            self.cat[path[-1].location].append((len(path) - 1, MAX_TIMESTEP))

    def conflicts_for_step(self, curr: int, nxt: int, timestep: int) -> int:
        """Soft conflicts of moving from ``curr`` to ``nxt`` arriving at ``timestep``."""
        total = 0
        for key in (nxt, self.edge_index(curr, nxt)):
            for low, high in self.cat.get(key, ()):
                if low <= timestep < high:
                    total += 1
        return total

    def _insert_hard(self, location: int, t_min: int, t_max: int) -> None:
        intervals = self.sit.get(location)
        if intervals is None:
            created = []
            if t_min > 0:
                created.append(Interval(0, t_min, 0))
            if t_max < self.latest_timestep:
                created.append(Interval(t_max, self.latest_timestep, 0))
            self.sit[location] = created
            return
        result: list[Interval] = []
        for index, (low, high, _) in enumerate(intervals):
            if t_min >= high:
                result.append(intervals[index])
            elif t_max <= low:
                result.extend(intervals[index:])
                break
            elif low < t_min and high <= t_max:
                result.append(Interval(low, t_min, 0))
            elif t_min <= low and t_max < high:
                result.append(Interval(t_max, high, 0))
                result.extend(intervals[index + 1:])
                break
            elif low < t_min and t_max < high:
                result.append(Interval(low, t_min, 0))
                result.append(Interval(t_max, high, 0))
                result.extend(intervals[index + 1:])
                break
            # otherwise the interval is covered entirely and dropped
        self.sit[location] = result

    def _insert_soft(self, location: int, t_min: int, t_max: int) -> None:
        intervals = self.sit.get(location)
        if intervals is None:
            created = []
            if t_min > 0:
                created.append(Interval(0, t_min, 0))
            created.append(Interval(t_min, t_max, 1))
            created.append(Interval(t_max, self.latest_timestep, 0))
            self.sit[location] = created
            return
        result: list[Interval] = []
        for index, (low, high, count) in enumerate(intervals):
            if t_min >= high:
                result.append(intervals[index])
            elif t_max <= low:
                result.extend(intervals[index:])
                break
            elif low < t_min and high <= t_max:
                result += [Interval(low, t_min, count), Interval(t_min, high, count + 1)]
            elif t_min <= low and t_max < high:
                result += [Interval(low, t_max, count + 1), Interval(t_max, high, count)]
            elif low < t_min and t_max < high:
                result += [
                    Interval(low, t_min, count),
                    Interval(t_min, t_max, count + 1),
                    Interval(t_max, high, count),
                ]
            else:
                result.append(Interval(low, high, count + 1))
        self.sit[location] = result

    def _merge(self, location: int) -> None:
        merged: list[Interval] = []
        for interval in self.sit[location]:
            if merged:
                prev = merged[-1]
                if (
                    prev.high == interval.low
                    and prev.conflicts == interval.conflicts
                    and (location != self.goal_location or prev.high != self.length_min)
                ):
                    merged[-1] = Interval(prev.low, interval.high, prev.conflicts)
                    continue
            merged.append(interval)
        self.sit[location] = merged

    def _update(self, location: int) -> None:
        if location in self.sit:
            return
        if location == self.goal_location:
            if self.length_min > self.length_max:
                self.sit[location] = [Interval(0, 0, 0)]
                return
            goal_intervals = []
            if self.length_min > 0:
                goal_intervals.append(Interval(0, self.length_min, 0))
            goal_intervals.append(Interval(self.length_min, self.latest_timestep, 0))
            self.sit[location] = goal_intervals

        for t_min, t_max in self.ct.pop(location, ()):
            self._insert_hard(location, t_min, t_max)

        if location < self.map_size:
            for timestep in sorted(self.landmarks):
                if self.landmarks[timestep] != location:
                    self._insert_hard(location, timestep, timestep + 1)

        soft = self.cat.pop(location, None)
        if soft:
            for t_min, t_max in soft:
                self._insert_soft(location, t_min, t_max)
            self._merge(location)

    def safe_intervals(self, location: int, lower: int, upper: int) -> list[Interval]:
        """Safe intervals of ``location`` that overlap ``[lower, upper)``."""
        if lower >= upper:
            return []
        self._update(location)
        intervals = self.sit.get(location)
        if intervals is None:
            return [Interval(0, self.latest_timestep, 0)]
        result = []
        for interval in intervals:
            if lower >= interval.high:
                continue
            if upper <= interval.low:
                break
            result.append(interval)
        return result

    def edge_safe_intervals(self, source: int, target: int, lower: int, upper: int) -> list[Interval]:
        """Times in ``[lower, upper)`` when ``target`` may be entered from ``source``."""
        vertex = self.safe_intervals(target, lower, upper)
        edge = self.safe_intervals(self.edge_index(source, target), lower, upper)
        result = []
        i = j = 0
        while i < len(vertex) and j < len(edge):
            t_min = max(vertex[i].low, edge[j].low)
            t_max = min(vertex[i].high, edge[j].high)
            if t_min < t_max:
                result.append(Interval(t_min, t_max, vertex[i].conflicts + edge[j].conflicts))
            if t_max == vertex[i].high:
                i += 1
            if t_max == edge[j].high:
                j += 1
        return result

    def first_safe_interval(self, location: int) -> Interval | None:
        """The earliest safe interval of ``location``, or None if it has none."""
        self._update(location)
        intervals = self.sit.get(location)
        if intervals is None:
            return Interval(0, self.latest_timestep, 0)
        return intervals[0] if intervals else None

    def find_safe_interval(self, location: int, t_min: int) -> Interval | None:
        """The safe interval containing ``t_min``, cut to start at ``t_min``."""
        if t_min >= self.latest_timestep:
            return None
        self._update(location)
        intervals = self.sit.get(location)
        if intervals is None:
            return Interval(t_min, self.latest_timestep, 0)
        for low, high, conflicts in intervals:
            if low <= t_min < high:
                return Interval(t_min, high, conflicts)
            if t_min < low:
                break
        return None

    def describe(self) -> str:
        """One line listing the computed intervals of every location."""
        parts = []
        for location, intervals in self.sit.items():
            ranges = "".join(f"[{i.low},{i.high}]," for i in intervals)
            parts.append(f"loc={location}:{ranges}")
        return "".join(parts)