"""Simple temporal networks solved by all-pairs shortest paths."""

from __future__ import annotations

INF = 2**31 - 1
ORIGIN = "x0"

DistanceMatrix = list[list[int]]


class InconsistentTemporalGraph(ValueError):
    """The temporal constraints contain a negative cycle."""


class TemporalGraph:
    """Time points connected by difference constraints.

    An edge ``u -> v`` with weight ``w`` means ``t(v) - t(u) <= w``.
    The origin time point ``x0`` is vertex 0.
    """

    def __init__(self) -> None:
        self.x0 = 0
        self.names: list[str] = [ORIGIN]
        self.vertex_map: dict[str, int] = {}
        self.edges: dict[tuple[int, int], int] = {}

    def _vertex(self, name: str) -> int:
        try:
            return self.vertex_map[name]
        except KeyError:
            raise KeyError(f"unknown time point {name!r}") from None

    def _tighten(self, source: int, target: int, weight: int) -> int:
        current = self.edges.get((source, target))
        if current is None or weight < current:
            self.edges[(source, target)] = weight
        return self.edges[(source, target)]

    def add_node(self, name: str) -> bool:
        """Add a time point; False if one with this name exists."""
        if name in self.vertex_map:
            return False
        self.vertex_map[name] = len(self.names)
        self.names.append(name)
        return True

    def add_edge(self, source: str, target: str, weight: int) -> int:
        """Constrain ``t(target) - t(source) <= weight``; returns the edge's weight."""
        if source not in self.vertex_map or target not in self.vertex_map or source == target:
            raise ValueError(f"invalid edge {source!r} -> {target!r}")
        return self._tighten(self.vertex_map[source], self.vertex_map[target], weight)

    def add_lb(self, name: str, lb: int) -> int:
        """Constrain ``t(name) >= lb``; returns the edge's weight."""
        return self._tighten(self._vertex(name), self.x0, -lb)

    def add_ub(self, name: str, ub: int) -> int:
        """Constrain ``t(name) <= ub``; returns the edge's weight."""
        return self._tighten(self.x0, self._vertex(name), ub)

    def add_ub_all(self, ub: int) -> None:
        """Bound every time point from above."""
        for name in self.vertex_map:
            self.add_ub(name, ub)

    def copy(self) -> TemporalGraph:
        other = TemporalGraph()
        other.names = list(self.names)
        other.vertex_map = dict(self.vertex_map)
        other.edges = dict(self.edges)
        return other

    def describe(self) -> str:
        """Human-readable listing of vertices and edges."""
        lines = ["Vertices "]
        lines.extend(f"vertex {index}: {name}" for index, name in enumerate(self.names))
        lines.append("")
        lines.append("Edges: ")
        lines.extend(f"{s} {t} ub: {w}" for (s, t), w in self.edges.items())
        return "\n".join(lines)


def _plus(a: int, b: int) -> int:
    if a == INF or b == INF:
        return INF
    return a + b


def compute_distance(graph: TemporalGraph) -> DistanceMatrix:
    """All-pairs shortest distances; raises InconsistentTemporalGraph on a negative cycle."""
    size = len(graph.names)
    dist = [[0 if i == j else INF for j in range(size)] for i in range(size)]
    for (source, target), weight in graph.edges.items():
        dist[source][target] = min(dist[source][target], weight)
    for k in range(size):
        row_k = dist[k]
        for row in dist:
            via = row[k]
            if via == INF:
                continue
            for j, d_kj in enumerate(row_k):
                candidate = _plus(via, d_kj)
                if candidate < row[j]:
                    row[j] = candidate
    if any(dist[i][i] < 0 for i in range(size)):
        raise InconsistentTemporalGraph("temporal constraints are unsatisfiable")
    return dist


def get_dist(graph: TemporalGraph, matrix: DistanceMatrix, source: str, target: str) -> int:
    return matrix[graph._vertex(source)][graph._vertex(target)]


def get_lb(graph: TemporalGraph, matrix: DistanceMatrix, name: str) -> int:
    """Earliest time of a time point."""
    return -matrix[graph._vertex(name)][graph.x0]


def get_ub(graph: TemporalGraph, matrix: DistanceMatrix, name: str) -> int:
    """Latest time of a time point; INF when unbounded."""
    return matrix[graph.x0][graph._vertex(name)]


def to_schedule(graph: TemporalGraph, matrix: DistanceMatrix) -> dict[str, int]:
    """Earliest time of every named time point."""
    return {name: get_lb(graph, matrix, name) for name in graph.vertex_map}


def makespan(graph: TemporalGraph, matrix: DistanceMatrix) -> int:
    """Latest earliest time over all time points, at least 0."""
    return max([0, *(get_lb(graph, matrix, name) for name in graph.vertex_map)])