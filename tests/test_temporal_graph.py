import pytest

from mapfplan.temporal_graph import (
    INF,
    InconsistentTemporalGraph,
    TemporalGraph,
    compute_distance,
    get_dist,
    get_lb,
    get_ub,
    makespan,
    to_schedule,
)


def chain():
    graph = TemporalGraph()
    graph.add_node("a")
    graph.add_node("b")
    graph.add_lb("a", 3)
    graph.add_edge("b", "a", -2)  # b is at least 2 after a
    return graph


def test_add_node_rejects_duplicates():
    graph = TemporalGraph()
    assert graph.add_node("a")
    assert not graph.add_node("a")


def test_lower_bounds_propagate():
    graph = chain()
    matrix = compute_distance(graph)
    assert get_lb(graph, matrix, "a") == 3
    assert get_lb(graph, matrix, "b") == 5
    assert get_ub(graph, matrix, "b") == INF


def test_upper_bounds_propagate():
    graph = chain()
    graph.add_ub("b", 10)
    matrix = compute_distance(graph)
    assert get_ub(graph, matrix, "a") == 8
    assert get_dist(graph, matrix, "b", "a") == -2


def test_inconsistent_bounds_raise():
    graph = chain()
    graph.add_ub("b", 4)
    with pytest.raises(InconsistentTemporalGraph):
        compute_distance(graph)


def test_tightest_bounds_kept():
    graph = TemporalGraph()
    graph.add_node("a")
    assert graph.add_lb("a", 3) == -3
    assert graph.add_lb("a", 1) == -3
    assert graph.add_ub("a", 9) == 9
    assert graph.add_ub("a", 12) == 9
    matrix = compute_distance(graph)
    assert get_lb(graph, matrix, "a") == 3
    assert get_ub(graph, matrix, "a") == 9


def test_add_ub_all():
    graph = chain()
    graph.add_ub_all(20)
    matrix = compute_distance(graph)
    assert get_ub(graph, matrix, "b") == 20
    assert get_ub(graph, matrix, "a") == 18


def test_invalid_edges():
    graph = chain()
    with pytest.raises(ValueError):
        graph.add_edge("a", "missing", 1)
    with pytest.raises(ValueError):
        graph.add_edge("a", "a", 1)
    with pytest.raises(KeyError):
        graph.add_lb("missing", 1)


def test_schedule_and_makespan():
    graph = chain()
    matrix = compute_distance(graph)
    schedule = to_schedule(graph, matrix)
    assert set(schedule) == {"a", "b"}
    assert makespan(graph, matrix) == max(schedule.values())
    assert schedule["a"] == get_lb(graph, matrix, "a")


def test_makespan_of_empty_graph():
    graph = TemporalGraph()
    assert makespan(graph, compute_distance(graph)) == 0


def test_copy_is_independent():
    graph = chain()
    clone = graph.copy()
    clone.add_ub("b", 4)
    with pytest.raises(InconsistentTemporalGraph):
        compute_distance(clone)
    matrix = compute_distance(graph)
    assert get_ub(graph, matrix, "b") == INF


def test_describe_lists_vertices():
    text = chain().describe()
    assert "vertex 0: x0" in text
    assert "vertex 2: b" in text
    assert "ub: -3" in text