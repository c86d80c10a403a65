import time

import pytest

from mapfplan.vertex_cover import (
    MAX_COST,
    CoverTimeout,
    dp_vertex_cover,
    weighted_vertex_cover,
)


def test_empty_graph():
    assert weighted_vertex_cover([[0, 0], [0, 0]]) == 0
    assert weighted_vertex_cover([]) == 0


def test_single_edge_uses_its_weight():
    weights = [[0, 5, 0], [0, 0, 0], [0, 0, 0]]
    assert weighted_vertex_cover(weights) == 5


def test_edge_in_lower_triangle_counts():
    weights = [[0, 0], [4, 0]]
    assert weighted_vertex_cover(weights) == 4


def test_star_covered_by_center():
    w = 3
    weights = [[0, w, w, w], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
    assert weighted_vertex_cover(weights) == w


def test_triangle():
    weights = [[0, 1, 1], [0, 0, 1], [0, 0, 0]]
    assert weighted_vertex_cover(weights) == 2


def test_components_add_up():
    single = [[0, 1, 1], [0, 0, 1], [0, 0, 0]]
    doubled = [[0] * 6 for _ in range(6)]
    for j in range(3):
        for k in range(3):
            doubled[j][k] = single[j][k]
            doubled[j + 3][k + 3] = single[j][k]
    assert weighted_vertex_cover(doubled) == 2 * weighted_vertex_cover(single)


def test_cover_bounded_by_edge_weights():
    weights = [[0, 2, 3, 0], [0, 0, 1, 4], [0, 0, 0, 2], [0, 0, 0, 0]]
    result = weighted_vertex_cover(weights)
    all_weights = [w for row in weights for w in row]
    assert max(all_weights) <= result <= sum(all_weights)


def test_dp_on_path():
    edges = [[0, 2, 0], [0, 0, 2], [0, 0, 0]]
    assert dp_vertex_cover(edges, [2, 2, 2]) == 2


def test_dp_infeasible_ranges():
    edges = [[0, 3], [0, 0]]
    assert dp_vertex_cover(edges, [1, 1]) == MAX_COST


def test_dp_deadline_in_past_times_out():
    edges = [[0, 2, 0], [0, 0, 2], [0, 0, 0]]
    with pytest.raises(CoverTimeout):
        dp_vertex_cover(edges, [2, 2, 2], time.monotonic() - 1.0)


def test_negative_time_limit_times_out():
    weights = [[0, 1, 1], [0, 0, 1], [0, 0, 0]]
    with pytest.raises(CoverTimeout):
        weighted_vertex_cover(weights, -1.0)