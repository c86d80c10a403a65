import pytest

from mapfplan.grid import Grid
from mapfplan.paths import Path, PathEntry
from mapfplan.rectangle_geometry import (
    Barrier,
    blocked,
    blocked_nodes,
    classify_by_corners,
    classify_rectangle_conflict,
    get_rg,
    get_rs,
    goal_candidate,
    goal_candidates,
    intersection,
    is_cut,
    is_entry_barrier,
    is_exit_barrier,
    is_manhattan_rectangle,
    is_rectangle_conflict,
    start_candidate,
    start_candidates,
    traverse,
)


@pytest.fixture
def grid():
    return Grid(6, 6)


def make_path(locations, width=1):
    return Path([PathEntry(loc, mdd_width=width) for loc in locations])


def test_get_rs_picks_later_start():
    assert get_rs((0, 0), (1, 2), (3, 3)) == (1, 2)


def test_get_rs_keeps_fixed_axis():
    s1 = (2, 0)
    assert get_rs(s1, (0, 1), (2, 4))[0] == s1[0]


def test_get_rg_picks_earlier_goal():
    assert get_rg((0, 0), (3, 3), (2, 4)) == (2, 3)


def test_get_rg_keeps_goal_on_fixed_axis():
    g1 = (2, 5)
    assert get_rg((2, 0), g1, (4, 3))[0] == g1[0]


def test_rectangle_conflict_rejects_same_start():
    assert not is_rectangle_conflict((0, 0), (0, 0), (2, 2), (3, 3))


def test_rectangle_conflict_rejects_zero_length():
    assert not is_rectangle_conflict((1, 1), (0, 0), (1, 1), (3, 3))


def test_rectangle_conflict_rejects_opposite_directions():
    assert not is_rectangle_conflict((0, 0), (3, 3), (2, 2), (1, 1))


def test_rectangle_conflict_accepts_parallel_moves():
    assert is_rectangle_conflict((0, 0), (0, 1), (2, 2), (2, 3))


def test_rectangle_conflict_rejects_cardinal_vertex():
    assert not is_rectangle_conflict((0, 1), (1, 0), (3, 1), (1, 3))


def test_manhattan_rectangle_requires_optimal_times():
    s1, s2, g1, g2 = (0, 0), (0, 1), (2, 2), (2, 3)
    assert is_manhattan_rectangle(s1, s2, g1, g2, 4, 4)
    assert not is_manhattan_rectangle(s1, s2, g1, g2, 5, 4)


def test_classify_by_corners_range_and_identical():
    assert classify_by_corners((1, 1), (1, 1), (3, 3), (3, 3)) == 2
    for s2 in [(0, 0), (0, 2), (2, 0)]:
        assert 0 <= classify_by_corners((1, 1), s2, (3, 3), (4, 4)) <= 2


def test_classify_rectangle_non_cardinal_when_start_outside():
    assert classify_rectangle_conflict((1, 1), (2, 2), (3, 3), (4, 4), (3, 3)) == 0


def test_classify_rectangle_bounded():
    s1, s2, g1, g2 = (0, 0), (0, 1), (2, 2), (2, 3)
    rg = get_rg(s1, g1, g2)
    assert 0 <= classify_rectangle_conflict(s1, s2, g1, g2, rg) <= 2


def test_is_cut_single_cell_inside(grid):
    loc = grid.linearize(2, 2)
    assert is_cut(grid, Barrier(-1, loc, loc, 3), (1, 1), (3, 3))


def test_is_cut_segment_across(grid):
    barrier = Barrier(-1, grid.linearize(1, 2), grid.linearize(3, 2), 3)
    assert is_cut(grid, barrier, (1, 1), (3, 3))


def test_is_cut_segment_outside(grid):
    barrier = Barrier(-1, grid.linearize(0, 2), grid.linearize(5, 2), 3)
    assert not is_cut(grid, barrier, (1, 1), (3, 3))


def test_intersection_of_perpendicular_barriers(grid):
    row_barrier = Barrier(-1, grid.linearize(2, 0), grid.linearize(2, 4), 5)
    col_barrier = Barrier(-1, grid.linearize(0, 3), grid.linearize(5, 3), 5)
    assert intersection(grid, row_barrier, col_barrier) == (2, 3)
    assert intersection(grid, col_barrier, row_barrier) == (2, 3)


def test_start_candidates_on_straight_path(grid):
    path = make_path([grid.linearize(0, c) for c in range(5)])
    assert start_candidates(grid, path, 3) == [0, 1, 2, 3]


def test_start_candidates_need_single_entries(grid):
    path = make_path([grid.linearize(0, c) for c in range(5)], width=2)
    assert start_candidates(grid, path, 3) == []


def test_goal_candidates_descending(grid):
    path = make_path([grid.linearize(0, c) for c in range(5)])
    result = goal_candidates(grid, path, 2)
    assert result == sorted(result, reverse=True)
    assert result[0] == len(path) - 1 and result[-1] == 2


def test_goal_candidates_skip_waits(grid):
    locs = [grid.linearize(0, 0), grid.linearize(0, 1), grid.linearize(0, 1)]
    path = make_path(locs)
    assert goal_candidates(grid, path, 1) == [1]


def test_start_and_goal_candidate_on_straight_path(grid):
    path = make_path([grid.linearize(0, c) for c in range(5)])
    assert start_candidate(path, 1, grid.cols, 3) == 0
    assert goal_candidate(path, 1, grid.cols, 1) == len(path) - 1


def test_start_and_goal_candidate_stop_at_turns(grid):
    locs = [grid.linearize(1, 0), grid.linearize(0, 0), grid.linearize(0, 1),
            grid.linearize(0, 2), grid.linearize(1, 2)]
    path = make_path(locs)
    assert start_candidate(path, 1, grid.cols, 3) == 1
    assert goal_candidate(path, 1, -grid.cols, 2) == 3


def test_traverse_past_end_uses_last_location():
    path = make_path([4, 5, 6])
    assert traverse(path, 6, 10)
    assert not traverse(path, 5, 10)
    assert traverse(path, 5, 1)
    assert not traverse(path, 5, -1)


def test_blocked_detects_crossing(grid):
    path = make_path([grid.linearize(0, 2), grid.linearize(1, 2), grid.linearize(2, 2)])
    barrier = Barrier(0, grid.linearize(2, 0), grid.linearize(2, 2), 2)
    assert blocked(grid, path, [barrier])


def test_blocked_misses_other_path(grid):
    path = make_path([grid.linearize(5, 5), grid.linearize(5, 4), grid.linearize(5, 3)])
    barrier = Barrier(0, grid.linearize(2, 0), grid.linearize(2, 2), 2)
    assert not blocked(grid, path, [barrier])
    assert not blocked(grid, path, [])


def test_blocked_nodes_matches_border(grid):
    rs, rg = (0, 0), (2, 2)
    path = make_path([grid.linearize(2, c) for c in range(3)])
    assert blocked_nodes(grid, path, rs, rg, 2, 1)
    away = make_path([grid.linearize(5, 5)] * 3)
    assert not blocked_nodes(grid, away, rs, rg, 2, 1)