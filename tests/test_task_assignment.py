import pytest

from mapfplan.grid import Grid
from mapfplan.task_assignment import (
    TaskAssignmentError,
    TaskProblem,
    greedy_plan,
    load_task_problem,
    parse_task_problem,
)

GRID = Grid(3, 3)

TEXT = "header\n0,0\n2,2\ntasks\n2\n1,0\n1,2\ntasks\n1\n0,1\n"


def test_parse_reads_starts_tasks_and_dependencies():
    problem = parse_task_problem(TEXT, GRID, 2)
    assert problem.start_locations == [GRID.linearize(0, 0), GRID.linearize(2, 2)]
    assert problem.task_locations == [GRID.linearize(0, 1), GRID.linearize(2, 1)]
    assert problem.dependencies == [(0, 1)]


def test_parse_without_dependency_section():
    problem = parse_task_problem("h\n0,0\nt\n1\n2,2\n", GRID, 1)
    assert problem.task_locations == [GRID.linearize(2, 2)]
    assert problem.dependencies == []


def test_zero_agents_rejected():
    with pytest.raises(TaskAssignmentError):
        parse_task_problem(TEXT, GRID, 0)


def test_obstacle_start_rejected():
    grid = Grid(3, 3, frozenset({0}))
    with pytest.raises(TaskAssignmentError):
        parse_task_problem(TEXT, grid, 2)


def test_unknown_dependency_rejected():
    with pytest.raises(TaskAssignmentError):
        parse_task_problem("h\n0,0\nt\n1\n2,2\nt\n1\n0,5\n", GRID, 1)


def test_truncated_agents_rejected():
    with pytest.raises(TaskAssignmentError):
        parse_task_problem("h\n0,0\n", GRID, 3)


def test_load_from_file(tmp_path):
    file = tmp_path / "tasks.txt"
    file.write_text(TEXT)
    assert load_task_problem(file, GRID, 2) == parse_task_problem(TEXT, GRID, 2)


def test_load_missing_file(tmp_path):
    with pytest.raises(TaskAssignmentError):
        load_task_problem(tmp_path / "absent.txt", GRID, 2)


def test_greedy_plan_respects_dependencies():
    problem = parse_task_problem(TEXT, GRID, 2)
    plan = greedy_plan(problem)
    assert plan.tasks == [[0], [1]]
    assert plan.goal_locations == [[problem.task_locations[0]], [problem.task_locations[1]]]
    assert plan.temporal_constraints == {(0, 1): [(0, 0)]}
    assert plan.completion_times[1] >= plan.completion_times[0]


def test_every_task_assigned_once():
    problem = TaskProblem(GRID, [0, 8], [1, 2, 5, 6, 7], [(0, 2), (3, 4)])
    plan = greedy_plan(problem)
    assigned = sorted(task for agent_tasks in plan.tasks for task in agent_tasks)
    assert assigned == [0, 1, 2, 3, 4]
    for pred, post in problem.dependencies:
        assert plan.completion_times[pred] <= plan.completion_times[post]


def test_agent_without_tasks_keeps_start_as_goal():
    problem = TaskProblem(GRID, [0, 8], [1], [])
    plan = greedy_plan(problem)
    assert plan.tasks[1] == []
    assert plan.goal_locations[1] == [8]


def test_cyclic_dependencies_rejected():
    problem = TaskProblem(GRID, [0], [1, 2], [(0, 1), (1, 0)])
    with pytest.raises(TaskAssignmentError):
        greedy_plan(problem)


def test_two_agents_ending_together_rejected():
    problem = TaskProblem(GRID, [0, 2], [2], [])
    with pytest.raises(TaskAssignmentError):
        greedy_plan(problem)