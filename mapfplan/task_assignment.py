"""Task files and greedy assignment of tasks to agents."""

from __future__ import annotations

import heapq
from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass, field
from itertools import combinations
from pathlib import Path as FilePath

from .grid import Grid, distance_map


class TaskAssignmentError(ValueError):
    """A task file or task problem cannot be used."""


@dataclass
class TaskProblem:
    """Agents, the tasks they must visit and the order some tasks need."""

    grid: Grid
    start_locations: list[int]
    task_locations: list[int]
    dependencies: list[tuple[int, int]] = field(default_factory=list)

    @property
    def num_agents(self) -> int:
        return len(self.start_locations)

    @property
    def num_tasks(self) -> int:
        return len(self.task_locations)


@dataclass
class TaskPlan:
    """Tasks per agent, goal sequences and the ordering between agents' goals.

    ``temporal_constraints[(a1, a2)]`` holds pairs ``(i, j)``: goal ``i`` of
    agent ``a1`` must be reached before goal ``j`` of agent ``a2``.
    """

    tasks: list[list[int]]
    goal_locations: list[list[int]]
    completion_times: list[int]
    temporal_constraints: dict[tuple[int, int], list[tuple[int, int]]]


def _int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise TaskAssignmentError(f"expected a number, got {text!r}") from None


def _pair(line: str) -> tuple[int, int]:
    tokens = [token for token in line.split(",") if token.strip()]
    if len(tokens) < 2:
        raise TaskAssignmentError(f"expected two comma separated numbers, got {line!r}")
    return _int(tokens[0]), _int(tokens[1])


def _cell(grid: Grid, line: str, what: str) -> int:
    col, row = _pair(line)
    if not (0 <= row < grid.rows and 0 <= col < grid.cols):
        raise TaskAssignmentError(f"{what} ({col},{row}) lies outside the map")
    loc = grid.linearize(row, col)
    if grid.is_obstacle(loc):
        raise TaskAssignmentError(f"{what} ({col},{row}) is an obstacle")
    return loc


def _section_count(lines: Iterator[str], current: str | None) -> tuple[int, str | None]:
    """Skip to the next line starting with 't' and read the count after it."""
    while current is not None and not current.startswith("t"):
        current = next(lines, None)
    if current is None:
        return 0, None
    count_line = next(lines, None)
    if count_line is None:
        return 0, None
    return _int(count_line), count_line


def parse_task_problem(text: str, grid: Grid, num_agents: int) -> TaskProblem:
    """Read agent starts, tasks and task dependencies from task file text.

    After a header line come ``num_agents`` lines ``col,row``; then a line
    starting with ``t``, the task count and one ``col,row`` line per task; then
    another ``t`` line, the dependency count and one ``pred,post`` line each.
    """
    if num_agents <= 0:
        raise TaskAssignmentError("the number of agents should be larger than 0")
    lines = iter(text.splitlines())

    def take() -> str:
        line = next(lines, None)
        if line is None:
            raise TaskAssignmentError("unexpected end of task file")
        return line

    next(lines, None)
    starts = [_cell(grid, take(), f"start of agent {i}") for i in range(num_agents)]

    num_tasks, last = _section_count(lines, next(lines, None))
    tasks = []
    for i in range(num_tasks):
        last = take()
        tasks.append(_cell(grid, last, f"task {i}"))

    num_dependencies, last = _section_count(lines, last)
    dependencies = []
    for _ in range(num_dependencies):
        pred, post = _pair(take())
        for task in (pred, post):
            if not 0 <= task < num_tasks:
                raise TaskAssignmentError(f"dependency names unknown task {task}")
        dependencies.append((pred, post))

    return TaskProblem(grid, starts, tasks, dependencies)


def load_task_problem(path: str | FilePath, grid: Grid, num_agents: int) -> TaskProblem:
    """Read a task file from disk."""
    try:
        text = FilePath(path).read_text()
    except OSError as error:
        raise TaskAssignmentError(f"agent file {path} not found") from error
    return parse_task_problem(text, grid, num_agents)


def greedy_plan(problem: TaskProblem) -> TaskPlan:
    """Repeatedly give the earliest idle agent the ready task it finishes first."""
    num_agents = problem.num_agents
    distances = [distance_map(problem.grid, loc) for loc in problem.task_locations]
    last_time = [0] * num_agents
    last_location = list(problem.start_locations)
    completion: list[int | None] = [None] * problem.num_tasks
    tasks: list[list[int]] = [[] for _ in range(num_agents)]

    prerequisites: dict[int, list[int]] = defaultdict(list)
    for pred, post in problem.dependencies:
        prerequisites[post].append(pred)

    queue = [(0, agent) for agent in range(num_agents)]
    heapq.heapify(queue)
    assigned = 0
    while assigned < problem.num_tasks:
        _, agent = heapq.heappop(queue)
        loc = last_location[agent]
        selected = None
        selected_time = 0
        for task, done_at in enumerate(completion):
            if done_at is not None:
                continue
            finish = last_time[agent] + distances[task][loc]
            ready = True
            for pred in prerequisites.get(task, ()):
                pred_done = completion[pred]
                if pred_done is None:
                    ready = False
                    break
                finish = max(pred_done, finish)
            if ready and (selected is None or finish < selected_time):
                selected, selected_time = task, finish
        if selected is None:
            raise TaskAssignmentError("no task can be started; the dependencies form a cycle")
        tasks[agent].append(selected)
        last_time[agent] = selected_time
        completion[selected] = selected_time
        last_location[agent] = problem.task_locations[selected]
        assigned += 1
        heapq.heappush(queue, (last_time[agent], agent))

    for a, b in combinations(range(num_agents), 2):
        if last_location[a] == last_location[b]:
            raise TaskAssignmentError(f"agents {a} and {b} end at the same location")

    placement: dict[int, tuple[int, int]] = {}
    goal_locations = []
    for agent, agent_tasks in enumerate(tasks):
        for index, task in enumerate(agent_tasks):
            placement[task] = (agent, index)
        goals = [problem.task_locations[task] for task in agent_tasks]
        goal_locations.append(goals or [problem.start_locations[agent]])

    temporal: dict[tuple[int, int], list[tuple[int, int]]] = defaultdict(list)
    for pred, post in problem.dependencies:
        agent_i, i = placement[pred]
        agent_j, j = placement[post]
        temporal[(agent_i, agent_j)].append((i, j))

    return TaskPlan(
        tasks=tasks,
        goal_locations=goal_locations,
        completion_times=[t for t in completion if t is not None],
        temporal_constraints=dict(temporal),
    )