# mapfplan

Building blocks for multi-agent path finding (MAPF) on 4-connected 2D grids.
The package has no dependencies outside the standard library.

## Modules

- `mapfplan.grid`: `Grid(rows, cols, obstacles)` describes the map. Cells are
  addressed by linear location (`linearize`, `coordinate`, `row_of`, `col_of`).
  It also provides `is_obstacle`, `neighbors`, `next_locations` (the neighbours
  and the cell itself) and `manhattan`. `distance_map(grid, goal)` gives
  breadth-first step counts to a goal, with `MAX_TIMESTEP` for unreachable
  cells. `compute_heuristics(grid, goals)` returns one distance map per goal
  and, for each goal, the remaining travel through the later goals.
- `mapfplan.paths`: `Path` is a sequence of `PathEntry` (location, MDD width,
  goal flag) that also carries `timestamps` and `begin_time`. The module has
  `is_same_path` and `format_path`.
- `mapfplan.temporal_graph`: `TemporalGraph` is a simple temporal network with
  an origin `x0`. It offers `add_node`, `add_edge`, `add_lb`, `add_ub`,
  `add_ub_all`, `copy` and `describe`. An edge `u -> v` with weight `w` means
  `t(v) - t(u) <= w`, and adding an existing edge again keeps the tighter
  weight. `compute_distance` returns the all-pairs distance matrix (Floyd–Warshall)
  and raises `InconsistentTemporalGraph` on a negative cycle. `get_dist`,
  `get_lb`, `get_ub`, `to_schedule` and `makespan` read the result.
- `mapfplan.vertex_cover`: `weighted_vertex_cover(weights, time_limit)` sums
  exact minimum weighted vertex covers over the connected components of a
  square weight matrix. `dp_vertex_cover` is the branch-and-bound solver it
  uses. Both raise `CoverTimeout` when time runs out.
- `mapfplan.reservation_table`: `ReservationTable` turns hard constraints
  (`add_constraint`), landmarks (`add_landmark`) and a conflict avoidance table
  (`build_cat`) into safe `Interval`s. You read them with `safe_intervals`,
  `edge_safe_intervals`, `first_safe_interval` and `find_safe_interval`, and
  count soft conflicts with `conflicts_for_step`.
- `mapfplan.task_assignment`: `parse_task_problem` and `load_task_problem` read
  a task file into a `TaskProblem`. The file holds agent starts, then a `t` line
  followed by the task count and tasks, then a `t` line followed by the
  dependency count and dependencies. `greedy_plan` repeatedly gives the earliest
  idle agent the ready task it finishes first. It returns a `TaskPlan` with the
  tasks per agent, the goal sequences, the completion times and the ordering
  constraints between agents' goals. Malformed input, dependency cycles and
  agents ending on the same cell raise `TaskAssignmentError`.
- `mapfplan.rectangle_geometry`: helpers for rectangle conflicts. These cover
  the corners (`get_rs`, `get_rg`), classification, `Barrier` constraints, and
  checks such as `blocked` and `blocked_nodes`.
- `mapfplan.rectangle_reasoning`: `RectangleReasoning(grid)` finds rectangle
  conflicts between two agents from their paths and `MDD`s (`run`,
  `find_by_rm`, `find_by_gr`). It returns a `RectangleConflict` with barrier
  constraints for both agents and a `ConflictPriority`.

## Example

```python
from mapfplan.grid import Grid, compute_heuristics
from mapfplan.temporal_graph import TemporalGraph, compute_distance, get_lb

grid = Grid(rows=3, cols=3, obstacles=set())
distances, remaining = compute_heuristics(grid, [grid.linearize(2, 2)])

tg = TemporalGraph()
tg.add_node("a")
tg.add_node("b")
tg.add_lb("a", 2)
tg.add_edge("b", "a", -3)   # b happens at least 3 after a
matrix = compute_distance(tg)
print(get_lb(tg, matrix, "b"))  # 5
```

## What it does not do

This is a library of components, not a complete solver. It has no
command-line program. It has no high-level conflict-based or priority-based
search, and no single-agent space-time A* search. It does not read map files:
you build a `Grid` in code. MDDs are not constructed here; the caller passes
them to `RectangleReasoning`.

## Install and test

```
pip install .
pip install .[test]
pytest
```