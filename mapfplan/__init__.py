"""Grids, paths, temporal networks, vertex covers, reservation tables, task assignment and rectangle reasoning for multi-agent path finding."""

__version__ = "0.1.0"
__all__ = [
    "grid",
    "paths",
    "temporal_graph",
    "vertex_cover",
    "reservation_table",
    "task_assignment",
    "rectangle_geometry",
    "rectangle_reasoning",
]