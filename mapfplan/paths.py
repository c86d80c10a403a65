"""Agent paths over time."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class PathEntry:
    """One timestep of a path."""

    location: int
    mdd_width: int = 0
    is_goal: bool = False

    def is_single(self) -> bool:
        """True when the path's MDD has only this node at this timestep."""
        return self.mdd_width == 1


@dataclass
class Path:
    """A sequence of path entries, one per timestep."""

    entries: list[PathEntry] = field(default_factory=list)
    timestamps: list[int] = field(default_factory=list)
    begin_time: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    def __iter__(self) -> Iterator[PathEntry]:
        return iter(self.entries)

    def __str__(self) -> str:
        return format_path(self)

    def locations(self) -> list[int]:
        """The location visited at each timestep."""
        return [entry.location for entry in self.entries]


def is_same_path(p1: Path, p2: Path) -> bool:
    """True when both paths visit the same locations at every timestep."""
    return p1.locations() == p2.locations()


def format_path(path: Path) -> str:
    """Render a path as ``loc(single),`` for each timestep."""
    return "".join(f"{entry.location}({int(entry.is_single())})," for entry in path)