"""Core data structures for single-mode RCPSP instances.

This module defines:
    ProjectInstance   -- immutable problem description (as read from a file).
    Task              -- one activity inside a schedule; only start/finish change.
    ScheduledTaskRow  -- flat, read-only view of a placed task for exports.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence


@dataclass(frozen=True)
class ProjectInstance:
    """Immutable representation of an RCPSP instance.

    Ids are 0-based. Job 0 is the super source and job ``jobs_number - 1``
    the super sink, both with zero duration and zero requests.

    Attributes:
        jobs_number: Number of jobs including both sentinels.
        resources_number: Number of renewable resources.
        durations: durations[j] -> processing time of job j.
        requests: requests[j][k] -> units of resource k used by job j.
        capacities: capacities[k] -> units of resource k per time slot.
        successors: successors[j] -> ids that must start after j finishes.
        predecessors: predecessors[j] -> ids that must finish before j.
        declared_horizon: Horizon stated by the instance file, if any.
    """

    jobs_number: int
    resources_number: int
    durations: tuple[int, ...]
    requests: tuple[tuple[int, ...], ...]
    capacities: tuple[int, ...]
    successors: tuple[tuple[int, ...], ...]
    predecessors: tuple[tuple[int, ...], ...]
    declared_horizon: Optional[int] = None

    @property
    def upper_bound(self) -> int:
        """Horizon large enough for any serial schedule of this instance."""
        if not self.durations:
            return 0
        return max(sum(self.durations), max(self.durations))

    @classmethod
    def from_successors(
        cls,
        durations: Sequence[int],
        requests: Sequence[Sequence[int]],
        capacities: Sequence[int],
        successors: Sequence[Sequence[int]],
        declared_horizon: Optional[int] = None,
    ) -> ProjectInstance:
        """Build an instance from successor lists, deriving predecessors.

        Successor ids outside ``[0, len(durations))`` are kept as-is so that
        graph validation can report them.
        """
        jobs_number = len(durations)
        predecessors: list[list[int]] = [[] for _ in range(jobs_number)]
        for j, succ in enumerate(successors):
            for s in succ:
                if 0 <= s < jobs_number:
                    predecessors[s].append(j)
        return cls(
            jobs_number=jobs_number,
            resources_number=len(capacities),
            durations=tuple(int(d) for d in durations),
            requests=tuple(tuple(int(r) for r in row) for row in requests),
            capacities=tuple(int(c) for c in capacities),
            successors=tuple(tuple(int(s) for s in succ) for succ in successors),
            predecessors=tuple(tuple(p) for p in predecessors),
            declared_horizon=declared_horizon,
        )


@dataclass
class Task:
    """A job inside one schedule.

    Everything but ``start``/``finish`` is fixed when the graph is built;
    the edge tuples are shared with the owning ``TaskGraph``.
    """

    id: int
    duration: int
    demand: tuple[int, ...]
    predecessors: tuple[int, ...] = ()
    successors: tuple[int, ...] = ()
    start: Optional[int] = None
    finish: Optional[int] = None

    @property
    def is_scheduled(self) -> bool:
        return self.start is not None

    def schedule_at(self, t: int) -> None:
        self.start = t
        self.finish = t + self.duration

    def reset(self) -> None:
        self.start = None
        self.finish = None

    def copy(self) -> Task:
        return replace(self)


@dataclass(frozen=True)
class ScheduledTaskRow:
    """Single placed task with timing and demand data.

    Fields:
        task: Task id (0-based).
        start: Start time.
        finish: Completion time (start + duration).
        duration: Processing time.
        demand: Units requested per resource.
    """

    task: int
    start: int
    finish: int
    duration: int
    demand: tuple[int, ...] = field(default_factory=tuple)
