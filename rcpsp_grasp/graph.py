"""Precedence graph over tasks, stored as a dense arena with index lists.

The graph is immutable once built. Tasks are addressed by their 0-based id,
edges are tuples of ids, so copying a schedule never needs to re-link nodes
and the same graph can be shared by every population run (and pickled to
worker processes).
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from .exceptions import InvalidConfigurationError, MalformedGraphError
from .models import ProjectInstance, Task


@dataclass(frozen=True)
class TaskGraph:
    """Validated, read-only view of an RCPSP instance.

    Attributes:
        durations: durations[j] -> processing time of task j.
        demands: demands[j][k] -> units of resource k required by task j.
        capacities: capacities[k] -> units of resource k per slot.
        predecessors: predecessors[j] -> ids that must finish before j starts.
        successors: successors[j] -> ids that may start only after j finishes.
        horizon: Number of time slots every timeline is sized with.
    """

    durations: tuple[int, ...]
    demands: tuple[tuple[int, ...], ...]
    capacities: tuple[int, ...]
    predecessors: tuple[tuple[int, ...], ...]
    successors: tuple[tuple[int, ...], ...]
    horizon: int

    @property
    def size(self) -> int:
        return len(self.durations)

    @property
    def resources_number(self) -> int:
        return len(self.capacities)

    @property
    def source(self) -> int:
        return 0

    @property
    def sink(self) -> int:
        return self.size - 1

    @classmethod
    def from_instance(cls, instance: ProjectInstance) -> TaskGraph:
        """Validate a problem description and freeze it into a graph.

        Raises:
            InvalidConfigurationError: On non-positive job/resource counts,
                negative values, or a request above a resource capacity.
            MalformedGraphError: On out-of-range ids, self loops, an
                inconsistent predecessor/successor pair, or tasks that are
                not connected to the source and sink.
        """
        n = instance.jobs_number
        r = instance.resources_number
        if n <= 0:
            raise InvalidConfigurationError(f"jobs_number must be positive, got {n}")
        if r <= 0:
            raise InvalidConfigurationError(f"resources_number must be positive, got {r}")
        if len(instance.durations) != n or len(instance.requests) != n:
            raise InvalidConfigurationError("durations/requests length differs from jobs_number")
        if len(instance.capacities) != r:
            raise InvalidConfigurationError("capacities length differs from resources_number")
        if len(instance.successors) != n or len(instance.predecessors) != n:
            raise MalformedGraphError("successor/predecessor lists must cover every job")

        for k, c in enumerate(instance.capacities):
            if c < 0:
                raise InvalidConfigurationError(f"negative capacity {c} for resource {k}")
        for j in range(n):
            if instance.durations[j] < 0:
                raise InvalidConfigurationError(
                    f"negative duration {instance.durations[j]} for job {j}"
                )
            row = instance.requests[j]
            if len(row) != r:
                raise InvalidConfigurationError(f"job {j} has {len(row)} requests, expected {r}")
            for k, q in enumerate(row):
                if q < 0:
                    raise InvalidConfigurationError(f"negative request {q} of job {j} on {k}")
                if q > instance.capacities[k]:
                    raise InvalidConfigurationError(
                        f"job {j} requests {q} units of resource {k} "
                        f"but capacity is {instance.capacities[k]}"
                    )

        successors = tuple(tuple(s) for s in instance.successors)
        predecessors = tuple(tuple(p) for p in instance.predecessors)
        _check_edges(successors, predecessors)

        return cls(
            durations=tuple(instance.durations),
            demands=tuple(tuple(row) for row in instance.requests),
            capacities=tuple(instance.capacities),
            predecessors=predecessors,
            successors=successors,
            horizon=instance.upper_bound,
        )

    def new_tasks(self) -> list[Task]:
        """Fresh, unscheduled Task objects, one per id."""
        return [
            Task(
                id=j,
                duration=self.durations[j],
                demand=self.demands[j],
                predecessors=self.predecessors[j],
                successors=self.successors[j],
            )
            for j in range(self.size)
        ]

    def total_demand(self, j: int) -> int:
        return sum(self.demands[j])

    def topological_order(self) -> list[int]:
        """Kahn ordering, ties broken by lowest id.

        Raises:
            MalformedGraphError: If the precedence relation has a cycle.
        """
        indegree = [len(p) for p in self.predecessors]
        ready = deque(j for j in range(self.size) if indegree[j] == 0)
        order: list[int] = []
        while ready:
            j = ready.popleft()
            order.append(j)
            for s in self.successors[j]:
                indegree[s] -= 1
                if indegree[s] == 0:
                    ready.append(s)
        if len(order) != self.size:
            stuck = sorted(j for j in range(self.size) if indegree[j] > 0)
            raise MalformedGraphError(f"precedence cycle through tasks {stuck}")
        return order

    def critical_path_length(self) -> int:
        """Longest duration-weighted source-to-sink path (resource-free bound)."""
        finish = [0] * self.size
        for j in self.topological_order():
            start = max((finish[p] for p in self.predecessors[j]), default=0)
            finish[j] = start + self.durations[j]
        return max(finish, default=0)


def _check_edges(
    successors: tuple[tuple[int, ...], ...],
    predecessors: tuple[tuple[int, ...], ...],
) -> None:
    n = len(successors)
    for j in range(n):
        for s in successors[j]:
            if not (0 <= s < n):
                raise MalformedGraphError(f"job {j} has out-of-range successor {s}")
            if s == j:
                raise MalformedGraphError(f"job {j} lists itself as successor")
            if j not in predecessors[s]:
                raise MalformedGraphError(f"edge {j}->{s} missing from predecessors of {s}")
        for p in predecessors[j]:
            if not (0 <= p < n):
                raise MalformedGraphError(f"job {j} has out-of-range predecessor {p}")
            if j not in successors[p]:
                raise MalformedGraphError(f"edge {p}->{j} missing from successors of {p}")

    if predecessors[0]:
        raise MalformedGraphError("source job 0 must not have predecessors")
    if successors[n - 1]:
        raise MalformedGraphError(f"sink job {n - 1} must not have successors")
    if n > 1:
        for j in range(1, n):
            if not predecessors[j]:
                raise MalformedGraphError(f"job {j} is not reachable from the source")
        for j in range(n - 1):
            if not successors[j]:
                raise MalformedGraphError(f"job {j} does not lead to the sink")
