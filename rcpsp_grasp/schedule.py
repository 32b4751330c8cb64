"""Schedule: a construction order plus the tasks and timelines it produced."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .graph import TaskGraph
from .models import ScheduledTaskRow, Task
from .timeline import ResourceTimeline


@dataclass
class Schedule:
    """Full state of one scheduling run.

    Fields:
        graph: Shared, read-only precedence graph.
        sequence: Construction order (precedence feasible, not time sorted).
        tasks: Tasks owned by this schedule, indexed by id.
        timelines: One occupancy grid per resource, owned by this schedule.
    """

    graph: TaskGraph
    sequence: list[int] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    timelines: list[ResourceTimeline] = field(default_factory=list)

    @classmethod
    def empty(cls, graph: TaskGraph) -> Schedule:
        return cls(
            graph=graph,
            sequence=[],
            tasks=graph.new_tasks(),
            timelines=[
                ResourceTimeline(horizon=graph.horizon, capacity=c) for c in graph.capacities
            ],
        )

    @property
    def makespan(self) -> Optional[int]:
        """Finish time of the sink, or None before the schedule is decoded."""
        if not self.tasks:
            return None
        return self.tasks[-1].finish

    @property
    def is_complete(self) -> bool:
        return bool(self.tasks) and all(t.is_scheduled for t in self.tasks)

    def start_times(self) -> list[Optional[int]]:
        return [t.start for t in self.tasks]

    def finish_times(self) -> list[Optional[int]]:
        return [t.finish for t in self.tasks]

    def occupancy(self, k: int) -> tuple[tuple[int, ...], ...]:
        """(time, unit) -> task id grid of resource ``k``."""
        return self.timelines[k].snapshot()

    def rows(self) -> list[ScheduledTaskRow]:
        """Placed tasks ordered by start time, then id."""
        rows = [
            ScheduledTaskRow(
                task=t.id,
                start=t.start,
                finish=t.finish,
                duration=t.duration,
                demand=t.demand,
            )
            for t in self.tasks
            if t.is_scheduled
        ]
        rows.sort(key=lambda r: (r.start, r.task))
        return rows

    def reset(self) -> None:
        """Clear start/finish times, the sequence and every timeline."""
        self.sequence = []
        for task in self.tasks:
            task.reset()
        for timeline in self.timelines:
            timeline.reset()

    def copy(self) -> Schedule:
        """Independent copy; tasks and grids are duplicated, the graph is shared."""
        return Schedule(
            graph=self.graph,
            sequence=list(self.sequence),
            tasks=[t.copy() for t in self.tasks],
            timelines=[tl.copy() for tl in self.timelines],
        )
