from __future__ import annotations

from typing import Iterable, Optional

from .exceptions import InfeasibleWindowError
from .graph import TaskGraph
from .operations import validate_sequence
from .schedule import Schedule
from .timeline import NOT_FOUND


def earliest_start(schedule: Schedule, task_id: int) -> int:
    """Earliest slot at which ``task_id`` fits on every resource at once.

    Starts from the latest predecessor finish and asks every timeline for a
    window from the current candidate. Any resource that pushes the
    candidate later forces another round over all resources, so the result
    is a slot where each resource has room simultaneously.

    Raises:
        InfeasibleWindowError: If some resource has no window in the horizon.
    """
    task = schedule.tasks[task_id]
    t = max((schedule.tasks[p].finish or 0 for p in task.predecessors), default=0)
    if task.duration == 0:
        return t
    moved = True
    while moved:
        moved = False
        for k, timeline in enumerate(schedule.timelines):
            w = timeline.find_window(t, task.demand[k], task.duration)
            if w == NOT_FOUND:
                raise InfeasibleWindowError(task_id, k, t)
            if w > t:
                t = w
                moved = True
    return t


def build_schedule_from_sequence(
    graph: TaskGraph,
    sequence: Iterable[int],
    validate: bool = False,
    schedule: Optional[Schedule] = None,
) -> Schedule:
    """Decode a sequence into a schedule (serial schedule generation).

    Tasks are visited in the given order and each is placed at the earliest
    slot that respects its predecessors' finish times and leaves enough
    units on every resource for its whole duration. Start times are never
    revisited once committed.

    Args:
        graph: Precedence graph with durations and demands.
        sequence: Precedence-feasible order of all task ids.
        validate: When True run full sequence validation before decoding.
        schedule: Optional schedule to decode into; it is reset first.
            A fresh one is created when omitted.

    Returns:
        Schedule with start/finish times, filled timelines and makespan.

    Raises:
        ValueError: If the sequence is invalid (``validate=True``) or a task
            is reached before one of its predecessors was placed.
        InfeasibleWindowError: If a window cannot be found (engine defect).
    """
    sequence = list(sequence)
    if validate:
        validate_sequence(graph, sequence)

    if schedule is None:
        schedule = Schedule.empty(graph)
    else:
        schedule.reset()

    for i in sequence:
        task = schedule.tasks[i]
        if task.is_scheduled:
            raise ValueError(f"duplicate task {i} in sequence")
        for p in task.predecessors:
            if not schedule.tasks[p].is_scheduled:
                raise ValueError(f"precedence violation: task {i} before predecessor {p}")
        t = earliest_start(schedule, i)
        task.schedule_at(t)
        for k, timeline in enumerate(schedule.timelines):
            timeline.assign(t, task.demand[k], task.duration, i)
    schedule.sequence = sequence
    return schedule


def check_precedence(schedule: Schedule) -> bool:
    """Ensure every task starts no earlier than each predecessor finishes.

    Raises:
        AssertionError: On the first violated precedence constraint.
    """
    for task in schedule.tasks:
        for p in task.predecessors:
            pred = schedule.tasks[p]
            if task.start < pred.finish:
                raise AssertionError(
                    f"Task {task.id} starts at {task.start} before predecessor "
                    f"{p} finishes at {pred.finish}"
                )
    return True


def check_resource_usage(schedule: Schedule) -> bool:
    """Ensure per-slot demand never exceeds capacity and matches the grids.

    Recomputes usage from start times (independently of the grids), then
    checks that each timeline holds exactly ``demand`` units of every task
    during its execution window.

    Raises:
        AssertionError: On the first capacity or grid inconsistency.
    """
    graph = schedule.graph
    for k, timeline in enumerate(schedule.timelines):
        load = [0] * graph.horizon
        for task in schedule.tasks:
            q = task.demand[k]
            if q == 0 or task.duration == 0:
                continue
            for t in range(task.start, task.finish):
                load[t] += q
                held = timeline.units_of(t, task.id)
                if held != q:
                    raise AssertionError(
                        f"Resource {k} holds {held} units of task {task.id} at t={t}, "
                        f"expected {q}"
                    )
        for t, used in enumerate(load):
            if used > graph.capacities[k]:
                raise AssertionError(
                    f"Resource {k} overloaded at t={t}: {used} > {graph.capacities[k]}"
                )
    return True
