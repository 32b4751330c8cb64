"""Plain-text views of instances and schedules.

Everything here reads engine state through accessors and never mutates it.
Ids are printed 1-based to match the instance files.
"""

from __future__ import annotations

import math
from typing import Sequence, TextIO

from .graph import TaskGraph
from .schedule import Schedule
from .timeline import FREE, ResourceTimeline


def format_sequence(sequence: Sequence[int]) -> str:
    return " ".join(str(j + 1) for j in sequence)


def format_problem(graph: TaskGraph) -> str:
    """Job listing: duration, requests, successors and predecessors."""
    width = max(2, len(str(graph.size)))
    req_width = max(2, max((len(str(q)) for row in graph.demands for q in row), default=1))
    lines = [
        f"#jobs = {graph.size}",
        f"#resources = {graph.resources_number}",
        "Capacities: " + " ".join(str(c) for c in graph.capacities),
    ]
    max_succ = max((len(s) for s in graph.successors), default=0)
    for j in range(graph.size):
        req = " ".join(f"{q:>{req_width}}" for q in graph.demands[j])
        succ = " ".join(f"{s + 1:>{width}}" for s in graph.successors[j])
        pad = " " * ((width + 1) * (max_succ - len(graph.successors[j])))
        pred = " ".join(f"{p + 1:>{width}}" for p in graph.predecessors[j])
        lines.append(
            f"Job {j + 1:>{width}} | Duration: {graph.durations[j]:>2} | Req: {req}"
            f" | Succ: {succ}{pad} | Pred: {pred}".rstrip()
        )
    return "\n".join(lines)


def format_resource_table(timeline: ResourceTimeline) -> str:
    """``t | unit...`` grid up to the last busy slot; 0 marks a free unit."""
    tmax = timeline.last_busy_slot() + 1
    cap = timeline.capacity
    t_width = max(1, int(math.log10(max(tmax, 1)))) + 2
    biggest = max(
        (timeline.usage(t, r) + 1 for t in range(tmax) for r in range(cap)),
        default=0,
    )
    col = max(len(str(max(cap - 1, 0))), len(str(biggest)))

    header = f"{'t':>{t_width}} |" + "".join(f" {r:>{col}}" for r in range(cap))
    sep = "-" * (t_width + 1) + "|" + "-" * (cap * (col + 1) + 1)
    lines = [header, sep]
    for t in range(tmax):
        cells = []
        for r in range(cap):
            owner = timeline.usage(t, r)
            cells.append(f" {0 if owner == FREE else owner + 1:>{col}}")
        lines.append(f"{t:>{t_width}} |" + "".join(cells))
    return "\n".join(lines)


def format_schedule_table(schedule: Schedule) -> str:
    """One resource table per resource, in resource order."""
    blocks = []
    for k, timeline in enumerate(schedule.timelines):
        blocks.append(f"Resource {k + 1}:\n{format_resource_table(timeline)}\n")
    return "\n".join(blocks)


def format_task_times(schedule: Schedule) -> str:
    """``task start finish`` rows sorted by start time."""
    lines = ["task start finish"]
    for row in schedule.rows():
        lines.append(f"{row.task + 1:>4} {row.start:>5} {row.finish:>6}")
    return "\n".join(lines)


def export_dot_precedence_graph(graph: TaskGraph, stream: TextIO) -> None:
    """Write the precedence graph as a Graphviz digraph."""
    stream.write("digraph G {\n")
    stream.write("\tsplines=true;\n")
    for j in range(graph.size):
        for s in graph.successors[j]:
            stream.write(f"\t{j + 1} -> {s + 1}\n")
    stream.write("}\n")
