"""GRASP construction of precedence-feasible activity lists."""

from __future__ import annotations

import logging
import random

from rcpsp_grasp.algorithms.base import pick, rank_candidates, restricted_candidate_list
from rcpsp_grasp.decoder import build_schedule_from_sequence
from rcpsp_grasp.exceptions import MalformedGraphError
from rcpsp_grasp.graph import TaskGraph
from rcpsp_grasp.schedule import Schedule

logger = logging.getLogger("rcpsp.grasp")


def construct_sequence(graph: TaskGraph, alpha: float, rng: random.Random) -> list[int]:
    """Build a topological order by repeated restricted-candidate selection.

    The eligible set starts with the tasks that have no predecessors. Each
    step ranks it by utility, cuts the restricted candidate list with
    ``alpha``, draws one task uniformly from it, appends it and promotes the
    successors whose predecessors are now all placed.

    Parameters:
        graph: precedence graph
        alpha: greediness in [0, 1]; 0 is pure greedy, 1 pure random
        rng: random source owned by this run

    Returns:
        Sequence of all task ids, each after all of its predecessors.

    Raises:
        MalformedGraphError: if the eligible set runs dry before every task
            is placed (cycle in the precedence relation).
    """
    n = graph.size
    placed = [False] * n
    in_eligible = [False] * n
    eligible: list[int] = []
    for j in range(n):
        if not graph.predecessors[j]:
            eligible.append(j)
            in_eligible[j] = True

    sequence: list[int] = []
    for pos in range(n):
        if not eligible:
            missing = [j for j in range(n) if not placed[j]]
            raise MalformedGraphError(
                f"no eligible task at position {pos}/{n}; unplaced tasks {missing} "
                "lie on a precedence cycle"
            )
        ranked = rank_candidates(graph, eligible)
        rcl = restricted_candidate_list(ranked, alpha)
        q = pick(rcl, rng)

        placed[q] = True
        in_eligible[q] = False
        eligible.remove(q)
        sequence.append(q)

        for s in graph.successors[q]:
            if placed[s] or in_eligible[s]:
                continue
            if all(placed[p] for p in graph.predecessors[s]):
                eligible.append(s)
                in_eligible[s] = True

    return sequence


def grasp_schedule(graph: TaskGraph, alpha: float, rng: random.Random) -> Schedule:
    """One full run: construct a sequence, then decode it on fresh state."""
    sequence = construct_sequence(graph, alpha, rng)
    schedule = build_schedule_from_sequence(graph, sequence)
    logger.debug("GRASP run alpha=%.3f makespan=%s", alpha, schedule.makespan)
    return schedule
