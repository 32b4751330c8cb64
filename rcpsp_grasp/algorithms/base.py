"""Common helpers for randomized construction: scores and candidate lists."""

from __future__ import annotations

import random
from typing import List, Sequence, Tuple

from rcpsp_grasp.graph import TaskGraph


def utility(graph: TaskGraph, j: int) -> float:
    """Demand density of task ``j``: duration per unit of its own total demand.

    Zero-demand tasks use a denominator of 1, so sentinels (duration 0)
    score 0 and never outrank real work.
    """
    return graph.durations[j] / max(1, graph.total_demand(j))


def rank_candidates(graph: TaskGraph, eligible: Sequence[int]) -> List[Tuple[float, int]]:
    """Return ``(score, id)`` pairs sorted by score descending, then id ascending."""
    scored = [(utility(graph, j), j) for j in eligible]
    scored.sort(key=lambda x: (-x[0], x[1]))
    return scored


def restricted_candidate_list(ranked: Sequence[Tuple[float, int]], alpha: float) -> List[int]:
    """Prefix of ``ranked`` whose score is within ``alpha`` of the best.

    limit = u_max - alpha * (u_max - u_min). ``alpha = 0`` keeps only the
    top-scoring ties, ``alpha = 1`` keeps every candidate.
    """
    if not ranked:
        return []
    u_max = ranked[0][0]
    u_min = ranked[-1][0]
    if alpha >= 1.0:
        limit = u_min
    else:
        limit = u_max - alpha * (u_max - u_min)
    rcl = []
    for score, j in ranked:
        if score < limit:
            break
        rcl.append(j)
    return rcl


def pick(rcl: Sequence[int], rng: random.Random) -> int:
    """Uniform draw from the candidate list using the run's own generator."""
    return rcl[rng.randrange(len(rcl))]
