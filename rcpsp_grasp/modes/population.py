"""Population driver: best of N independent GRASP constructions.

Each member runs on a private copy of tasks and timelines with a random
stream derived from the base seed and the member index, so the outcome does
not depend on whether members run serially or in a process pool. Members
report ``(index, seed, sequence, makespan)``; the reduction keeps the lowest
makespan (ties to the lowest index) and re-decodes that sequence into the
returned schedule.
"""
from __future__ import annotations

import json
import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Iterable, Iterator, List, Optional

from rcpsp_grasp.decoder import build_schedule_from_sequence
from rcpsp_grasp.graph import TaskGraph
from rcpsp_grasp.schedule import Schedule
from .common import GraspParams, RunRecord, run_member

logger = logging.getLogger("rcpsp.population")


@dataclass
class PopulationResult:
    """Best schedule of a population plus per-run statistics."""
    best: Schedule
    best_index: int
    best_seed: int
    params: GraspParams
    makespans: List[int] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def best_makespan(self) -> int:
        return self.best.makespan

    @property
    def average_makespan(self) -> float:
        if not self.makespans:
            return float("nan")
        return sum(self.makespans) / len(self.makespans)


def _iter_records(graph: TaskGraph, params: GraspParams) -> Iterator[RunRecord]:
    indices = range(params.population_size)
    workers = min(params.workers, os.cpu_count() or 1, params.population_size)
    if workers <= 1:
        for i in indices:
            yield run_member(graph, params.alpha, params.random_seed, i)
        return
    job = partial(run_member, graph, params.alpha, params.random_seed)
    chunksize = max(1, params.population_size // (workers * 4))
    with ProcessPoolExecutor(max_workers=workers) as pool:
        # map preserves submission order, so the fold below sees index order
        yield from pool.map(job, indices, chunksize=chunksize)


def select_best(records: Iterable[RunRecord]) -> Optional[RunRecord]:
    """Min-by-makespan fold; the earlier index wins a tie."""
    best: Optional[RunRecord] = None
    for rec in records:
        if best is None or (rec.makespan, rec.index) < (best.makespan, best.index):
            best = rec
    return best


def run_population(graph: TaskGraph, params: GraspParams) -> PopulationResult:
    """Run ``params.population_size`` independent constructions and keep the best.

    Args:
        graph: Validated precedence graph, shared read-only by every run.
        params: Population size, alpha, base seed and worker count.

    Returns:
        PopulationResult whose ``best`` schedule is freshly decoded from the
        winning sequence.

    Raises:
        InvalidConfigurationError: If ``params`` are out of range.
        MalformedGraphError: If the precedence graph contains a cycle.
        ValueError: If no run reported back.
    """
    params.validate()
    t0 = time.perf_counter()
    makespans: List[int] = [0] * params.population_size
    best: Optional[RunRecord] = None
    step = max(1, params.population_size // 10)
    for done, rec in enumerate(_iter_records(graph, params), start=1):
        makespans[rec.index] = rec.makespan
        best = select_best([rec] if best is None else [best, rec])
        logger.debug("Run %d seed=%d makespan=%d", rec.index, rec.seed, rec.makespan)
        if done % step == 0:
            logger.info(
                "Progress %d/%d: best makespan=%s", done, params.population_size, best.makespan
            )
    if best is None:
        raise ValueError("population finished without a single run")
    schedule = build_schedule_from_sequence(graph, best.sequence)
    elapsed = time.perf_counter() - t0
    logger.info(
        "Population summary: best=%d (run %d) avg=%.2f in %.3fs",
        best.makespan,
        best.index,
        sum(makespans) / len(makespans),
        elapsed,
    )
    return PopulationResult(
        best=schedule,
        best_index=best.index,
        best_seed=best.seed,
        params=params,
        makespans=makespans,
        elapsed=elapsed,
    )


def save_population_results(
    result: PopulationResult,
    instance_path: str,
    out_dir: str,
) -> str:
    """Persist a population result as ``population_results_<timestamp>.json``.

    Returns:
        Path of the written file.
    """
    os.makedirs(out_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = os.path.join(out_dir, f"population_results_{stamp}.json")
    best = result.best
    payload = {
        "instance": instance_path,
        "timestamp": stamp,
        "params": {
            "population_size": result.params.population_size,
            "alpha": result.params.alpha,
            "random_seed": result.params.random_seed,
            "workers": result.params.workers,
        },
        "per_run": [
            {"run": i, "makespan": c} for i, c in enumerate(result.makespans)
        ],
        "best": {
            "run": result.best_index,
            "seed": result.best_seed,
            "makespan": best.makespan,
            "sequence": list(best.sequence),
            "sequence_compact": " ".join(str(j + 1) for j in best.sequence),
            "start_times": best.start_times(),
        },
        "average_makespan": result.average_makespan,
        "elapsed": result.elapsed,
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    logger.info("Saved population results JSON to %s", path)
    return path
