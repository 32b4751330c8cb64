"""Shared primitives used by execution modes.

This module isolates the light data container with GRASP hyper-parameters
(`GraspParams`) and a thin single-run helper (`run_member`) so that the
population driver, the experiment runner and the CLI can invoke the
construction uniformly, in-process or inside a worker process.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass

from rcpsp_grasp.algorithms.grasp import construct_sequence
from rcpsp_grasp.decoder import build_schedule_from_sequence
from rcpsp_grasp.exceptions import InvalidConfigurationError
from rcpsp_grasp.graph import TaskGraph

SEED_STRIDE = 2**32


@dataclass(slots=True)
class GraspParams:
    """Bundle of the configurable parameters of a population run.

    population_size: number of independent constructions.
    alpha: restricted candidate list greediness in [0, 1].
    random_seed: base seed; every run derives its own stream from it.
    workers: number of processes running constructions concurrently.
    """
    population_size: int = 100
    alpha: float = 0.75
    random_seed: int = 0
    workers: int = 1

    def validate(self) -> None:
        """Raise InvalidConfigurationError when a value is out of range."""
        if isinstance(self.population_size, bool) or not isinstance(self.population_size, int):
            raise InvalidConfigurationError(
                f"population_size must be an integer, got {self.population_size!r}"
            )
        if self.population_size <= 0:
            raise InvalidConfigurationError(
                f"population_size must be positive, got {self.population_size}"
            )
        if not isinstance(self.alpha, (int, float)) or not 0.0 <= self.alpha <= 1.0:
            raise InvalidConfigurationError(f"alpha must be within [0, 1], got {self.alpha}")
        if not isinstance(self.random_seed, int) or self.random_seed < 0:
            raise InvalidConfigurationError(
                f"random_seed must be a non-negative integer, got {self.random_seed!r}"
            )
        if not isinstance(self.workers, int) or self.workers <= 0:
            raise InvalidConfigurationError(f"workers must be positive, got {self.workers!r}")


@dataclass(frozen=True)
class RunRecord:
    """Outcome of one population member."""
    index: int
    seed: int
    sequence: tuple[int, ...]
    makespan: int
    elapsed: float


def derive_seed(base_seed: int, index: int) -> int:
    """Seed of run ``index``; distinct for every (base, index) with index < 2**32."""
    return base_seed * SEED_STRIDE + index


def run_member(graph: TaskGraph, alpha: float, base_seed: int, index: int) -> RunRecord:
    """Execute one construction + decoding on private state.

    Module level (not a closure) so it can be shipped to worker processes.
    """
    seed = derive_seed(base_seed, index)
    rng = random.Random(seed)
    t0 = time.perf_counter()
    sequence = construct_sequence(graph, alpha, rng)
    schedule = build_schedule_from_sequence(graph, sequence)
    return RunRecord(
        index=index,
        seed=seed,
        sequence=tuple(sequence),
        makespan=schedule.makespan,
        elapsed=time.perf_counter() - t0,
    )
