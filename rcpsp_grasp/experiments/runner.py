from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Sequence

from rcpsp_grasp.graph import TaskGraph
from rcpsp_grasp.models import ProjectInstance
from rcpsp_grasp.modes.common import GraspParams
from rcpsp_grasp.modes.population import run_population
from rcpsp_grasp.parser import parse_psplib_data

logger = logging.getLogger("rcpsp.experiments")


@dataclass(frozen=True)
class RunConfig:
    """Configuration of a single population run inside a batch."""

    instance_file: str  # path to a PSPLIB .sm file
    alpha: float  # RCL greediness
    population_size: int
    seed: int  # base seed of the population
    workers: int = 1


@dataclass
class RunResult:
    config: RunConfig
    makespan: int
    critical_path: int
    declared_horizon: int | None
    best_run: int
    average_makespan: float
    total_time_ms: int
    best_sequence: List[int]
    instance_jobs: int
    instance_resources: int

    def gap_percent(self) -> float | None:
        """Gap to the precedence-only lower bound."""
        if self.critical_path <= 0:
            return None
        return (self.makespan - self.critical_path) / self.critical_path * 100.0

    def to_dict(self):
        d = asdict(self)
        d["gap_percent"] = self.gap_percent()
        d["config"] = asdict(self.config)
        return d


class ExperimentRunner:
    def __init__(self, base_results_dir: str = "results/experiments"):
        """Each batch gets its own timestamped directory; older ones are kept."""
        self.base_dir = Path(base_results_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        self.timestamp_dir = self.base_dir / stamp
        self.timestamp_dir.mkdir(parents=True, exist_ok=True)
        self._loaded: dict[str, tuple[ProjectInstance, TaskGraph]] = {}

    def run(self, configs: Sequence[RunConfig]) -> List[RunResult]:
        results: List[RunResult] = []
        for idx, cfg in enumerate(configs, start=1):
            logger.info("(%d/%d) Running: %s", idx, len(configs), cfg)
            result = self._run_single(cfg)
            results.append(result)
            self._persist_result(result)
        return results

    def _load(self, instance_file: str) -> tuple[ProjectInstance, TaskGraph]:
        if instance_file not in self._loaded:
            instance = parse_psplib_data(instance_file)
            self._loaded[instance_file] = (instance, TaskGraph.from_instance(instance))
        return self._loaded[instance_file]

    def _run_single(self, cfg: RunConfig) -> RunResult:
        instance, graph = self._load(cfg.instance_file)
        params = GraspParams(
            population_size=cfg.population_size,
            alpha=cfg.alpha,
            random_seed=cfg.seed,
            workers=cfg.workers,
        )
        start = time.perf_counter()
        population = run_population(graph, params)
        total_time_ms = int((time.perf_counter() - start) * 1000)
        return RunResult(
            config=cfg,
            makespan=population.best_makespan,
            critical_path=graph.critical_path_length(),
            declared_horizon=instance.declared_horizon,
            best_run=population.best_index,
            average_makespan=population.average_makespan,
            total_time_ms=total_time_ms,
            best_sequence=list(population.best.sequence),
            instance_jobs=graph.size,
            instance_resources=graph.resources_number,
        )

    def _persist_result(self, result: RunResult) -> Path:
        cfg = result.config
        filename = (
            f"file={Path(cfg.instance_file).stem}_alpha={cfg.alpha:g}"
            f"_pop={cfg.population_size}_seed={cfg.seed}.json"
        )
        path = self.timestamp_dir / filename
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.info("Saved %s", path)
        return path


def generate_plan(
    instance_files: Iterable[str],
    alphas: Iterable[float],
    seeds: Iterable[int],
    population_size: int,
    workers: int = 1,
) -> List[RunConfig]:
    """Full cross product of files x alphas x seeds, in that nesting order."""
    alphas = list(alphas)
    seeds = list(seeds)
    configs: List[RunConfig] = []
    for instance_file in instance_files:
        for alpha in alphas:
            for seed in seeds:
                configs.append(
                    RunConfig(
                        instance_file=instance_file,
                        alpha=float(alpha),
                        population_size=population_size,
                        seed=int(seed),
                        workers=workers,
                    )
                )
    return configs
