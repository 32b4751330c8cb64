"""Tests for the population driver (run_population) and its JSON output.

Covers:
- reproducibility for a fixed base seed
- identical results for serial and process-pool execution
- best-of-N never getting worse when N grows
- parameter validation
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import diamond

from rcpsp_grasp.decoder import check_precedence, check_resource_usage
from rcpsp_grasp.exceptions import InvalidConfigurationError
from rcpsp_grasp.graph import TaskGraph
from rcpsp_grasp.modes import population
from rcpsp_grasp.modes.common import GraspParams, RunRecord, derive_seed, run_member
from rcpsp_grasp.modes.population import (
    run_population,
    save_population_results,
    select_best,
)
from rcpsp_grasp.parser import parse_psplib_data


def _small_graph(path: str) -> TaskGraph:
    return TaskGraph.from_instance(parse_psplib_data(path))


def test_derive_seed_is_distinct_per_index():
    seeds = {derive_seed(7, i) for i in range(100)}
    assert len(seeds) == 100
    assert derive_seed(1, 0) != derive_seed(0, 1)


def test_run_member_is_reproducible():
    g = diamond()
    a = run_member(g, 0.75, 11, 3)
    b = run_member(g, 0.75, 11, 3)
    assert (a.sequence, a.makespan, a.seed) == (b.sequence, b.makespan, b.seed)
    assert a.index == 3


def test_select_best_prefers_lower_index_on_tie():
    recs = [
        RunRecord(index=2, seed=2, sequence=(0,), makespan=5, elapsed=0.0),
        RunRecord(index=0, seed=0, sequence=(0,), makespan=5, elapsed=0.0),
        RunRecord(index=1, seed=1, sequence=(0,), makespan=6, elapsed=0.0),
    ]
    assert select_best(recs).index == 0
    assert select_best([]) is None


def test_population_returns_feasible_best(small_instance_path: str):
    g = _small_graph(small_instance_path)
    result = run_population(g, GraspParams(population_size=20, alpha=0.75, random_seed=3))
    assert len(result.makespans) == 20
    assert result.best_makespan == min(result.makespans)
    assert result.makespans[result.best_index] == result.best_makespan
    assert result.best_makespan >= g.critical_path_length()
    assert check_precedence(result.best)
    assert check_resource_usage(result.best)
    assert min(result.makespans) <= result.average_makespan <= max(result.makespans)


def test_population_is_reproducible(small_instance_path: str):
    g = _small_graph(small_instance_path)
    params = GraspParams(population_size=15, alpha=1.0, random_seed=99)
    a = run_population(g, params)
    b = run_population(g, params)
    assert a.makespans == b.makespans
    assert a.best.sequence == b.best.sequence
    assert a.best_seed == derive_seed(99, a.best_index)


def test_serial_and_parallel_agree(small_instance_path: str):
    g = _small_graph(small_instance_path)
    serial = run_population(g, GraspParams(population_size=12, alpha=0.5, random_seed=4, workers=1))
    parallel = run_population(
        g, GraspParams(population_size=12, alpha=0.5, random_seed=4, workers=2)
    )
    assert serial.makespans == parallel.makespans
    assert serial.best_index == parallel.best_index
    assert serial.best.sequence == parallel.best.sequence


def test_larger_population_never_worse(small_instance_path: str):
    g = _small_graph(small_instance_path)
    small = run_population(g, GraspParams(population_size=3, alpha=1.0, random_seed=8))
    large = run_population(g, GraspParams(population_size=30, alpha=1.0, random_seed=8))
    assert large.makespans[:3] == small.makespans
    assert large.best_makespan <= small.best_makespan


@pytest.mark.parametrize(
    "params",
    [
        GraspParams(population_size=0),
        GraspParams(population_size=-3),
        GraspParams(alpha=-0.1),
        GraspParams(alpha=1.5),
        GraspParams(random_seed=-1),
        GraspParams(workers=0),
    ],
)
def test_invalid_params_rejected(params: GraspParams):
    with pytest.raises(InvalidConfigurationError):
        run_population(diamond(), params)


def test_save_population_results(tmp_path: Path, small_instance_path: str):
    g = _small_graph(small_instance_path)
    result = run_population(g, GraspParams(population_size=5, alpha=0.75, random_seed=1))
    out = save_population_results(result, small_instance_path, str(tmp_path / "results"))
    data = json.loads(Path(out).read_text(encoding="utf-8"))
    assert Path(out).name.startswith("population_results_")
    assert data["params"]["population_size"] == 5
    assert len(data["per_run"]) == 5
    assert data["best"]["makespan"] == result.best_makespan
    assert data["best"]["sequence"] == list(result.best.sequence)
    assert data["best"]["sequence_compact"].split()[0] == "1"
    assert data["best"]["start_times"][0] == 0


def test_population_without_runs_raises(monkeypatch):
    monkeypatch.setattr(population, "_iter_records", lambda graph, params: iter(()))
    with pytest.raises(ValueError):
        run_population(diamond(), GraspParams(population_size=2, random_seed=1))
