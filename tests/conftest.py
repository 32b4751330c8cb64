"""Pytest configuration, shared instance builders & custom summary hook.

Also ensures the project root is on sys.path so the package imports without
an editable install.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence

import pytest

# Ensure project root is on sys.path so 'import rcpsp_grasp' works
_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from rcpsp_grasp.graph import TaskGraph  # noqa: E402
from rcpsp_grasp.models import ProjectInstance  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"
SMALL_INSTANCE = FIXTURES / "small8.sm"


def make_instance(
    durations: Sequence[int],
    requests: Sequence[Sequence[int]],
    capacities: Sequence[int],
    successors: Sequence[Sequence[int]],
    declared_horizon: Optional[int] = None,
) -> ProjectInstance:
    return ProjectInstance.from_successors(
        durations=durations,
        requests=requests,
        capacities=capacities,
        successors=successors,
        declared_horizon=declared_horizon,
    )


def make_graph(
    durations: Sequence[int],
    requests: Sequence[Sequence[int]],
    capacities: Sequence[int],
    successors: Sequence[Sequence[int]],
) -> TaskGraph:
    return TaskGraph.from_instance(make_instance(durations, requests, capacities, successors))


def parallel_pair(capacity: int) -> TaskGraph:
    """Source, two unrelated tasks (durations 3 and 4, demand 1 each), sink."""
    return make_graph(
        durations=[0, 3, 4, 0],
        requests=[[0], [1], [1], [0]],
        capacities=[capacity],
        successors=[[1, 2], [3], [3], []],
    )


def diamond() -> TaskGraph:
    """Six tasks on two resources with one shared bottleneck."""
    return make_graph(
        durations=[0, 2, 3, 1, 4, 0],
        requests=[[0, 0], [2, 1], [1, 1], [1, 0], [2, 2], [0, 0]],
        capacities=[3, 2],
        successors=[[1, 2, 3], [4], [4], [5], [5], []],
    )


@pytest.fixture
def small_instance_path() -> str:
    return str(SMALL_INSTANCE)


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    collected = terminalreporter._numcollected  # type: ignore[attr-defined]
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))

    terminalreporter.section("Custom summary", sep="=")
    terminalreporter.write_line(
        "Collected: "
        f"{collected} | Passed: {passed} | Failed: {failed} | "
        f"Errors: {errors} | Skipped: {skipped}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
