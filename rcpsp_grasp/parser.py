"""Reader for PSPLIB single-mode RCPSP files (``.sm``).

Only the fields the engine needs are kept: job count, renewable resource
count, successor lists, durations, requests and capacities. Job numbers in
the file are 1-based; the returned instance is 0-based.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from .models import ProjectInstance


def _read_value(line: str) -> int:
    """Integer after the colon of a ``key : value`` header line."""
    try:
        return int(line.split(":", 1)[1].split()[0])
    except (IndexError, ValueError) as e:
        raise ValueError(f"Cannot read value from header line: {line!r}") from e


def _ints(line: str) -> List[int]:
    try:
        return [int(tok) for tok in line.split()]
    except ValueError as e:
        raise ValueError(f"Non-integer token in line: {line!r}") from e


def _next_data_line(lines: Iterator[str], section: str) -> str:
    for line in lines:
        if line.startswith("*"):
            break
        if line.startswith("-"):
            continue
        return line
    raise ValueError(f"Section {section} ended before all rows were read")


def parse_psplib_data(file_path: str) -> ProjectInstance:
    """Parse a PSPLIB single-mode instance file.

    Args:
        file_path: Path to a ``.sm`` file (j30, j60, j90, j120 sets).

    Returns:
        ProjectInstance with sentinels at ids 0 and ``jobs_number - 1``.

    Raises:
        ValueError: On a missing section, wrong row count, malformed
            numbers, more than one project, multiple modes, or
            non-renewable / doubly constrained resources.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        lines = iter([line.strip() for line in f if line.strip()])

    jobs: Optional[int] = None
    renewable: Optional[int] = None
    horizon: Optional[int] = None
    successors: Optional[List[List[int]]] = None
    durations: Optional[List[int]] = None
    requests: Optional[List[List[int]]] = None
    capacities: Optional[List[int]] = None

    for line in lines:
        low = line.lower()
        if low.startswith("projects"):
            if _read_value(line) != 1:
                raise ValueError("Only single-project instances are supported")
        elif low.startswith("jobs"):
            jobs = _read_value(line)
        elif low.startswith("horizon"):
            horizon = _read_value(line)
        elif low.startswith("- renewable"):
            renewable = _read_value(line)
        elif low.startswith("- nonrenewable") or low.startswith("- doubly constrained"):
            if _read_value(line) != 0:
                raise ValueError("Non-renewable and doubly constrained resources are not supported")
        elif low.startswith("project information"):
            next(lines, None)  # pronr. #jobs rel.date duedate tardcost MPM-Time
            next(lines, None)  # project row, job count is read from the header
        elif low.startswith("precedence relations"):
            if jobs is None:
                raise ValueError("Job count must precede PRECEDENCE RELATIONS")
            next(lines, None)  # column header
            successors = [[] for _ in range(jobs)]
            for j in range(jobs):
                row = _ints(_next_data_line(lines, "PRECEDENCE RELATIONS"))
                if len(row) < 3:
                    raise ValueError(f"Precedence row too short for job {j + 1}: {row}")
                jobnr, modes, count = row[0], row[1], row[2]
                if jobnr != j + 1:
                    raise ValueError(f"Expected job {j + 1} in precedence rows, got {jobnr}")
                if modes != 1:
                    raise ValueError(f"Job {jobnr} has {modes} modes; only single-mode is supported")
                succ = row[3:]
                if len(succ) != count:
                    raise ValueError(
                        f"Job {jobnr} declares {count} successors but lists {len(succ)}"
                    )
                successors[j] = [s - 1 for s in succ]
        elif low.startswith("requests/durations"):
            if jobs is None or renewable is None:
                raise ValueError("Job and resource counts must precede REQUESTS/DURATIONS")
            next(lines, None)  # column header
            durations = [0] * jobs
            requests = [[0] * renewable for _ in range(jobs)]
            for j in range(jobs):
                row = _ints(_next_data_line(lines, "REQUESTS/DURATIONS"))
                if len(row) != 3 + renewable:
                    raise ValueError(
                        f"Request row for job {j + 1} has {len(row)} values, "
                        f"expected {3 + renewable}"
                    )
                jobnr, mode, duration = row[0], row[1], row[2]
                if jobnr != j + 1 or mode != 1:
                    raise ValueError(f"Unexpected job/mode {jobnr}/{mode} in request rows")
                durations[j] = duration
                requests[j] = row[3:]
        elif low.startswith("resourceavailabilities"):
            if renewable is None:
                raise ValueError("Resource count must precede RESOURCEAVAILABILITIES")
            next(lines, None)  # R 1 R 2 ...
            capacities = _ints(_next_data_line(lines, "RESOURCEAVAILABILITIES"))
            if len(capacities) != renewable:
                raise ValueError(
                    f"Expected {renewable} capacities, got {len(capacities)}"
                )

    missing = [
        name
        for name, value in (
            ("jobs", jobs),
            ("renewable resources", renewable),
            ("PRECEDENCE RELATIONS", successors),
            ("REQUESTS/DURATIONS", durations),
            ("RESOURCEAVAILABILITIES", capacities),
        )
        if value is None
    ]
    if missing:
        raise ValueError(f"Incomplete instance file {file_path}: missing {', '.join(missing)}")

    return ProjectInstance.from_successors(
        durations=durations,
        requests=requests,
        capacities=capacities,
        successors=successors,
        declared_horizon=horizon,
    )
