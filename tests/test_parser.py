"""Pytest tests for `parse_psplib_data`.

Each test either reads the bundled fixture or writes a temporary PSPLIB
single-mode file and asserts successful parsing or the correct exception.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager

import pytest

from rcpsp_grasp.graph import TaskGraph
from rcpsp_grasp.parser import parse_psplib_data

HEADER = """\
************************************************************************
projects                      :  1
jobs (incl. supersource/sink ):  4
horizon                       :  7
RESOURCES
  - renewable                 :  1   R
  - nonrenewable              :  {nonrenewable}   N
  - doubly constrained        :  0   D
************************************************************************
"""

PRECEDENCE = """\
PRECEDENCE RELATIONS:
jobnr.    #modes  #successors   successors
   1        1          2           2   3
   2        1          1           4
   3        1          {count}           4
   4        1          0
************************************************************************
"""

REQUESTS = """\
REQUESTS/DURATIONS:
jobnr. mode duration  R 1
------------------------------------------------------------------------
  1      1     0       0
  2      1     3       1
  3      1     4       {req}
  4      1     0       0
************************************************************************
"""

AVAILABILITY = """\
RESOURCEAVAILABILITIES:
  R 1
    {cap}
************************************************************************
"""


def instance_text(nonrenewable=0, count=1, req=1, cap=2, sections=None) -> str:
    parts = {
        "header": HEADER.format(nonrenewable=nonrenewable),
        "precedence": PRECEDENCE.format(count=count),
        "requests": REQUESTS.format(req=req),
        "availability": AVAILABILITY.format(cap=cap),
    }
    order = sections or ["header", "precedence", "requests", "availability"]
    return "".join(parts[name] for name in order)


@contextmanager
def temp_instance(content: str):
    fd, path = tempfile.mkstemp(suffix=".sm", text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:  # pragma: no cover
            pass


def test_parse_fixture(small_instance_path: str):
    inst = parse_psplib_data(small_instance_path)
    assert inst.jobs_number == 8
    assert inst.resources_number == 2
    assert inst.declared_horizon == 18
    assert inst.durations == (0, 3, 4, 2, 5, 1, 3, 0)
    assert inst.requests[4] == (2, 2)
    assert inst.capacities == (4, 3)
    assert inst.successors[0] == (1, 2, 3)
    assert inst.predecessors[7] == (4, 5, 6)
    g = TaskGraph.from_instance(inst)
    assert g.critical_path_length() == 8


def test_parse_minimal_zero_based():
    with temp_instance(instance_text()) as path:
        inst = parse_psplib_data(path)
        assert inst.jobs_number == 4
        assert inst.successors == ((1, 2), (3,), (3,), ())
        assert inst.predecessors[3] == (1, 2)
        assert inst.capacities == (2,)
        assert inst.upper_bound == 7


@pytest.mark.parametrize(
    "kwargs",
    [
        {"nonrenewable": 1},  # non-renewable resources not supported
        {"count": 2},  # declared successor count does not match the list
        {"sections": ["header", "precedence", "requests"]},  # no capacities
        {"sections": ["precedence", "requests", "availability"]},  # no header
    ],
)
def test_parse_errors(kwargs):
    with temp_instance(instance_text(**kwargs)) as path:
        with pytest.raises(ValueError):
            parse_psplib_data(path)


def test_non_integer_token_rejected():
    with temp_instance(instance_text(req="x")) as path:
        with pytest.raises(ValueError):
            parse_psplib_data(path)


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        parse_psplib_data("/nonexistent/instance.sm")
