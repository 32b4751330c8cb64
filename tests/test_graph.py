import pytest
from conftest import diamond, make_graph, make_instance

from rcpsp_grasp.exceptions import InvalidConfigurationError, MalformedGraphError
from rcpsp_grasp.graph import TaskGraph
from rcpsp_grasp.operations import create_base_sequence, validate_sequence


def test_from_instance_builds_predecessors_and_horizon():
    g = diamond()
    assert g.size == 6
    assert g.resources_number == 2
    assert g.source == 0 and g.sink == 5
    assert g.predecessors[4] == (1, 2)
    assert g.horizon == sum(g.durations)
    assert g.total_demand(4) == 4


def test_topological_order_lowest_id_first():
    g = diamond()
    assert g.topological_order() == [0, 1, 2, 3, 4, 5]
    assert create_base_sequence(g) == [0, 1, 2, 3, 4, 5]


def test_critical_path_length():
    # 0 -> 2 -> 4 -> 5 : 3 + 4
    assert diamond().critical_path_length() == 7


def test_new_tasks_are_unscheduled_copies():
    g = diamond()
    a = g.new_tasks()
    b = g.new_tasks()
    a[1].schedule_at(3)
    assert a[1].finish == 5
    assert not b[1].is_scheduled
    assert a[4].predecessors == (1, 2)


def test_request_above_capacity_rejected():
    with pytest.raises(InvalidConfigurationError):
        make_graph([0, 2, 0], [[0], [3], [0]], [2], [[1], [2], []])


@pytest.mark.parametrize(
    "durations,requests,capacities",
    [
        ([0, -1, 0], [[0], [1], [0]], [1]),  # negative duration
        ([0, 1, 0], [[0], [-1], [0]], [1]),  # negative request
        ([0, 1, 0], [[0], [1, 0], [0]], [1]),  # wrong request width
    ],
)
def test_invalid_values_rejected(durations, requests, capacities):
    with pytest.raises(InvalidConfigurationError):
        make_graph(durations, requests, capacities, [[1], [2], []])


def test_no_resources_rejected():
    with pytest.raises(InvalidConfigurationError):
        make_graph([0, 1, 0], [[], [], []], [], [[1], [2], []])


def test_no_jobs_rejected():
    with pytest.raises(InvalidConfigurationError):
        make_graph([], [], [1], [])


def test_negative_capacity_rejected():
    with pytest.raises(InvalidConfigurationError):
        make_graph([0, 1, 0], [[0], [0], [0]], [-1], [[1], [2], []])


@pytest.mark.parametrize(
    "successors",
    [
        [[1], [5], []],  # out of range
        [[1], [1, 2], []],  # self loop
        [[1], [2], [0]],  # sink has a successor
        [[1, 2], [], []],  # job 1 does not reach the sink
    ],
)
def test_malformed_edges_rejected(successors):
    with pytest.raises(MalformedGraphError):
        make_graph([0, 1, 0], [[0], [1], [0]], [1], successors)


def test_unreachable_job_rejected():
    with pytest.raises(MalformedGraphError):
        make_graph([0, 1, 1, 0], [[0], [1], [1], [0]], [1], [[1], [3], [3], []])


def test_inconsistent_predecessors_rejected():
    inst = make_instance([0, 1, 0], [[0], [1], [0]], [1], [[1], [2], []])
    broken = inst.__class__(
        jobs_number=inst.jobs_number,
        resources_number=inst.resources_number,
        durations=inst.durations,
        requests=inst.requests,
        capacities=inst.capacities,
        successors=inst.successors,
        predecessors=((), (), (1,)),
    )
    with pytest.raises(MalformedGraphError):
        TaskGraph.from_instance(broken)


def test_cycle_detected_by_topological_order():
    # 1 <-> 2 are both fed by the source and both feed the sink
    g = make_graph(
        [0, 1, 1, 0],
        [[0], [1], [1], [0]],
        [1],
        [[1, 2], [2, 3], [1, 3], []],
    )
    with pytest.raises(MalformedGraphError):
        g.topological_order()


def test_validate_sequence_errors():
    g = diamond()
    assert validate_sequence(g, [0, 3, 2, 1, 4, 5])
    with pytest.raises(ValueError):
        validate_sequence(g, [0, 1, 2, 3, 5])  # incomplete
    with pytest.raises(ValueError):
        validate_sequence(g, [0, 1, 1, 3, 4, 5])  # duplicate
    with pytest.raises(ValueError):
        validate_sequence(g, [0, 1, 4, 2, 3, 5])  # 4 before predecessor 2
    with pytest.raises(ValueError):
        validate_sequence(g, [0, 1, 2, 3, 4, 9])  # out of range
