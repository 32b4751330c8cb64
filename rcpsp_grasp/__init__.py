"""Core package for GRASP-based RCPSP scheduling.

Exports base data structures, the construction engine and the population
driver.
"""

from rcpsp_grasp.algorithms.grasp import construct_sequence, grasp_schedule  # noqa: F401
from rcpsp_grasp.decoder import build_schedule_from_sequence  # noqa: F401
from rcpsp_grasp.exceptions import (  # noqa: F401
    InfeasibleWindowError,
    InvalidConfigurationError,
    MalformedGraphError,
    SchedulingError,
)
from rcpsp_grasp.graph import TaskGraph  # noqa: F401
from rcpsp_grasp.models import ProjectInstance, Task  # noqa: F401
from rcpsp_grasp.modes.common import GraspParams  # noqa: F401
from rcpsp_grasp.modes.population import PopulationResult, run_population  # noqa: F401
from rcpsp_grasp.parser import parse_psplib_data  # noqa: F401
from rcpsp_grasp.schedule import Schedule  # noqa: F401
from rcpsp_grasp.timeline import ResourceTimeline  # noqa: F401

__all__ = [
    "GraspParams",
    "InfeasibleWindowError",
    "InvalidConfigurationError",
    "MalformedGraphError",
    "PopulationResult",
    "ProjectInstance",
    "ResourceTimeline",
    "Schedule",
    "SchedulingError",
    "Task",
    "TaskGraph",
    "build_schedule_from_sequence",
    "construct_sequence",
    "grasp_schedule",
    "parse_psplib_data",
    "run_population",
]
