"""Errors raised by the scheduling engine."""

from __future__ import annotations

from typing import Optional


class SchedulingError(Exception):
    """Base class for engine errors."""


class InvalidConfigurationError(SchedulingError, ValueError):
    """Parameters or instance dimensions rejected before any run starts."""


class MalformedGraphError(SchedulingError, ValueError):
    """Precedence relation is cyclic, inconsistent or references unknown ids."""


class InfeasibleWindowError(SchedulingError, RuntimeError):
    """No feasible window inside the horizon. Indicates an engine defect."""

    def __init__(
        self,
        task_id: int,
        resource: Optional[int],
        earliest: int,
        reason: str = "no window within horizon",
    ) -> None:
        self.task_id = task_id
        self.resource = resource
        self.earliest = earliest
        self.reason = reason
        where = f"resource {resource}" if resource is not None else "all resources"
        super().__init__(
            f"Infeasible: task {task_id} cannot be placed on {where} "
            f"at or after t={earliest} ({reason})"
        )
