"""Per-resource occupancy grid.

A ``ResourceTimeline`` holds ``horizon x capacity`` cells. Each cell is
either ``FREE`` or the id of the task occupying that unit during that slot.
``find_window`` is read-only; ``assign`` commits an allocation that the
caller has already located with ``find_window``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import InfeasibleWindowError

FREE = -1
NOT_FOUND = -1


@dataclass
class ResourceTimeline:
    """Mutable usage state of one renewable resource.

    cells[t][r] == FREE      -> unit r is idle in slot t
    cells[t][r] == task id   -> unit r is held by that task in slot t
    """

    horizon: int
    capacity: int
    cells: list[list[int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[FREE] * self.capacity for _ in range(self.horizon)]

    def available(self, t: int) -> int:
        """Number of free units at slot ``t``."""
        return self.cells[t].count(FREE)

    def usage(self, t: int, r: int) -> int:
        return self.cells[t][r]

    def find_window(self, t_start: int, demand: int, duration: int) -> int:
        """Leftmost ``t >= t_start`` with ``demand`` free units over ``duration`` slots.

        Walks forward keeping the length of the current run of feasible
        slots; a slot without enough free units restarts the candidate at
        the next slot. Does NOT mutate the grid.

        Returns:
            Start slot of the window, or ``NOT_FOUND`` when no window fits
            inside the horizon.
        """
        if demand == 0 or duration == 0:
            return t_start
        if demand > self.capacity:
            return NOT_FOUND

        candidate = t_start
        run_length = 0
        for t in range(t_start, self.horizon):
            if self.available(t) >= demand:
                run_length += 1
                if run_length >= duration:
                    return candidate
            else:
                candidate = t + 1
                run_length = 0
        return NOT_FOUND

    def assign(self, t: int, demand: int, duration: int, task_id: int) -> None:
        """Bind ``demand`` free units to ``task_id`` in every slot of ``[t, t+duration)``.

        Units are taken first-fit. Raises InfeasibleWindowError if a slot
        runs out of free units, which means the window was not checked.
        """
        if demand == 0 or duration == 0:
            return
        if t < 0 or t + duration > self.horizon:
            raise InfeasibleWindowError(task_id, None, t, reason="window outside horizon")
        for i in range(t, t + duration):
            row = self.cells[i]
            charge = 0
            for r in range(self.capacity):
                if row[r] == FREE:
                    row[r] = task_id
                    charge += 1
                    if charge >= demand:
                        break
            if charge < demand:
                raise InfeasibleWindowError(
                    task_id, None, i, reason=f"only {charge}/{demand} units free at t={i}"
                )

    def units_of(self, t: int, task_id: int) -> int:
        """How many units ``task_id`` holds at slot ``t``."""
        return self.cells[t].count(task_id)

    def last_busy_slot(self) -> int:
        """Index of the last slot with any occupied unit, or -1 if idle."""
        for t in range(self.horizon - 1, -1, -1):
            if self.available(t) < self.capacity:
                return t
        return -1

    def reset(self) -> None:
        """Free every cell, keeping the dimensions."""
        for row in self.cells:
            for r in range(self.capacity):
                row[r] = FREE

    def copy(self) -> ResourceTimeline:
        return ResourceTimeline(
            horizon=self.horizon,
            capacity=self.capacity,
            cells=[list(row) for row in self.cells],
        )

    def snapshot(self) -> tuple[tuple[int, ...], ...]:
        """Read-only copy of the grid for presentation layers."""
        return tuple(tuple(row) for row in self.cells)
