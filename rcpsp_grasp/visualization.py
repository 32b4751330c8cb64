import logging
import os
from pathlib import Path
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.patches import Rectangle  # noqa: E402

from rcpsp_grasp.schedule import Schedule  # noqa: E402
from rcpsp_grasp.timeline import FREE  # noqa: E402

logger = logging.getLogger("rcpsp.visualization")


def _task_colors(n: int):
    cmap = plt.get_cmap("tab20")
    return [cmap(i % 20) for i in range(n)]


def plot_gantt(
    schedule: Schedule,
    save_path: str,
    title: Optional[str] = None,
    show_legend: Optional[bool] = None,
) -> str:
    """Create and save a Gantt chart with one row per task.

    Sentinel and zero-duration tasks are skipped. The figure height grows
    with the number of rows and the legend is dropped for large instances
    unless forced.
    """
    rows = [r for r in schedule.rows() if r.duration > 0]
    n = len(schedule.tasks)
    colors = _task_colors(n)
    height = min(0.3 * max(len(rows), 1) + 2, 18)
    fig, ax = plt.subplots(figsize=(12, height), constrained_layout=True)
    for y, row in enumerate(rows):
        ax.barh(
            y,
            row.duration,
            left=row.start,
            height=0.8,
            color=colors[row.task],
            alpha=0.85,
            edgecolor="black",
            linewidth=0.6,
        )
    ax.set_xlabel("Time", fontsize=12)
    ax.set_ylabel("Task", fontsize=12)
    ax.set_title(title or f"Gantt Chart - Cmax = {schedule.makespan}", fontsize=14, fontweight="bold")
    ax.set_yticks(range(len(rows)))
    ax.set_yticklabels([f"J{r.task + 1}" for r in rows])
    ax.invert_yaxis()
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)

    if show_legend is None:
        show_legend = len(rows) <= 40
    if show_legend and rows:
        legend_elements = [
            Rectangle((0, 0), 1, 1, facecolor=colors[r.task], alpha=0.85, edgecolor="black",
                      label=f"Job {r.task + 1}")
            for r in rows
        ]
        ax.legend(
            handles=legend_elements,
            bbox_to_anchor=(1.02, 1),
            loc="upper left",
            borderaxespad=0.0,
            fontsize=8,
            frameon=False,
            ncol=1 if len(rows) <= 25 else 2,
        )

    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    logger.info("Gantt chart saved as: %s", save_path)
    return save_path


def plot_resource_usage(schedule: Schedule, save_path: str) -> str:
    """One panel per resource: each occupied (time, unit) cell is a coloured square."""
    k_count = len(schedule.timelines)
    colors = _task_colors(len(schedule.tasks))
    tmax = max((tl.last_busy_slot() + 1 for tl in schedule.timelines), default=0)
    tmax = max(tmax, 1)
    fig, axes = plt.subplots(
        k_count,
        1,
        figsize=(min(6 + tmax * 0.08, 18), min(2.2 * k_count + 1, 20)),
        constrained_layout=True,
        squeeze=False,
    )
    for k, timeline in enumerate(schedule.timelines):
        ax = axes[k][0]
        seen: dict[int, Rectangle] = {}
        grid = schedule.occupancy(k)
        for t in range(min(tmax, timeline.horizon)):
            for r in range(timeline.capacity):
                owner = grid[t][r]
                if owner == FREE:
                    continue
                patch = Rectangle((t, r), 1, 1, facecolor=colors[owner], edgecolor="none")
                ax.add_patch(patch)
                seen.setdefault(owner, patch)
        ax.set_xlim(0, tmax)
        ax.set_ylim(0, max(timeline.capacity, 1))
        ax.set_ylabel(f"R{k + 1}", fontsize=11)
        ax.grid(True, alpha=0.25, linestyle="--", linewidth=0.7)
        if seen and len(seen) <= 40:
            ax.legend(
                [seen[j] for j in sorted(seen)],
                [f"{j + 1}" for j in sorted(seen)],
                loc="center left",
                bbox_to_anchor=(1.01, 0.5),
                frameon=False,
                fontsize=7,
                ncol=1 if len(seen) <= 20 else 2,
            )
    axes[-1][0].set_xlabel("Time", fontsize=12)
    fig.suptitle(f"Resource usage - Cmax = {schedule.makespan}", fontsize=14, fontweight="bold")
    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    logger.info("Resource usage plot saved as: %s", save_path)
    return save_path


def plot_makespan_histogram(makespans: List[int], save_path: str, alpha: Optional[float] = None) -> str:
    """Distribution of the makespans produced by a population."""
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    if makespans:
        lo, hi = min(makespans), max(makespans)
        bins = range(lo, hi + 2)
        ax.hist(makespans, bins=bins, color="#1f77b4", alpha=0.8, edgecolor="black", align="left")
        ax.axvline(lo, color="red", linestyle="--", linewidth=1.2)
        ax.annotate(
            f"Best: {lo}",
            xy=(lo, ax.get_ylim()[1] * 0.9),
            xytext=(6, 0),
            textcoords="offset points",
            fontsize=9,
            bbox=dict(boxstyle="round,pad=0.2", facecolor="lightgreen", alpha=0.7),
        )
    suffix = f" (alpha = {alpha})" if alpha is not None else ""
    ax.set_xlabel("Cmax", fontsize=12)
    ax.set_ylabel("Runs", fontsize=12)
    ax.set_title(f"Population makespans{suffix}", fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.25, linestyle="--", linewidth=0.7)
    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    logger.info("Makespan histogram saved as: %s", save_path)
    return save_path


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def next_unique_path(path: str | Path) -> str:
    """If the file exists, append _1, _2 ... until a free name is found."""
    p = Path(path)
    if not p.exists():
        return str(p)
    stem = p.stem
    suffix = p.suffix
    parent = p.parent
    counter = 1
    while True:
        candidate = parent / f"{stem}_{counter}{suffix}"
        if not candidate.exists():
            return str(candidate)
        counter += 1
