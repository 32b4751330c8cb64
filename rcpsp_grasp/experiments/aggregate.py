from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger("rcpsp.experiments")

SUMMARY_COLUMNS = [
    "instance_file",
    "alpha",
    "population_size",
    "seed",
    "jobs",
    "resources",
    "makespan",
    "critical_path",
    "gap_percent",
    "average_makespan",
    "total_time_ms",
]


def load_results_dir(timestamp_dir: Path) -> List[Dict[str, Any]]:
    """Load every per-run JSON file of one batch directory."""
    results: List[Dict[str, Any]] = []
    for file in sorted(Path(timestamp_dir).glob("*.json")):
        try:
            with open(file, "r", encoding="utf-8") as f:
                results.append(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load %s: %s", file, e)
    return results


def write_summary_csv(timestamp_dir: Path) -> Path:
    """Flatten the batch results into ``summary.csv`` next to them."""
    timestamp_dir = Path(timestamp_dir)
    out_path = timestamp_dir / "summary.csv"
    rows = load_results_dir(timestamp_dir)
    if not rows:
        logger.warning("No result files found to summarize in %s", timestamp_dir)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=SUMMARY_COLUMNS)
        writer.writeheader()
        for data in rows:
            cfg = data.get("config", {})
            writer.writerow(
                {
                    "instance_file": cfg.get("instance_file"),
                    "alpha": cfg.get("alpha"),
                    "population_size": cfg.get("population_size"),
                    "seed": cfg.get("seed"),
                    "jobs": data.get("instance_jobs"),
                    "resources": data.get("instance_resources"),
                    "makespan": data.get("makespan"),
                    "critical_path": data.get("critical_path"),
                    "gap_percent": data.get("gap_percent"),
                    "average_makespan": data.get("average_makespan"),
                    "total_time_ms": data.get("total_time_ms"),
                }
            )
    logger.info("Summary written to %s (%d rows)", out_path, len(rows))
    return out_path
