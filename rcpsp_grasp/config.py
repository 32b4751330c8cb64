"""Configuration loading for the command line and experiment batches."""

from __future__ import annotations

import json
import os
from typing import Any, Dict

import yaml

from rcpsp_grasp.modes.common import GraspParams


def load_config(config_file: str) -> Dict[str, Any]:
    """Load configuration from a YAML (``.yml``/``.yaml``) or JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the top level is not a mapping.
    """
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith((".yml", ".yaml")):
        cfg = yaml.safe_load(text) or {}
    else:
        cfg = json.loads(text)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config root must be a mapping, got {type(cfg).__name__}")
    return cfg


def params_from_config(cfg: Dict[str, Any]) -> GraspParams:
    """Build GraspParams from the ``grasp`` section, falling back to defaults."""
    section = cfg.get("grasp", {}) if isinstance(cfg.get("grasp"), dict) else {}
    defaults = GraspParams()
    return GraspParams(
        population_size=int(section.get("population_size", defaults.population_size)),
        alpha=float(section.get("alpha", defaults.alpha)),
        random_seed=int(section.get("random_seed", defaults.random_seed)),
        workers=int(section.get("workers", defaults.workers)),
    )
