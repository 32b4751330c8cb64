#!/usr/bin/env python3
"""Run the scheduler with the repository's config.yaml unless --config is given."""

import os
import sys

from rcpsp_grasp.main import main

CONFIG_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.yaml")


if __name__ == "__main__":
    argv = sys.argv[1:]
    if "--config" not in argv and os.path.isfile(CONFIG_FILE):
        argv = ["--config", CONFIG_FILE] + argv
    sys.exit(main(argv))
