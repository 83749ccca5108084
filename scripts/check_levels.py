#!/usr/bin/env python
"""Print a constant-speed feasibility report for the level catalog.

Usage
-----
::

    python scripts/check_levels.py [path/to/levels.yaml]

Flags levels where no constant speed clears every light; those rely on
mid-level speed changes and deserve a manual playtest.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

# Ensure the project root is on the import path.
_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import pandas as pd  # noqa: E402

from greenwave.analysis.feasibility import level_report  # noqa: E402
from greenwave.config import load_levels, load_physics  # noqa: E402


def main() -> int:
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    catalog = load_levels(path)
    physics = load_physics(path)

    report = level_report(catalog, physics)
    with pd.option_context("display.width", 120, "display.max_columns", None):
        print(report.to_string(index=False))

    blocked = report[report["feasible_speeds"] == 0]
    if not blocked.empty:
        print("\nNo constant-speed solution:")
        for name in blocked["name"]:
            print(f"  - {name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
