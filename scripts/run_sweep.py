#!/usr/bin/env python3
"""
Run one auto-rejection sweep and exit.

Usage:
  python3 scripts/run_sweep.py

Meant for a cron trigger or scheduled job when the in-process sweeper is
disabled (SWEEP_ENABLED=false). Uses the same STORE_PROVIDER settings as the API.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from salonbook.wiring.dependencies import get_rejection_scheduler


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    result = get_rejection_scheduler().sweep()
    print(f"rejected={result.rejected} total={result.total} failed={result.failed}")
    for reason, count in result.reasons.items():
        print(f"  {reason}: {count}")
    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
