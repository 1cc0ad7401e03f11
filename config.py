#!/usr/bin/env python
"""Set up a local fleet inventory workspace.

Copies config.sample.yaml and sample_inventory.yaml to their working names,
then loads the inventory the config points at and prints what it holds.

Usage:
    python config.py              # Keep existing working copies
    python config.py --force      # Replace them with fresh samples
    python config.py --skip-check # Copy only
"""

import argparse
import sys
from pathlib import Path

script_dir = Path(__file__).parent.resolve()
sys.path.insert(0, str(script_dir / "src"))

from fleet_inventory.bootstrap import CopyOutcome, check_inventory, copy_samples  # noqa: E402
from fleet_inventory.errors import InventoryError  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Set up a local fleet inventory workspace")
    parser.add_argument("--force", "-f", action="store_true", help="Replace existing working copies")
    parser.add_argument("--skip-check", action="store_true", help="Do not load the inventory afterwards")
    args = parser.parse_args()

    for result in copy_samples(script_dir, force=args.force):
        if result.outcome == CopyOutcome.KEPT:
            print(f"  keep: {result.target} (use --force to replace)")
        elif result.outcome == CopyOutcome.NO_SAMPLE:
            print(f"  skip: {result.target} ({result.sample} not found)")
        else:
            print(f"  {result.outcome.value}: {result.target} <- {result.sample}")

    if args.skip_check:
        return 0

    try:
        counts = check_inventory(script_dir)
    except InventoryError as e:
        print(f"Inventory does not load: {e}")
        return 1
    if not counts:
        print("No inventory records configured.")
    for kind, count in counts.items():
        print(f"  {kind.value}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
