#!/usr/bin/env python
"""Start the Fleet Inventory Service."""

import os
import sys
from pathlib import Path

# Change to script directory so relative paths in config.yaml resolve
script_dir = Path(__file__).parent.resolve()
os.chdir(script_dir)

src_path = script_dir / "src"
sys.path.insert(0, str(src_path))

if __name__ == "__main__":
    if (script_dir / "config.yaml").exists():
        os.environ.setdefault("FLEET_INVENTORY_CONFIG", str(script_dir / "config.yaml"))

    from fleet_inventory.main import run
    run()
