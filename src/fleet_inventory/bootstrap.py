"""
Workspace bootstrap.

Copies the sample service config and inventory into place, then loads the
inventory the config points at so a broken definition shows up before the
service is started on it.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import Config
from .hierarchy.types import ResourceKind
from .loader import load_inventory_from_yaml
from .store import HierarchyStore

logger = logging.getLogger(__name__)

# Sample -> working copy
SAMPLE_FILES = {
    "config.sample.yaml": "config.yaml",
    "sample_inventory.yaml": "inventory.yaml",
}

CONFIG_FILE = "config.yaml"


class CopyOutcome(str, Enum):
    CREATED = "create"
    OVERWRITTEN = "overwrite"
    KEPT = "keep"
    NO_SAMPLE = "no sample"


@dataclass(frozen=True, slots=True)
class CopyResult:
    sample: str
    target: str
    outcome: CopyOutcome


def copy_samples(directory: Path, force: bool = False) -> list[CopyResult]:
    """
    Copy each sample file in ``directory`` to its working name.

    Existing working copies are kept unless ``force`` is set.
    """
    results = []
    for sample, target in SAMPLE_FILES.items():
        sample_path = directory / sample
        target_path = directory / target

        if not sample_path.exists():
            outcome = CopyOutcome.NO_SAMPLE
        elif target_path.exists() and not force:
            outcome = CopyOutcome.KEPT
        else:
            outcome = CopyOutcome.OVERWRITTEN if target_path.exists() else CopyOutcome.CREATED
            shutil.copy(sample_path, target_path)
            logger.info(f"{outcome.value}: {target} <- {sample}")
        results.append(CopyResult(sample, target, outcome))
    return results


def check_inventory(directory: Path) -> dict[ResourceKind, int]:
    """
    Load the inventory named by the workspace config and count its records.

    Relative ``definition_file`` paths resolve against ``directory``. Without
    a config file the defaults apply, which name no inventory.

    Returns:
        Record counts per kind, omitting kinds with no records

    Raises:
        InventoryError: If the definition does not load cleanly
    """
    config_path = directory / CONFIG_FILE
    config = Config.from_yaml(str(config_path)) if config_path.exists() else Config()
    definition = config.hierarchy.definition_file
    if not definition:
        return {}

    path = Path(definition)
    if not path.is_absolute():
        path = directory / path
    store = load_inventory_from_yaml(path, HierarchyStore(max_nesting=config.hierarchy.max_nesting))
    return {kind: store.count(kind) for kind in ResourceKind if store.count(kind)}
