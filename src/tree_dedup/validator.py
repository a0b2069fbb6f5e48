# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tree-dedup/src/tree_dedup/validator.py

"""Check a tree on disk against a snapshot recorded earlier."""

import logging

from .matcher import build_reference_index, is_duplicate
from .scanner import scan_tree
from .types import TreeSnapshot, ValidationResult

logger = logging.getLogger(__name__)


def validate_snapshot(snapshot: TreeSnapshot, workers: int | None = None,
                      exact_path: bool = True) -> ValidationResult:
    """Re-scan ``snapshot.base_dir`` and confirm every file is recorded.

    A current file is validated when the snapshot holds a file with the
    same digest and locator: the same relative path when ``exact_path`` is
    set, otherwise the same file name. A digest match alone does not count,
    so a renamed or moved file is reported as missing. Files recorded in the snapshot but gone from
    disk are not reported; the snapshot is only used as evidence.
    """
    current = scan_tree(snapshot.base_dir, workers)
    index = build_reference_index(snapshot, exact_path)

    validated = 0
    missing = []
    for record in sorted(current.files, key=lambda f: f.path):
        if is_duplicate(record, current.base_dir, index, exact_path):
            validated += 1
        else:
            logger.warning(f"{record.path} not found in snapshot")
            missing.append(record)

    return ValidationResult(validated=validated, missing=tuple(missing))
