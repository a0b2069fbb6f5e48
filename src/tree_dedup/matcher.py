# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tree-dedup/src/tree_dedup/matcher.py

"""Match target files against a reference tree by digest and location.

A target file is a verified duplicate only when some reference file has
the same digest *and* the same locator: the path relative to its tree's
base directory in exact-path mode, or just the file name otherwise.
Equal content alone is never enough.
"""

import logging
from collections import defaultdict

from .types import FileRecord, TreeSnapshot

logger = logging.getLogger(__name__)

ReferenceIndex = dict[str, frozenset[str]]


def locator_for(record: FileRecord, base_dir: str, exact_path: bool) -> str:
    if exact_path:
        return record.relative_to(base_dir)
    return record.name


def build_reference_index(reference: TreeSnapshot, exact_path: bool) -> ReferenceIndex:
    """Map each reference digest to the set of locators carrying it."""
    index: dict[str, set[str]] = defaultdict(set)
    for record in reference.files:
        index[record.digest].add(locator_for(record, reference.base_dir, exact_path))
    return {digest: frozenset(locators) for digest, locators in index.items()}


def is_duplicate(record: FileRecord, base_dir: str, index: ReferenceIndex,
                 exact_path: bool) -> bool:
    locators = index.get(record.digest)
    if locators is None:
        return False
    return locator_for(record, base_dir, exact_path) in locators


def find_duplicates(reference: TreeSnapshot, target: TreeSnapshot,
                    exact_path: bool = True) -> list[FileRecord]:
    """Return target records verified as duplicates, in target order."""
    index = build_reference_index(reference, exact_path)
    duplicates = [
        record for record in target.files
        if is_duplicate(record, target.base_dir, index, exact_path)
    ]
    mode = "exact-path" if exact_path else "name-only"
    logger.info(f"{len(duplicates)} of {len(target)} target files duplicate "
                f"the reference ({mode} match)")
    return duplicates
