# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tree-dedup/src/tree_dedup/planner.py

"""Deletion plans for verified duplicates, and the gated deletion itself."""

import logging
import os
from typing import Iterable, Sequence

from .errors import DeletionError
from .hasher import hash_file
from .types import DeletionPlanEntry, DeletionResult, FileRecord, TreeSnapshot

logger = logging.getLogger(__name__)


def reference_paths_by_digest(reference: TreeSnapshot) -> dict[str, str]:
    """First reference path seen for each digest."""
    paths: dict[str, str] = {}
    for record in reference.files:
        paths.setdefault(record.digest, record.path)
    return paths


def plan_deletions(duplicates: Iterable[FileRecord],
                   reference: TreeSnapshot) -> list[DeletionPlanEntry]:
    """Pair each duplicate with a reference file of the same content.

    The reference path is looked up by digest only and is there for the
    reader; it does not re-verify the match.
    """
    by_digest = reference_paths_by_digest(reference)
    return [
        DeletionPlanEntry(target_path=record.path,
                          reference_path=by_digest.get(record.digest))
        for record in duplicates
    ]


def render_plan(plan: Iterable[DeletionPlanEntry]) -> list[str]:
    return [entry.render() for entry in plan]


def _remove(record: FileRecord, reverify: bool) -> str | None:
    """Delete one file; return why it failed, or None."""
    try:
        if reverify and hash_file(record.path) != record.digest:
            return "content changed since it was scanned"
        os.remove(record.path)
    except OSError as e:
        return e.strerror or str(e)
    return None


def delete_files(duplicates: Sequence[FileRecord], best_effort: bool = False,
                 reverify: bool = False) -> tuple[str, ...]:
    """Remove every file in ``duplicates``, one after another.

    By default the first failure stops the pass and nothing after it is
    attempted. With ``best_effort`` every file is attempted and all
    failures are raised together. Either way the DeletionError records
    which paths were deleted and which were never tried.
    """
    deleted: list[str] = []
    failures: dict[str, str] = {}

    for position, record in enumerate(duplicates):
        reason = _remove(record, reverify)
        if reason is None:
            deleted.append(record.path)
            logger.info(f"deleted {record.path}")
            continue

        logger.error(f"cannot delete {record.path}: {reason}")
        failures[record.path] = reason
        if not best_effort:
            remaining = tuple(r.path for r in duplicates[position + 1:])
            raise DeletionError(failures, tuple(deleted), remaining)

    if failures:
        raise DeletionError(failures, tuple(deleted))
    return tuple(deleted)


def execute_plan(duplicates: Sequence[FileRecord], reference: TreeSnapshot,
                 confirmed: bool, best_effort: bool = False,
                 reverify: bool = False) -> DeletionResult:
    """Return the plan, and delete the duplicates only if ``confirmed``."""
    plan = tuple(plan_deletions(duplicates, reference))
    if not confirmed:
        logger.info(f"deletion not confirmed, {len(plan)} files left in place")
        return DeletionResult(confirmed=False, plan=plan)

    deleted = delete_files(duplicates, best_effort=best_effort, reverify=reverify)
    return DeletionResult(confirmed=True, plan=plan, deleted=deleted)
