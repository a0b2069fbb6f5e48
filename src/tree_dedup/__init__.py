# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# Copyright (C) 2026 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# tree-dedup/src/tree_dedup/__init__.py

"""Verified duplicate removal between a reference and a target file tree."""

from .errors import DeletionError, ScanError, SnapshotLoadError, TreeDedupError
from .hasher import EMPTY_DIGEST, hash_file
from .matcher import build_reference_index, find_duplicates
from .planner import delete_files, execute_plan, plan_deletions, render_plan
from .scanner import TreeScanner, load_or_scan, scan_tree
from .snapshot import dump_snapshot, load_snapshot, save_snapshot
from .types import (
    DeletionPlanEntry,
    DeletionResult,
    FileRecord,
    TreeSnapshot,
    ValidationResult,
)
from .validator import validate_snapshot

__version__ = "0.1.0"

__all__ = [
    "TreeScanner",
    "scan_tree",
    "load_or_scan",
    "hash_file",
    "EMPTY_DIGEST",
    "find_duplicates",
    "build_reference_index",
    "plan_deletions",
    "render_plan",
    "delete_files",
    "execute_plan",
    "validate_snapshot",
    "load_snapshot",
    "dump_snapshot",
    "save_snapshot",
    "FileRecord",
    "TreeSnapshot",
    "DeletionPlanEntry",
    "DeletionResult",
    "ValidationResult",
    "TreeDedupError",
    "ScanError",
    "SnapshotLoadError",
    "DeletionError",
]
