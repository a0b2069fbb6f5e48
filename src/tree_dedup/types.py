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
# tree-dedup/src/tree_dedup/types.py

"""Type definitions for reference/target tree comparison."""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class FileRecord:
    """A regular file and the content digest it had at scan time."""
    path: str
    digest: str

    def relative_to(self, base_dir: str) -> str:
        return os.path.relpath(self.path, base_dir)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


@dataclass(frozen=True)
class TreeSnapshot:
    """Root of a traversal plus one record per regular file under it.

    Record order is whatever order the scan collected them in; sort by
    path when a stable order is needed.
    """
    base_dir: str
    files: tuple[FileRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.files)

    def sorted(self) -> "TreeSnapshot":
        """Copy with records ordered by path."""
        return TreeSnapshot(
            base_dir=self.base_dir,
            files=tuple(sorted(self.files, key=lambda f: f.path)),
        )


@dataclass(frozen=True)
class DeletionPlanEntry:
    """A target file slated for removal and the reference file shown as evidence."""
    target_path: str
    reference_path: str | None

    def render(self) -> str:
        return f'rm "{self.target_path}"  # duplicated at: {self.reference_path or ""}'


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of a deletion pass."""
    confirmed: bool
    plan: tuple[DeletionPlanEntry, ...]
    deleted: tuple[str, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    """Result of re-scanning a tree against a recorded snapshot."""
    validated: int
    missing: tuple[FileRecord, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.missing
