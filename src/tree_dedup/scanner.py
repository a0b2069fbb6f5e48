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
# tree-dedup/src/tree_dedup/scanner.py

"""Concurrent content-hashing tree scanner."""

import logging
import os
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Iterator

from .config import BACKLOG_PER_WORKER, clamp_workers, default_parallelism
from .errors import ScanError
from .hasher import hash_file
from .snapshot import load_snapshot
from .types import FileRecord, TreeSnapshot

logger = logging.getLogger(__name__)


class TreeScanner:
    """Hash every regular file under a root with a pool of worker threads.

    The calling thread walks the tree and submits one hashing job per file;
    it is also the only thread that appends to the result list, so records
    need no lock. Symbolic links are neither recorded nor followed.
    """

    def __init__(self, root: Path | str, workers: int | None = None,
                 on_record: Callable[[FileRecord], None] | None = None):
        self.root = os.path.abspath(root)
        if not os.path.isdir(self.root):
            raise ScanError(self.root, "open directory", "not a directory")

        if workers is None:
            workers = default_parallelism()
        elif workers < 1:
            logger.warning(f"worker count {workers} is not positive, using 1")
        self.workers = clamp_workers(workers)
        self.on_record = on_record

    def _walk(self, directory: str) -> Iterator[str]:
        """Yield regular files depth-first, in name order within a directory."""
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise ScanError(directory, "list directory",
                            e.strerror or str(e)) from e

        for entry in entries:
            try:
                if entry.is_symlink():
                    continue
                if entry.is_dir(follow_symlinks=False):
                    yield from self._walk(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    yield entry.path
            except OSError as e:
                raise ScanError(entry.path, "stat", e.strerror or str(e)) from e

    @staticmethod
    def _hash_one(path: str) -> FileRecord:
        try:
            return FileRecord(path=path, digest=hash_file(path))
        except OSError as e:
            raise ScanError(path, "hash file", e.strerror or str(e)) from e

    def _collect(self, done: set[Future], records: list[FileRecord],
                 first_error: BaseException | None) -> BaseException | None:
        """Move finished jobs into ``records``; return the first error seen."""
        for future in done:
            if future.cancelled():
                continue
            error = future.exception()
            if error is None:
                if first_error is None:
                    record = future.result()
                    records.append(record)
                    if self.on_record is not None:
                        self.on_record(record)
            elif first_error is None:
                first_error = error
            else:
                logger.debug(f"dropping additional scan error: {error}")
        return first_error

    def scan(self) -> TreeSnapshot:
        """Walk and hash the whole tree.

        Raises ScanError on the first failure anywhere. Once an error is
        seen no further files are submitted, queued jobs are cancelled and
        running ones are drained before the error is raised.
        """
        logger.info(f"scanning {self.root} with {self.workers} workers")
        records: list[FileRecord] = []
        first_error: BaseException | None = None
        backlog = self.workers * BACKLOG_PER_WORKER

        with ThreadPoolExecutor(max_workers=self.workers,
                                thread_name_prefix="tree-dedup-hash") as executor:
            pending: set[Future] = set()
            try:
                for path in self._walk(self.root):
                    pending.add(executor.submit(self._hash_one, path))
                    if len(pending) >= backlog:
                        done, pending = wait(pending, return_when=FIRST_COMPLETED)
                        first_error = self._collect(done, records, first_error)
                        if first_error is not None:
                            break
            except ScanError as e:
                first_error = e

            if first_error is not None:
                for future in pending:
                    future.cancel()
            done, _ = wait(pending)
            first_error = self._collect(done, records, first_error)

        if first_error is not None:
            logger.error(f"scan of {self.root} aborted: {first_error}")
            raise first_error

        logger.info(f"hashed {len(records)} files under {self.root}")
        return TreeSnapshot(base_dir=self.root, files=tuple(records))


def scan_tree(root: Path | str, workers: int | None = None,
              on_record: Callable[[FileRecord], None] | None = None) -> TreeSnapshot:
    """Scan ``root`` and return its snapshot."""
    return TreeScanner(root, workers, on_record).scan()


def load_or_scan(directory: Path | str | None = None,
                 snapshot_file: Path | str | None = None,
                 workers: int | None = None) -> TreeSnapshot:
    """Build a snapshot from exactly one of a directory or a saved snapshot."""
    if (directory is None) == (snapshot_file is None):
        raise ValueError("give exactly one of a directory or a snapshot file")
    if snapshot_file is not None:
        return load_snapshot(snapshot_file)
    return scan_tree(directory, workers)
