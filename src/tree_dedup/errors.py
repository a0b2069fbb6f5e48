# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tree-dedup/src/tree_dedup/errors.py

"""Exceptions raised by scanning, snapshot loading and deletion."""


class TreeDedupError(Exception):
    """Base class for every fatal tree-dedup failure."""


class ScanError(TreeDedupError):
    """A directory listing or a file hash failed; the scan produced nothing."""

    def __init__(self, path: str, operation: str, reason: str):
        self.path = path
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed for {path}: {reason}")


class SnapshotLoadError(TreeDedupError):
    """A serialized snapshot could not be read or is malformed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"cannot load snapshot {source}: {reason}")


class DeletionError(TreeDedupError):
    """One or more confirmed files could not be removed.

    ``failures`` maps each failing path to its reason. ``deleted`` holds
    what was already removed and ``remaining`` what was never attempted,
    so the caller can finish by hand from a re-rendered plan.
    """

    def __init__(self, failures: dict[str, str],
                 deleted: tuple[str, ...] = (),
                 remaining: tuple[str, ...] = ()):
        self.failures = dict(failures)
        self.deleted = deleted
        self.remaining = remaining
        first_path, first_reason = next(iter(self.failures.items()))
        message = f"cannot delete {first_path}: {first_reason}"
        if len(self.failures) > 1:
            message += f" (and {len(self.failures) - 1} more failures)"
        super().__init__(message)

    @property
    def path(self) -> str:
        return next(iter(self.failures))
