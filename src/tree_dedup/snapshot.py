# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tree-dedup/src/tree_dedup/snapshot.py

"""YAML form of a tree snapshot.

The document layout is::

    baseDir: /srv/photos
    files:
    - path: /srv/photos/2019/a.jpg
      hash: 9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08

Entries may be written one at a time after the header, so a scan can
stream its snapshot while it is still hashing.
"""

import os
import re
from pathlib import Path
from typing import Any, TextIO

import yaml

from .errors import SnapshotLoadError
from .types import FileRecord, TreeSnapshot


DIGEST_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def _dump(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False,
                          allow_unicode=True, width=float("inf"))


def format_header(base_dir: str) -> str:
    return _dump({"baseDir": base_dir}) + "files:\n"


def format_entry(record: FileRecord) -> str:
    return _dump([{"path": record.path, "hash": record.digest}])


def dump_snapshot(snapshot: TreeSnapshot, stream: TextIO) -> None:
    """Write the whole snapshot document to ``stream``."""
    stream.write(format_header(snapshot.base_dir))
    for record in snapshot.files:
        stream.write(format_entry(record))


def _lies_under(path: str, base_dir: str) -> bool:
    base = os.path.normpath(base_dir)
    target = os.path.normpath(path)
    if base == os.curdir:
        # commonpath() of "." and a relative path is ""
        return not os.path.isabs(target) and target != os.pardir \
            and not target.startswith(os.pardir + os.sep)
    try:
        return os.path.commonpath([base, target]) == base
    except ValueError:
        return False


def _resolve_entry(path: str, base_dir: str) -> str:
    """Entry path as stored, or joined onto ``base_dir`` when it is root-relative."""
    if os.path.isabs(path):
        return path
    if not os.path.isabs(base_dir) and _lies_under(path, base_dir):
        return path
    return os.path.join(base_dir, path)


def snapshot_from_dict(document: Any, source: str = "<document>") -> TreeSnapshot:
    """Validate a parsed document and build the snapshot it describes.

    A relative entry path that already starts inside a relative ``baseDir``
    is kept as written; any other relative path is taken as relative to
    ``baseDir``. Every entry must end up inside ``baseDir``.
    """
    if not isinstance(document, dict):
        raise SnapshotLoadError(source, "top level is not a mapping")

    base_dir = document.get("baseDir")
    if not isinstance(base_dir, str) or not base_dir:
        raise SnapshotLoadError(source, "missing or invalid 'baseDir'")

    entries = document.get("files")
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise SnapshotLoadError(source, "'files' is not a list")

    records = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise SnapshotLoadError(source, f"file entry {position} is not a mapping")
        path = entry.get("path")
        digest = entry.get("hash")
        if not isinstance(path, str) or not path:
            raise SnapshotLoadError(source, f"file entry {position} has no 'path'")
        if not isinstance(digest, str) or not DIGEST_PATTERN.match(digest):
            raise SnapshotLoadError(
                source, f"file entry {position} ({path}) has an invalid 'hash'")
        path = _resolve_entry(path, base_dir)
        if not _lies_under(path, base_dir):
            raise SnapshotLoadError(source, f"{path} is outside baseDir {base_dir}")
        records.append(FileRecord(path=path, digest=digest))

    return TreeSnapshot(base_dir=base_dir, files=tuple(records))


def load_snapshot(source: Path | str) -> TreeSnapshot:
    """Read a snapshot file; any problem raises SnapshotLoadError."""
    try:
        with open(source, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise SnapshotLoadError(str(source), e.strerror or str(e)) from e
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise SnapshotLoadError(str(source), f"invalid YAML: {e}") from e
    return snapshot_from_dict(document, source=str(source))


def save_snapshot(snapshot: TreeSnapshot, destination: Path | str) -> None:
    with open(destination, "w", encoding="utf-8") as f:
        dump_snapshot(snapshot, f)
