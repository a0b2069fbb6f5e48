# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tree-dedup/src/tree_dedup/hasher.py

"""SHA-256 content digests for single files."""

import hashlib
from pathlib import Path
from typing import BinaryIO, Final

from .config import CHUNK_SIZE


# sha256(b"")
EMPTY_DIGEST: Final = (
    "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
)


def hash_stream(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> str:
    """Digest everything left in ``stream`` without holding it in memory."""
    hasher = hashlib.sha256()
    while chunk := stream.read(chunk_size):
        hasher.update(chunk)
    return hasher.hexdigest()


def hash_file(path: Path | str, chunk_size: int = CHUNK_SIZE) -> str:
    """Return the lowercase hex SHA-256 of the file at ``path``.

    Any failure to open or read the file propagates as ``OSError``; a
    digest is only returned once the whole file has been read.
    """
    with open(path, "rb") as stream:
        return hash_stream(stream, chunk_size)
