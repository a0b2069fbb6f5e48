# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tree-dedup/src/tree_dedup/config.py

"""Defaults shared by the library and the command line."""

import os
from typing import Final


# Read size for streaming file content through the hasher
CHUNK_SIZE: Final = 1024 * 1024

# Completed-but-uncollected hashes allowed per worker before the walker waits
BACKLOG_PER_WORKER: Final = 4

DEFAULT_EXACT_PATH: Final = True

ENV_PREFIX: Final = "TREE_DEDUP_"
ENV_PARALLELISM: Final = ENV_PREFIX + "PARALLELISM"
ENV_EXACT_PATH: Final = ENV_PREFIX + "EXACT_PATH"

CONFIRMATION_WORD: Final = "yes"


def default_parallelism() -> int:
    """Half the available CPUs, never less than one worker."""
    return max(1, (os.cpu_count() or 1) // 2)


def clamp_workers(workers: int) -> int:
    return max(1, workers)
