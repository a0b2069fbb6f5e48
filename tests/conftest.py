# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/conftest.py
"""Pytest configuration for tree-dedup tests."""

import pytest

from tests.fixtures.tree_fixture import create_tree


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-large-tree-tests",
        action="store_true",
        default=False,
        help="Run tests that scan trees with thousands of files",
    )


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "large_tree: mark test as scanning a large generated tree (slow)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip large tree tests unless --run-large-tree-tests is passed."""
    if config.getoption("--run-large-tree-tests"):
        return
    skip_large = pytest.mark.skip(
        reason="need --run-large-tree-tests option to run"
    )
    for item in items:
        if "large_tree" in item.keywords:
            item.add_marker(skip_large)


@pytest.fixture
def exact_trees(tmp_path):
    """Reference and target trees where only exact relative paths should match."""
    ref = create_tree(tmp_path / "ref", {
        "file1.txt": "This is file 1",
        "file2.txt": "This is file 2",
        "subdir/file3.txt": "This is file 3",
        "subdir/empty.txt": "",
    })
    target = create_tree(tmp_path / "target", {
        "file1.txt": "This is file 1",
        "file2.txt": "This is file 2",
        "subdir/file3.txt": "This is file 3",
        # same content and name as the reference, different directory
        "projects/foo/bar/empty.txt": "",
    })
    return ref, target


@pytest.fixture
def name_trees(tmp_path):
    """Reference and target trees for name-only matching."""
    ref = create_tree(tmp_path / "ref", {
        "file1.txt": "This is file 1",
        "file2.txt": "This is file 2",
        "subdir/file3.txt": "This is file 3",
        "empty.txt": "",
        "foobar.txt": "baz",
    })
    target = create_tree(tmp_path / "target", {
        "file1.txt": "This is file 1",
        "blah/file2.txt": "This is file 2",
        "subdir/file3.txt": "This is file 3",
        "empty1.txt": "",
        "subdir/empty.txt": "",
        "hoge.txt": "fuga",
    })
    return ref, target
