# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_snapshot.py

"""Unit tests for the YAML snapshot format."""

import io

import pytest
import yaml

from tree_dedup.errors import SnapshotLoadError
from tree_dedup.hasher import EMPTY_DIGEST
from tree_dedup.matcher import find_duplicates
from tree_dedup.scanner import scan_tree
from tree_dedup.snapshot import (
    dump_snapshot,
    format_entry,
    format_header,
    load_snapshot,
    save_snapshot,
    snapshot_from_dict,
)
from tree_dedup.types import FileRecord, TreeSnapshot
from tests.fixtures.tree_fixture import create_tree, sha256_hex


DIGEST_A = "eedf707e950e8315f7287656d49190d08dcafc0ebd0fd68ee653cd2ce6801b01"


def test_save_and_load(tmp_path):
    base = tmp_path / "root"
    snapshot = TreeSnapshot(base_dir=str(base), files=(
        FileRecord(path=str(base / "file1.txt"), digest=DIGEST_A),
        FileRecord(path=str(base / "dir with space" / "ünïcode: name.txt"), digest=EMPTY_DIGEST),
    ))
    saved = tmp_path / "snap.yaml"
    save_snapshot(snapshot, saved)
    assert load_snapshot(saved) == snapshot


def test_document_uses_original_key_names():
    snapshot = TreeSnapshot(base_dir="/data", files=(
        FileRecord(path="/data/a.txt", digest=DIGEST_A),
    ))
    stream = io.StringIO()
    dump_snapshot(snapshot, stream)
    assert yaml.safe_load(stream.getvalue()) == {
        "baseDir": "/data",
        "files": [{"path": "/data/a.txt", "hash": DIGEST_A}],
    }


def test_streamed_pieces_form_one_document():
    text = format_header("/data")
    text += format_entry(FileRecord(path="/data/a.txt", digest=DIGEST_A))
    text += format_entry(FileRecord(path="/data/b/c.txt", digest=EMPTY_DIGEST))
    document = yaml.safe_load(text)
    assert [f["path"] for f in document["files"]] == ["/data/a.txt", "/data/b/c.txt"]


def test_header_only_is_an_empty_snapshot():
    snapshot = snapshot_from_dict(yaml.safe_load(format_header("/data")))
    assert snapshot == TreeSnapshot(base_dir="/data")


def test_relative_paths_join_absolute_base():
    snapshot = snapshot_from_dict({
        "baseDir": "/data",
        "files": [{"path": "sub/a.txt", "hash": DIGEST_A}],
    })
    assert snapshot.files[0].path == "/data/sub/a.txt"


def test_original_relative_layout_loads():
    snapshot = snapshot_from_dict({
        "baseDir": "testdir",
        "files": [{"path": "testdir/sub/a.txt", "hash": DIGEST_A}],
    })
    assert snapshot.files[0].relative_to(snapshot.base_dir) == "sub/a.txt"


def test_current_directory_base():
    snapshot = snapshot_from_dict({
        "baseDir": ".",
        "files": [
            {"path": "sub/a.txt", "hash": DIGEST_A},
            {"path": "./empty.txt", "hash": EMPTY_DIGEST},
        ],
    })
    assert [f.path for f in snapshot.files] == ["sub/a.txt", "./empty.txt"]
    assert snapshot.files[0].relative_to(".") == "sub/a.txt"
    assert snapshot.files[1].relative_to(".") == "empty.txt"


def test_root_relative_entry_under_relative_base():
    snapshot = snapshot_from_dict({
        "baseDir": "photos",
        "files": [{"path": "2019/a.jpg", "hash": DIGEST_A}],
    })
    assert snapshot.files[0].path == "photos/2019/a.jpg"
    assert snapshot.files[0].relative_to("photos") == "2019/a.jpg"


def test_current_directory_snapshot_matches_scan(tmp_path, monkeypatch):
    ref = create_tree(tmp_path / "ref", {"sub/a.txt": "A", "b.txt": "B"})
    target = create_tree(tmp_path / "target", {"sub/a.txt": "A", "b.txt": "changed"})
    monkeypatch.chdir(ref)
    reference = snapshot_from_dict({
        "baseDir": ".",
        "files": [
            {"path": "sub/a.txt", "hash": sha256_hex("A")},
            {"path": "b.txt", "hash": sha256_hex("B")},
        ],
    })
    duplicates = find_duplicates(reference, scan_tree(target, 2))
    assert [d.path for d in duplicates] == [str(target / "sub" / "a.txt")]


class TestLoadErrors:
    """Malformed or unreadable snapshots."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotLoadError) as excinfo:
            load_snapshot(tmp_path / "nope.yaml")
        assert "nope.yaml" in str(excinfo.value)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("baseDir: [unclosed\n")
        with pytest.raises(SnapshotLoadError, match="invalid YAML"):
            load_snapshot(path)

    @pytest.mark.parametrize("document", [
        "just a string",
        {"files": []},
        {"baseDir": 42, "files": []},
        {"baseDir": "/data", "files": {"path": "/data/a"}},
        {"baseDir": "/data", "files": ["/data/a"]},
        {"baseDir": "/data", "files": [{"hash": DIGEST_A}]},
        {"baseDir": "/data", "files": [{"path": "/data/a"}]},
        {"baseDir": "/data", "files": [{"path": "/data/a", "hash": "abc"}]},
        {"baseDir": "/data", "files": [{"path": "/data/a", "hash": DIGEST_A.upper()}]},
        {"baseDir": "/data", "files": [{"path": "/elsewhere/a", "hash": DIGEST_A}]},
        {"baseDir": "/data", "files": [{"path": "../a", "hash": DIGEST_A}]},
        {"baseDir": ".", "files": [{"path": "../a", "hash": DIGEST_A}]},
        {"baseDir": ".", "files": [{"path": "/abs/a", "hash": DIGEST_A}]},
        {"baseDir": "photos", "files": [{"path": "../elsewhere/a", "hash": DIGEST_A}]},
    ])
    def test_malformed_documents(self, tmp_path, document):
        path = tmp_path / "snap.yaml"
        path.write_text(yaml.safe_dump(document))
        with pytest.raises(SnapshotLoadError):
            load_snapshot(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "binary.yaml"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(SnapshotLoadError):
            load_snapshot(path)
