import os
import sqlite3

import pytest

from dirscan.config import SAFE_PROFILE
from dirscan.core import DirScanApp, scan_directory
from dirscan.database.ops import count_records
from dirscan.exceptions import PathAccessError
from dirscan.scanning.filesystem import ErrorPolicy
from dirscan.scanning.timestamps import ModifiedTimeOnlyProvider

needs_symlinks = pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks required")

def _count(db_path) -> int:
    c = sqlite3.connect(db_path)
    try:
        return count_records(c)
    finally:
        c.close()

@pytest.fixture
def app(db_path):
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return DirScanApp(db_path)

@pytest.fixture
def broken_tree(src):
    """Two readable files at the top, a dangling symlink one level down."""
    (src / "a.txt").write_text("a")
    (src / "b.txt").write_text("bb")
    sub = src / "sub"
    sub.mkdir()
    os.symlink(sub / "nowhere", sub / "broken")
    return src

def test_empty_directory(app, src, db_path):
    result = app.scan(src)
    assert result.records == 0
    assert result.commits == 1
    assert _count(db_path) == 0

def test_three_files_with_sizes(app, src, db_path):
    (src / "ten").write_bytes(b"1" * 10)
    (src / "zero").write_bytes(b"")
    (src / "kilo").write_bytes(b"2" * 1024)

    result = app.scan(src)

    assert result.records == 3
    c = sqlite3.connect(db_path)
    sizes = sorted(r[0] for r in c.execute("SELECT size FROM files"))
    c.close()
    assert sizes == [0, 10, 1024]

def test_nested_tree_relative_paths(app, nested_tree, db_path, monkeypatch):
    monkeypatch.chdir(nested_tree.parent)

    result = app.scan("src")

    assert result.records == 5
    c = sqlite3.connect(db_path)
    paths = {r[0] for r in c.execute("SELECT filepath FROM files")}
    c.close()
    assert os.path.join("src", "a", "b", "deep.txt") in paths
    assert os.path.join("src", "a", "mid.bin") in paths
    assert os.path.join("src", "top1.txt") in paths

def test_rescan_duplicates_records(app, nested_tree, db_path):
    app.scan(nested_tree)
    app.scan(nested_tree)
    assert _count(db_path) == 10

def test_unreadable_file_rolls_back_everything(app, locked_tree, db_path):
    with pytest.raises(PathAccessError):
        app.scan(locked_tree)
    assert _count(db_path) == 0

def test_unreadable_file_collected(app, locked_tree, db_path):
    result = app.scan(locked_tree, error_policy=ErrorPolicy.COLLECT)
    assert result.records == 2
    assert [e.path.name for e in result.errors] == ["locked.txt"]
    assert _count(db_path) == 2

@needs_symlinks
def test_failure_rolls_back_everything(app, broken_tree, db_path):
    with pytest.raises(PathAccessError):
        app.scan(broken_tree)
    assert _count(db_path) == 0

@needs_symlinks
def test_batch_size_keeps_committed_batches(app, broken_tree, db_path):
    with pytest.raises(PathAccessError):
        app.scan(broken_tree, batch_size=1)
    # Files listed ahead of sub/ were committed one by one before it failed
    names = [e.name for e in os.scandir(broken_tree)]
    expected = sum(1 for n in names[:names.index("sub")] if n.endswith(".txt"))
    assert _count(db_path) == expected

@needs_symlinks
def test_collect_policy_commits_readable_files(app, broken_tree, db_path):
    result = app.scan(broken_tree, error_policy=ErrorPolicy.COLLECT)
    assert result.records == 2
    assert len(result.errors) == 1
    assert _count(db_path) == 2

def test_fallback_timestamps_equal(app, src, db_path):
    (src / "f.txt").write_text("f")
    app.scan(src, time_provider=ModifiedTimeOnlyProvider())
    c = sqlite3.connect(db_path)
    modified, created = c.execute("SELECT modified_time, created_time FROM files").fetchone()
    c.close()
    assert created == modified

def test_store_closed_after_success_and_failure(app, src, tmp_path):
    app.scan(src)
    assert app.db_manager._conn is None
    with pytest.raises(PathAccessError):
        app.scan(tmp_path / "missing")
    assert app.db_manager._conn is None

def test_scan_directory_on_open_connection(conn, nested_tree):
    result = scan_directory(conn, nested_tree, batch_size=2)
    assert result.records == 5
    # 2 + 2 mid-scan commits, then the final one
    assert result.commits == 3
    assert count_records(conn) == 5
    assert not conn.in_transaction

def test_safe_profile_scan(src, db_path):
    db_path.parent.mkdir(parents=True)
    (src / "f.txt").write_text("f")
    result = DirScanApp(db_path, SAFE_PROFILE).scan(src)
    assert result.records == 1
    assert _count(db_path) == 1

def test_exact_multiple_of_batch_size(conn, nested_tree):
    (nested_tree / "a" / "b" / "extra.txt").write_text("extra")
    result = scan_directory(conn, nested_tree, batch_size=3)
    assert result.records == 6
    # Two full batches and no empty trailing commit
    assert result.commits == 2
    assert count_records(conn) == 6
    assert not conn.in_transaction
