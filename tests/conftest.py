import pytest
from dirscan.database.db import DBManager

@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "store" / "dirscan.db3"

@pytest.fixture
def conn(db_path):
    """Returns an open connection to a fresh store with the default profile and schema."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    manager = DBManager(db_path)
    c = manager.connect()
    try:
        yield c
    finally:
        manager.close()

@pytest.fixture
def src(tmp_path):
    """Empty source directory, separate from the store's directory."""
    d = tmp_path / "src"
    d.mkdir()
    return d

@pytest.fixture
def nested_tree(src):
    """Three levels deep with files at each level: 2 + 2 + 1 regular files."""
    (src / "top1.txt").write_text("one")
    (src / "top2.txt").write_text("two")
    level1 = src / "a"
    level1.mkdir()
    (level1 / "mid.txt").write_text("mid")
    (level1 / "mid.bin").write_bytes(b"\x00" * 16)
    level2 = level1 / "b"
    level2.mkdir()
    (level2 / "deep.txt").write_text("deep")
    return src

@pytest.fixture
def locked_tree(src):
    """Two readable files next to one with every permission revoked."""
    (src / "a.txt").write_text("a")
    (src / "b.txt").write_text("bb")
    locked = src / "locked.txt"
    locked.write_text("secret")
    locked.chmod(0)
    try:
        open(locked, "rb").close()
    except PermissionError:
        pass
    else:
        locked.chmod(0o600)
        pytest.skip("process bypasses file permission checks")
    yield src
    locked.chmod(0o600)
