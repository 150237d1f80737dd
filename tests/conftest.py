import pytest

import db


@pytest.fixture
def tmp_db(tmp_path, monkeypatch):
    """SQLite vacía por test (no toca la DB real)."""
    monkeypatch.setattr(db, "DB_PATH", str(tmp_path / "pick5_test.db"))
    db.init_db()
    return db
