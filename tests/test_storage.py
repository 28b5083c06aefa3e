import os
import sqlite3

import pytest

from ledgercache.storage import SQLiteStorage


def test_put_get_and_ordered_cursor(tmp_path):
    db_path = tmp_path / "kv.db"
    storage = SQLiteStorage(str(db_path))

    with storage.update() as tx:
        tx.put(b"b", b"\x02", b"two")
        tx.put(b"b", b"\x01", b"one")
        tx.put(b"b", b"\x01\x00", b"one-zero")
        tx.put(b"other", b"\x00", b"x")

    with storage.view() as tx:
        assert tx.get(b"b", b"\x01") == b"one"
        assert tx.get(b"b", b"missing") is None
        assert tx.get(b"nobucket", b"\x01") is None
        assert list(tx.cursor(b"b")) == [
            (b"\x01", b"one"),
            (b"\x01\x00", b"one-zero"),
            (b"\x02", b"two"),
        ]
        assert list(tx.keys(b"other")) == [b"\x00"]
        assert list(tx.cursor(b"nobucket")) == []

    storage.close()
    assert os.path.exists(db_path)


def test_update_rolls_back_on_error(tmp_path):
    storage = SQLiteStorage(str(tmp_path / "kv.db"))

    with pytest.raises(RuntimeError):
        with storage.update() as tx:
            tx.put(b"b", b"k", b"v")
            raise RuntimeError("boom")

    with storage.view() as tx:
        assert tx.get(b"b", b"k") is None
    storage.close()


def test_view_is_read_only(tmp_path):
    storage = SQLiteStorage(str(tmp_path / "kv.db"))
    with pytest.raises(sqlite3.OperationalError):
        with storage.view() as tx:
            tx.put(b"b", b"k", b"v")
    storage.close()


def test_data_survives_reopen(tmp_path):
    db_path = str(tmp_path / "kv.db")
    storage = SQLiteStorage(db_path)
    with storage.update() as tx:
        tx.put(b"b", b"k", b"v")
    storage.close()

    storage = SQLiteStorage(db_path)
    with storage.view() as tx:
        assert tx.get(b"b", b"k") == b"v"
    storage.close()


class FailingCommitConn:
    """Wraps a connection and fails the first COMMIT, like a full disk would."""

    def __init__(self, conn):
        self.conn = conn
        self.fail_next_commit = True

    def execute(self, sql, *args):
        if sql == "COMMIT" and self.fail_next_commit:
            self.fail_next_commit = False
            raise sqlite3.OperationalError("disk I/O error")
        return self.conn.execute(sql, *args)

    @property
    def in_transaction(self):
        return self.conn.in_transaction

    def close(self):
        self.conn.close()


def test_failed_commit_rolls_back_and_storage_stays_usable(tmp_path):
    storage = SQLiteStorage(str(tmp_path / "kv.db"))
    storage.conn = FailingCommitConn(storage.conn)

    with pytest.raises(sqlite3.OperationalError):
        with storage.update() as tx:
            tx.put(b"b", b"lost", b"v")

    assert not storage.conn.in_transaction
    with storage.update() as tx:
        tx.put(b"b", b"kept", b"v")
    with storage.view() as tx:
        assert tx.get(b"b", b"lost") is None
        assert tx.get(b"b", b"kept") == b"v"
    storage.close()
