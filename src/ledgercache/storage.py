import sqlite3
import threading
import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from .storage_api import StorageAPI, TransactionAPI

logger = logging.getLogger(__name__)


class SQLiteTransaction(TransactionAPI):
    """A bucket view bound to one open SQLite transaction."""

    def __init__(self, conn: sqlite3.Connection, writable: bool):
        self.conn = conn
        self.writable = writable

    def get(self, bucket: bytes, key: bytes) -> Optional[bytes]:
        row = self.conn.execute(
            "SELECT value FROM kv WHERE bucket = ? AND key = ?",
            (bytes(bucket), bytes(key)),
        ).fetchone()
        return bytes(row[0]) if row else None

    def put(self, bucket: bytes, key: bytes, value: bytes) -> None:
        if not self.writable:
            raise sqlite3.OperationalError("put in a read-only transaction")
        self.conn.execute(
            "INSERT OR REPLACE INTO kv (bucket, key, value) VALUES (?, ?, ?)",
            (bytes(bucket), bytes(key), bytes(value)),
        )

    def cursor(self, bucket: bytes) -> Iterator[Tuple[bytes, bytes]]:
        cur = self.conn.execute(
            "SELECT key, value FROM kv WHERE bucket = ? ORDER BY key",
            (bytes(bucket),),
        )
        for key, value in cur:
            yield bytes(key), bytes(value)

    def keys(self, bucket: bytes) -> Iterator[bytes]:
        cur = self.conn.execute(
            "SELECT key FROM kv WHERE bucket = ? ORDER BY key", (bytes(bucket),)
        )
        for (key,) in cur:
            yield bytes(key)


class SQLiteStorage(StorageAPI):
    """
    SQLite-backed bucketed key-value store.

    Keys and values are BLOBs, so ORDER BY key is byte order. update()
    holds a RESERVED lock (BEGIN IMMEDIATE) for its whole body, giving a
    single writer; view() reads a consistent snapshot. All access is
    guarded by an RLock so one storage object can be shared across threads.
    """

    def __init__(self, db_path: str = "ledgercache.db"):
        self.db_path = db_path
        self._lock = threading.RLock()
        # Transactions are managed explicitly below.
        self.conn = sqlite3.connect(db_path, check_same_thread=False, isolation_level=None)
        with self._lock:
            self.conn.execute("PRAGMA journal_mode=WAL;")
            self.conn.execute("PRAGMA synchronous=NORMAL;")

        self._init_tables()
        logger.debug("Opened SQLite database %s", db_path)

    def _init_tables(self) -> None:
        """Initialize database tables."""
        with self._lock:
            self.conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    bucket BLOB NOT NULL,
                    key BLOB NOT NULL,
                    value BLOB NOT NULL,
                    PRIMARY KEY (bucket, key)
                ) WITHOUT ROWID
                """
            )

    @contextmanager
    def _transaction(self, writable: bool) -> Iterator[SQLiteTransaction]:
        with self._lock:
            self.conn.execute("BEGIN IMMEDIATE" if writable else "BEGIN")
            try:
                yield SQLiteTransaction(self.conn, writable)
            except BaseException:
                self.conn.execute("ROLLBACK")
                raise
            if not writable:
                self.conn.execute("ROLLBACK")
                return
            try:
                self.conn.execute("COMMIT")
            except BaseException:
                if self.conn.in_transaction:
                    self.conn.execute("ROLLBACK")
                raise

    def view(self):
        """Read-only transaction; nothing is ever committed."""
        return self._transaction(writable=False)

    def update(self):
        """Read-write transaction, committed on normal exit and rolled back on any exception."""
        return self._transaction(writable=True)

    def close(self) -> None:
        """Close the DB connection."""
        with self._lock:
            self.conn.close()
