"""
Exception types raised by the ledger cache.

Store I/O failures are not wrapped; they surface as sqlite3.Error.
"""


class LedgerCacheError(Exception):
    """Base class for every error raised by ledgercache."""


class NotFoundError(LedgerCacheError, KeyError):
    """A hash is absent from a store."""

    def __init__(self, hash_: str):
        super().__init__(hash_)
        self.hash = hash_

    def __str__(self) -> str:
        return f"transaction {self.hash} is not found"


class CorruptDataError(LedgerCacheError):
    """A stored value (or a fetched payload) could not be decoded."""


class ConsistencyViolation(LedgerCacheError):
    """A transaction body is stored with no matching hash-state entry."""

    def __init__(self, hash_: str):
        super().__init__(f"hash not found for {hash_}")
        self.hash = hash_


class RemoteAPIError(LedgerCacheError):
    """The remote ledger node failed to answer a request."""
