"""
ledgercache: local persistent cache of ledger transactions

This package keeps, in front of a remote ledger node:
- the list of tracked transaction hashes and their confirmation flags
- a deflate-compressed store of transaction bodies
- reconciliation that fetches missing bodies in one batch
- bundle lookup that cross-checks stored bodies against the hash state
"""

__version__ = "0.1.0"

from .cache import LedgerCache, create_cache
from .config import LedgerCacheConfig, load_config
from .errors import (
    LedgerCacheError,
    NotFoundError,
    CorruptDataError,
    ConsistencyViolation,
    RemoteAPIError,
)
from .transaction import TrackedHash, TransactionRecord

__all__ = [
    'LedgerCache', 'create_cache', 'LedgerCacheConfig', 'load_config',
    'LedgerCacheError', 'NotFoundError', 'CorruptDataError',
    'ConsistencyViolation', 'RemoteAPIError',
    'TrackedHash', 'TransactionRecord',
]
