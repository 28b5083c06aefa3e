"""
Reconciliation of the hash-state record against the body store.

Every tracked hash without a stored body is fetched from the remote node
in a single batch and persisted. The remote call happens outside the
write transaction; the writes then happen in one short update() that
re-checks each target is still missing, so either every fetched body is
committed or none is.
"""

import logging
from typing import List, Sequence

from .errors import RemoteAPIError
from .hash_state import HashStateStore
from .storage_api import StorageAPI
from .transaction import TransactionRecord
from .tx_store import TransactionStore

logger = logging.getLogger(__name__)


def find_missing(tx) -> List[str]:
    """
    Tracked hashes with no stored body, in hash-state order. Repeated
    entries are requested once. Corrupt bodies raise instead of being
    treated as missing.
    """
    bodies = TransactionStore(tx)
    missing: List[str] = []
    seen = set()
    for state in HashStateStore(tx).get():
        if state.hash in seen:
            continue
        seen.add(state.hash)
        if not bodies.contains(state.hash):
            missing.append(state.hash)
            continue
        # Decode to surface corruption; the record itself is not needed.
        bodies.get(state.hash)
    return missing


def _parse(missing: Sequence[str], payloads: Sequence[str]) -> List[TransactionRecord]:
    records = []
    for hash_, payload in zip(missing, payloads):
        if isinstance(payload, str) and payload.strip("9") == "":
            # Unknown to the node; left missing so a later run asks again.
            logger.warning("Node has no body for transaction %s", hash_)
            continue
        records.append(TransactionRecord.from_trytes(hash_, payload))
    return records


def update_transactions(storage: StorageAPI, api) -> List[str]:
    """
    Fetch and store the body of every tracked hash that lacks one.

    `api` is anything with a get_trytes(hashes) method, normally a NodeAPI.

    Returns the hashes whose bodies were written. Store and remote errors
    propagate unchanged and leave the store untouched; nothing is retried.
    """
    with storage.view() as tx:
        missing = find_missing(tx)

    if not missing:
        logger.debug("All tracked transactions are stored")
        return []

    logger.info("Fetching %d missing transaction(s)", len(missing))
    payloads = api.get_trytes(missing)
    if len(payloads) != len(missing):
        raise RemoteAPIError(
            f"requested {len(missing)} transactions, received {len(payloads)}"
        )
    records = _parse(missing, payloads)

    stored: List[str] = []
    with storage.update() as tx:
        bodies = TransactionStore(tx)
        for record in records:
            # Written concurrently since the read; stored bodies are never replaced.
            if bodies.contains(record.hash):
                continue
            bodies.put(record)
            stored.append(record.hash)
    return stored
