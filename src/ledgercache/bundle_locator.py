from typing import List, Tuple

from .errors import ConsistencyViolation
from .hash_state import HashStateStore
from .storage_api import TransactionAPI
from .transaction import TrackedHash, TransactionRecord
from .tx_store import TransactionStore


def find_transactions_by_bundle(
    tx: TransactionAPI, bundle_id: str
) -> Tuple[List[TransactionRecord], List[TrackedHash]]:
    """
    Collect every stored transaction of a bundle together with its
    hash-state entry.

    This is a full scan of the body store, so results come back in
    ascending hash order rather than bundle index order. A matching
    transaction with no hash-state entry raises ConsistencyViolation.
    """
    records = [
        record
        for _, record in TransactionStore(tx).scan_all()
        if record.bundle_id == bundle_id
    ]

    by_hash = {}
    for state in HashStateStore(tx).get():
        by_hash.setdefault(state.hash, state)

    states: List[TrackedHash] = []
    for record in records:
        state = by_hash.get(record.hash)
        if state is None:
            raise ConsistencyViolation(record.hash)
        states.append(state)
    return records, states
