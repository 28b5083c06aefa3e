"""
The hash-state record: every tracked transaction hash and whether it is
confirmed, stored as a single value under one fixed key.

put() always replaces the whole record. Callers that want to keep the
existing entries must read, modify and write inside the same update()
transaction, or use compare_and_swap().
"""

import logging
from typing import Iterable, List

from .codec import decode_hash_state, encode_hash_state
from .storage_api import TransactionAPI
from .transaction import TrackedHash

logger = logging.getLogger(__name__)

HASH_BUCKET = b"hashes"
HASH_KEY = b"hashes"


class HashStateStore:
    def __init__(self, tx: TransactionAPI):
        self.tx = tx

    def get(self) -> List[TrackedHash]:
        """Return the tracked hashes in insertion order; empty if never written."""
        return decode_hash_state(self.tx.get(HASH_BUCKET, HASH_KEY))

    def put(self, states: Iterable[TrackedHash]) -> None:
        """Overwrite the whole record. Duplicate entries are stored as given."""
        self.tx.put(HASH_BUCKET, HASH_KEY, encode_hash_state(states))

    def compare_and_swap(
        self, expected: List[TrackedHash], new: Iterable[TrackedHash]
    ) -> bool:
        """Write `new` only if the stored record still equals `expected`."""
        if self.get() != list(expected):
            return False
        self.put(new)
        return True

    # ------------------------------------------------------------------
    # Read-modify-write helpers
    # ------------------------------------------------------------------

    def track(self, hashes: Iterable[str], confirmed: bool = False) -> List[str]:
        """
        Append hashes that are not tracked yet. Returns the hashes actually
        added, in the order given.
        """
        states = self.get()
        known = {s.hash for s in states}
        added: List[str] = []
        for h in hashes:
            if h in known:
                continue
            known.add(h)
            states.append(TrackedHash(h, confirmed))
            added.append(h)
        if added:
            self.put(states)
            logger.debug("Tracking %d new hash(es)", len(added))
        return added

    def set_confirmed(self, hashes: Iterable[str], confirmed: bool = True) -> int:
        """Set the confirmation flag of every entry matching one of hashes."""
        wanted = set(hashes)
        states = self.get()
        changed = 0
        for s in states:
            if s.hash in wanted and s.confirmed != confirmed:
                s.confirmed = confirmed
                changed += 1
        if changed:
            self.put(states)
        return changed
