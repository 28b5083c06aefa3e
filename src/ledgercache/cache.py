import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .bundle_locator import find_transactions_by_bundle
from .config import LedgerCacheConfig, load_config
from .hash_state import HashStateStore
from .node_api import NodeAPI
from .reconciler import find_missing, update_transactions
from .storage import SQLiteStorage
from .transaction import TrackedHash, TransactionRecord
from .tx_store import TransactionStore

logger = logging.getLogger(__name__)


class LedgerCache:
    """
    Owns the SQLite storage and the remote node client and exposes the
    cache operations on top of them.
    """

    def __init__(self, config: LedgerCacheConfig, api=None):
        self.config = config

        logger.info("Using SQLite database %s", config.storage.db_path)
        self.storage = SQLiteStorage(config.storage.db_path)
        self.api = api if api is not None else NodeAPI(
            config.node.url, timeout_sec=config.node.timeout_sec
        )

    # ------------------------------------------------------------------
    # Hash state
    # ------------------------------------------------------------------

    def track(self, hashes: Iterable[str], confirmed: bool = False) -> List[str]:
        with self.storage.update() as tx:
            return HashStateStore(tx).track(hashes, confirmed)

    def confirm(self, hashes: Iterable[str], confirmed: bool = True) -> int:
        with self.storage.update() as tx:
            return HashStateStore(tx).set_confirmed(hashes, confirmed)

    def tracked(self) -> List[TrackedHash]:
        with self.storage.view() as tx:
            return HashStateStore(tx).get()

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def update_transactions(self) -> List[str]:
        """Fetch every tracked transaction body that is not stored yet."""
        logger.info("Updating transactions in DB...")
        stored = update_transactions(self.storage, self.api)
        logger.info("Update done (%d transaction(s) stored).", len(stored))
        return stored

    def get_transaction(self, hash_: str) -> TransactionRecord:
        with self.storage.view() as tx:
            return TransactionStore(tx).get(hash_)

    def find_transactions_by_bundle(
        self, bundle_id: str
    ) -> Tuple[List[TransactionRecord], List[TrackedHash]]:
        with self.storage.view() as tx:
            return find_transactions_by_bundle(tx, bundle_id)

    def status(self) -> Dict[str, Any]:
        with self.storage.view() as tx:
            states = HashStateStore(tx).get()
            stored = sum(1 for _ in TransactionStore(tx).hashes())
            missing = find_missing(tx)
        return {
            "db_path": self.config.storage.db_path,
            "node_url": self.config.node.url,
            "tracked": len(states),
            "confirmed": sum(1 for s in states if s.confirmed),
            "stored": stored,
            "missing": len(missing),
        }

    def close(self) -> None:
        if self.api is not None and hasattr(self.api, "close"):
            self.api.close()
        self.storage.close()


def create_cache(
    config_path: Optional[str] = None,
    db_path: Optional[str] = None,
    node_url: Optional[str] = None,
    api=None,
) -> LedgerCache:
    """Create a LedgerCache from a config file, with optional overrides."""
    config = load_config(config_path)

    if db_path is not None:
        config.storage.db_path = db_path
    if node_url is not None:
        config.node.url = node_url

    return LedgerCache(config, api=api)
