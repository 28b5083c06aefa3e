import os
import yaml
from dataclasses import dataclass
from typing import Optional


@dataclass
class NodeConfig:
    url: str = "http://localhost:14266"
    timeout_sec: float = 30.0


@dataclass
class StorageConfig:
    db_path: str = "ledgercache.db"


@dataclass
class LedgerCacheConfig:
    node: NodeConfig
    storage: StorageConfig


def load_config(config_path: Optional[str] = None) -> LedgerCacheConfig:
    """Load configuration from file or use defaults."""
    if config_path and os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        node_config = NodeConfig(**(config_data.get('node') or {}))
        storage_config = StorageConfig(**(config_data.get('storage') or {}))
    else:
        node_config = NodeConfig()
        storage_config = StorageConfig()

    return LedgerCacheConfig(node=node_config, storage=storage_config)
