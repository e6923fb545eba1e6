from cryptodash.infra.cache.snapshot_store import SnapshotStore
from cryptodash.infra.cache.storage import JsonFileStorage, KeyValueStorage, MemoryStorage

__all__ = ["JsonFileStorage", "KeyValueStorage", "MemoryStorage", "SnapshotStore"]
