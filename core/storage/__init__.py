from .base import KeyValueStore
from .redis_store import RedisKeyValueStore
from .result import StorageResult

__all__ = ["KeyValueStore", "RedisKeyValueStore", "StorageResult"]
