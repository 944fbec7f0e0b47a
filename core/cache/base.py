import json
import time
from json import JSONDecodeError
from typing import Any, Callable, ClassVar, Generic, TypeVar

from loguru import logger

from core.exceptions import StorageError
from core.storage import KeyValueStore

T = TypeVar("T")

Clock = Callable[[], int]


def epoch_millis() -> int:
    return int(time.time() * 1000)


class TTLCacheManager(Generic[T]):
    """Time-to-live cache over the key-value store.

    An entry is ``{<payload_field>: payload, "timestamp": stored_at_ms}``. It is
    valid while ``now - timestamp <= ttl_ms``; an expired entry is removed when
    it is read. There is no capacity bound and no background sweep.
    """

    key_prefix: ClassVar[str]
    payload_field: ClassVar[str]

    def __init__(self, store: KeyValueStore, ttl_ms: int, *, clock: Clock = epoch_millis) -> None:
        self.store = store
        self.ttl_ms = ttl_ms
        self.clock = clock

    def _key(self, subkey: int | str | None) -> str:
        return self.key_prefix if subkey is None else f"{self.key_prefix}{subkey}"

    def _is_cacheable(self, subkey: int | str | None) -> bool:
        return True

    def _prepare_for_cache(self, payload: T) -> Any:
        """Convert ``payload`` into a JSON serialisable form."""
        raise NotImplementedError

    def _validate_data(self, raw: Any, subkey: int | str | None) -> T:
        """Deserialize a cached payload or raise if it is corrupted."""
        raise NotImplementedError

    def _entry_extra(self, subkey: int | str | None) -> dict[str, Any]:
        return {}

    def is_fresh(self, stored_at: int, now: int | None = None) -> bool:
        current = self.clock() if now is None else now
        return current - stored_at <= self.ttl_ms

    async def put(self, payload: T, subkey: int | str | None = None) -> None:
        if not self._is_cacheable(subkey):
            return
        key = self._key(subkey)
        entry = {self.payload_field: self._prepare_for_cache(payload), "timestamp": self.clock()}
        entry.update(self._entry_extra(subkey))
        try:
            await self.store.set(key, json.dumps(entry))
            logger.debug(f"Cached {key}")
        except StorageError as exc:
            logger.error(f"Failed to cache {key}: {exc}")

    async def get(self, subkey: int | str | None = None) -> T | None:
        if not self._is_cacheable(subkey):
            return None
        key = self._key(subkey)
        try:
            raw = await self.store.get(key)
        except StorageError as exc:
            logger.warning(f"Cache read failed for {key}, treating as miss: {exc}")
            return None
        if raw is None:
            logger.debug(f"Cache miss {key}")
            return None

        try:
            entry = json.loads(raw)
            stored_at = int(entry["timestamp"])
            payload = self._validate_data(entry[self.payload_field], subkey)
        except (JSONDecodeError, TypeError, KeyError, ValueError) as exc:
            logger.warning(f"Corrupt cache entry {key}: {exc}")
            await self._evict(key)
            return None

        if not self.is_fresh(stored_at):
            logger.debug(f"Cache entry {key} expired, evicting")
            await self._evict(key)
            return None

        logger.debug(f"Cache hit {key}")
        return payload

    async def invalidate(self, subkey: int | str | None = None) -> None:
        await self._evict(self._key(subkey))

    async def _evict(self, key: str) -> None:
        try:
            await self.store.remove(key)
        except StorageError as exc:
            logger.warning(f"Failed to evict cache entry {key}: {exc}")
