from typing import Any, Awaitable, Callable, Sequence, cast

from loguru import logger
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from core.exceptions import StorageError


class RedisKeyValueStore:
    _socket_timeout: float = 5.0
    _socket_connect_timeout: float = 3.0

    def __init__(self, url: str, *, db: int = 0, prefix: str = "", client: Redis | None = None) -> None:
        self.url = url
        self.db = db
        self.prefix = prefix
        self._redis: Redis | None = client

    def _create_client(self) -> Redis:
        return from_url(
            url=self.url,
            db=self.db,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=self._socket_timeout,
            socket_connect_timeout=self._socket_connect_timeout,
        )

    def _client(self) -> Redis:
        if self._redis is None:
            self._redis = self._create_client()
        return self._redis

    async def _reset_client(self) -> None:
        if self._redis is None:
            return
        try:
            await self._redis.aclose()
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"Redis client close failed: {exc}")
        finally:
            self._redis = None

    async def _with_client(self, func: Callable[[Redis], Awaitable[Any]], *, operation: str, key: str) -> Any:
        try:
            return await func(self._client())
        except RedisError as exc:
            logger.error(f"Redis {operation} error [{key}]: {exc}")
            await self._reset_client()
            raise StorageError(operation, key, str(exc)) from exc

    def _add_prefix(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _strip_prefix(self, key: str) -> str:
        return key[len(self.prefix) :] if self.prefix and key.startswith(self.prefix) else key

    async def close(self) -> None:
        try:
            await self._reset_client()
            logger.info("Redis connection closed.")
        except Exception as e:
            logger.error(f"Error closing Redis connection: {e}")

    async def healthcheck(self) -> bool:
        try:
            return bool(await self._with_client(lambda c: c.ping(), operation="ping", key="-"))
        except StorageError:
            return False

    async def get(self, key: str) -> str | None:
        def _op(client: Redis) -> Awaitable[str | None]:
            return cast(Awaitable[str | None], client.get(self._add_prefix(key)))

        return await self._with_client(_op, operation="get", key=key)

    async def set(self, key: str, value: str) -> None:
        await self._with_client(lambda c: c.set(self._add_prefix(key), value), operation="set", key=key)

    async def remove(self, key: str) -> None:
        await self._with_client(lambda c: c.delete(self._add_prefix(key)), operation="remove", key=key)

    async def multi_remove(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        prefixed = [self._add_prefix(k) for k in keys]
        await self._with_client(lambda c: c.delete(*prefixed), operation="multi_remove", key=",".join(keys))

    async def list_keys(self) -> list[str]:
        async def _op(client: Redis) -> list[str]:
            return [self._strip_prefix(k) async for k in client.scan_iter(match=f"{self.prefix}*")]

        return await self._with_client(_op, operation="list_keys", key=f"{self.prefix}*")
