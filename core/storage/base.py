from typing import Protocol, Sequence


class KeyValueStore(Protocol):
    """Persistent, process-wide string store.

    Every method may raise ``StorageError`` when the backend fails.
    ``get`` returns ``None`` for a missing key.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def multi_remove(self, keys: Sequence[str]) -> None: ...

    async def list_keys(self) -> list[str]: ...
