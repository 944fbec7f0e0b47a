from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Sequence

import httpx

from core.exceptions import StorageError

API_URL = "https://api.test"
START_MS = 1_700_000_000_000
BASE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


class InMemoryStore:
    """Dict-backed KeyValueStore with per-operation failure switches."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.fail_reads: set[str] = set()
        self.fail_writes: set[str] = set()
        self.fail_list = False

    @staticmethod
    def _matches(targets: set[str], key: str) -> bool:
        return "*" in targets or key in targets

    async def get(self, key: str) -> str | None:
        if self._matches(self.fail_reads, key):
            raise StorageError("get", key, "read failure")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self._matches(self.fail_writes, key):
            raise StorageError("set", key, "write failure")
        self.data[key] = value

    async def remove(self, key: str) -> None:
        if self._matches(self.fail_writes, key):
            raise StorageError("remove", key, "write failure")
        self.data.pop(key, None)

    async def multi_remove(self, keys: Sequence[str]) -> None:
        for key in keys:
            await self.remove(key)

    async def list_keys(self) -> list[str]:
        if self.fail_list:
            raise StorageError("list_keys", "*", "list failure")
        return list(self.data)


class FakeClock:
    def __init__(self, start: int = START_MS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


Handler = httpx.Response | Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Routes requests by (method, path) and records everything it receives."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method.upper(), path)] = handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "not found"})
        if callable(handler):
            return handler(request)
        return handler


def network_down(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def workout_payload(index: int, date: str | None = None, **extra: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": f"w{index}",
        "date": date or (BASE_DATE + timedelta(hours=index)).isoformat().replace("+00:00", "Z"),
        "description": f"AMRAP {index} min",
        "weights": {"thruster": "42.5kg"},
        "result": f"{index} rounds",
    }
    data.update(extra)
    return data


def workouts_batch(start: int, count: int) -> list[dict[str, Any]]:
    return [workout_payload(i) for i in range(start, start + count)]


PROFILE_PAYLOAD: dict[str, Any] = {
    "name": "Alex",
    "email": "alex@example.com",
    "sex": "female",
    "age": 34,
    "weight": 61.5,
    "capacities": {
        "strength": 6,
        "power": 5,
        "muscularEndurance": 7,
        "aerobicCapacity": 8,
        "anaerobicCapacity": 6,
        "gymnasticsSkill": 4,
    },
}
