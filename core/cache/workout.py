from typing import Any

from core.schemas import Workout
from core.storage import KeyValueStore
from .base import Clock, TTLCacheManager, epoch_millis

WORKOUT_CACHE_PREFIX = "workout_cache_page_"


class WorkoutPageCacheManager(TTLCacheManager[list[Workout]]):
    """Caches the first ``max_page`` pages of workout history, one key per page."""

    key_prefix = WORKOUT_CACHE_PREFIX
    payload_field = "workouts"

    def __init__(
        self,
        store: KeyValueStore,
        ttl_ms: int = 5 * 60 * 1000,
        *,
        max_page: int = 3,
        clock: Clock = epoch_millis,
    ) -> None:
        super().__init__(store, ttl_ms, clock=clock)
        self.max_page = max_page

    def _is_cacheable(self, subkey: int | str | None) -> bool:
        if subkey is None:
            return False
        return 1 <= int(subkey) <= self.max_page

    def _prepare_for_cache(self, payload: list[Workout]) -> list[dict[str, Any]]:
        return [w.to_storage() for w in payload]

    def _validate_data(self, raw: Any, subkey: int | str | None) -> list[Workout]:
        if not isinstance(raw, list):
            raise ValueError(f"page {subkey} payload is not a list")
        return [Workout.model_validate(item) for item in raw]

    def _entry_extra(self, subkey: int | str | None) -> dict[str, Any]:
        return {"page": int(subkey)} if subkey is not None else {}

    async def get_page(self, page: int) -> list[Workout] | None:
        return await self.get(page)

    async def save_page(self, page: int, workouts: list[Workout]) -> None:
        await self.put(workouts, page)
