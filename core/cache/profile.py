from typing import Any

from core.schemas import UserProfile
from core.storage import KeyValueStore
from .base import Clock, TTLCacheManager, epoch_millis

PROFILE_CACHE_KEY = "profile_cache"


class ProfileCacheManager(TTLCacheManager[UserProfile]):
    key_prefix = PROFILE_CACHE_KEY
    payload_field = "profile"

    def __init__(self, store: KeyValueStore, ttl_ms: int = 10 * 60 * 1000, *, clock: Clock = epoch_millis) -> None:
        super().__init__(store, ttl_ms, clock=clock)

    def _prepare_for_cache(self, payload: UserProfile) -> dict[str, Any]:
        return payload.to_storage()

    def _validate_data(self, raw: Any, subkey: int | str | None) -> UserProfile:
        return UserProfile.model_validate(raw)

    async def get_profile(self) -> UserProfile | None:
        return await self.get()

    async def save_profile(self, profile: UserProfile) -> None:
        await self.put(profile)
