import json
from json import JSONDecodeError
from typing import Any

from loguru import logger
from pydantic import ValidationError

from core.exceptions import StorageError
from core.schemas import UserProfile, Workout
from core.storage import KeyValueStore, StorageResult

USER_PROFILE_KEY = "user_profile"
WORKOUTS_KEY = "workouts"


class LocalStore:
    """Durable device copy of the profile and completed workouts.

    Survives cache eviction and offline periods. ``save_workout`` is a
    read-modify-write append and assumes a single writer: two saves issued
    before either completes can lose one of the workouts.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    async def save_profile(self, profile: UserProfile | dict[str, Any]) -> UserProfile:
        normalized = profile if isinstance(profile, UserProfile) else UserProfile.model_validate(profile)
        try:
            await self.store.set(USER_PROFILE_KEY, json.dumps(normalized.to_storage()))
        except StorageError as exc:
            logger.error(f"Error saving user profile: {exc}")
            raise
        logger.debug("Profile saved locally")
        return normalized

    async def get_profile(self) -> StorageResult[UserProfile]:
        try:
            raw = await self.store.get(USER_PROFILE_KEY)
        except StorageError as exc:
            logger.warning(f"Error getting user profile: {exc}")
            return StorageResult.failure(exc)
        if not raw:
            return StorageResult.success(None)
        try:
            return StorageResult.success(UserProfile.model_validate(json.loads(raw)))
        except (JSONDecodeError, ValidationError) as exc:
            logger.warning(f"Stored user profile is unreadable: {exc}")
            return StorageResult.failure(StorageError("decode", USER_PROFILE_KEY, str(exc)))

    async def save_workout(self, workout: Workout) -> None:
        existing = await self.get_workouts()
        current = existing.unwrap() or []
        payload = [w.to_storage() for w in current]
        payload.append(workout.to_storage())
        try:
            await self.store.set(WORKOUTS_KEY, json.dumps(payload))
        except StorageError as exc:
            logger.error(f"Error saving workout {workout.id}: {exc}")
            raise
        logger.debug(f"Workout {workout.id} saved locally, total={len(payload)}")

    async def get_workouts(self) -> StorageResult[list[Workout]]:
        try:
            raw = await self.store.get(WORKOUTS_KEY)
        except StorageError as exc:
            logger.warning(f"Error getting workouts: {exc}")
            return StorageResult.failure(exc)
        if not raw:
            return StorageResult.success([])
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("workouts record is not a list")
            return StorageResult.success([Workout.model_validate(item) for item in items])
        except (JSONDecodeError, ValueError) as exc:
            logger.warning(f"Stored workouts are unreadable: {exc}")
            return StorageResult.failure(StorageError("decode", WORKOUTS_KEY, str(exc)))
