import json

import pytest

from core.cache import ProfileCacheManager, WorkoutPageCacheManager
from core.schemas import UserProfile, Workout
from core.tests.helpers import PROFILE_PAYLOAD, FakeClock, InMemoryStore, workout_payload


@pytest.mark.asyncio
async def test_profile_entry_valid_up_to_ttl_inclusive(
    store: InMemoryStore, clock: FakeClock, profile_cache: ProfileCacheManager
) -> None:
    profile = UserProfile.model_validate(PROFILE_PAYLOAD)
    await profile_cache.put(profile)

    clock.advance(600_000)
    assert await profile_cache.get() == profile

    clock.advance(1)
    assert await profile_cache.get() is None
    assert "profile_cache" not in store.data


@pytest.mark.asyncio
async def test_workout_page_expires_after_five_minutes(
    store: InMemoryStore, clock: FakeClock, workout_cache: WorkoutPageCacheManager
) -> None:
    workouts = [Workout.model_validate(workout_payload(1))]
    await workout_cache.save_page(2, workouts)

    clock.advance(300_000)
    assert await workout_cache.get_page(2) == workouts

    clock.advance(1)
    assert await workout_cache.get_page(2) is None
    assert await store.get("workout_cache_page_2") is None


@pytest.mark.asyncio
async def test_entry_layout_matches_storage_format(
    store: InMemoryStore, clock: FakeClock, workout_cache: WorkoutPageCacheManager, profile_cache: ProfileCacheManager
) -> None:
    await workout_cache.save_page(1, [Workout.model_validate(workout_payload(1))])
    await profile_cache.save_profile(UserProfile.model_validate(PROFILE_PAYLOAD))

    page_entry = json.loads(store.data["workout_cache_page_1"])
    assert page_entry["timestamp"] == clock.now
    assert page_entry["page"] == 1
    assert page_entry["workouts"][0]["id"] == "w1"

    profile_entry = json.loads(store.data["profile_cache"])
    assert set(profile_entry) == {"profile", "timestamp"}
    assert profile_entry["profile"]["capacities"]["muscularEndurance"] == 7


@pytest.mark.asyncio
async def test_pages_beyond_limit_bypass_cache(store: InMemoryStore, workout_cache: WorkoutPageCacheManager) -> None:
    await workout_cache.save_page(4, [Workout.model_validate(workout_payload(1))])

    assert "workout_cache_page_4" not in store.data
    assert await workout_cache.get_page(4) is None


@pytest.mark.asyncio
async def test_corrupt_entry_is_a_miss_and_removed(store: InMemoryStore, profile_cache: ProfileCacheManager) -> None:
    store.data["profile_cache"] = "{not json"

    assert await profile_cache.get() is None
    assert "profile_cache" not in store.data


@pytest.mark.asyncio
async def test_read_failure_is_a_miss(store: InMemoryStore, profile_cache: ProfileCacheManager) -> None:
    await profile_cache.put(UserProfile.model_validate(PROFILE_PAYLOAD))
    store.fail_reads.add("profile_cache")

    assert await profile_cache.get() is None


@pytest.mark.asyncio
async def test_write_failure_does_not_raise(store: InMemoryStore, workout_cache: WorkoutPageCacheManager) -> None:
    store.fail_writes.add("*")

    await workout_cache.save_page(1, [Workout.model_validate(workout_payload(1))])

    assert store.data == {}


@pytest.mark.asyncio
async def test_put_overwrites_and_refreshes_timestamp(
    store: InMemoryStore, clock: FakeClock, workout_cache: WorkoutPageCacheManager
) -> None:
    await workout_cache.save_page(1, [Workout.model_validate(workout_payload(1))])
    clock.advance(299_000)
    await workout_cache.save_page(1, [Workout.model_validate(workout_payload(2))])
    clock.advance(299_000)

    cached = await workout_cache.get_page(1)
    assert cached is not None
    assert [w.id for w in cached] == ["w2"]


@pytest.mark.asyncio
async def test_invalidate_removes_entry(store: InMemoryStore, profile_cache: ProfileCacheManager) -> None:
    await profile_cache.put(UserProfile.model_validate(PROFILE_PAYLOAD))
    await profile_cache.invalidate()

    assert "profile_cache" not in store.data
