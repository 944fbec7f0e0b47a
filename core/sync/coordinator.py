import asyncio
from dataclasses import dataclass, field

from loguru import logger

from core.cache import ProfileCacheManager, WorkoutPageCacheManager
from core.enums import DataSource, SyncState
from core.exceptions import AuthenticationExpiredError, NoSessionError, UserServiceError
from core.infra.local_store import LocalStore
from core.schemas import UserProfile, Workout, sort_by_date_desc
from core.services.internal.profile_service import ProfileService
from core.services.internal.workout_service import WorkoutService

OFFLINE_NOTICE = "You are offline. Showing workouts saved on this device."


@dataclass(frozen=True)
class ProfileResult:
    profile: UserProfile
    source: DataSource


@dataclass(frozen=True)
class WorkoutHistory:
    workouts: list[Workout] = field(default_factory=list)
    page: int = 0
    page_size: int = 10
    has_more_pages: bool = True
    offline: bool = False
    notice: str | None = None
    source: DataSource | None = None


class SyncCoordinator:
    """Fetch-with-fallback for the profile and the paginated workout history.

    Cache first, then the backend through the session. Only the first history
    page falls back to the local store. A full page is taken as a hint that
    more pages exist, so an exactly full last page costs one extra empty fetch.

    History loads run one at a time: ``refresh`` and ``load_workout_history``
    wait for a pending load, ``load_more`` is skipped while one is pending.
    """

    def __init__(
        self,
        profile_service: ProfileService,
        workout_service: WorkoutService,
        profile_cache: ProfileCacheManager,
        workout_cache: WorkoutPageCacheManager,
        local_store: LocalStore,
        *,
        page_size: int = 10,
    ) -> None:
        self.profile_service = profile_service
        self.workout_service = workout_service
        self.profile_cache = profile_cache
        self.workout_cache = workout_cache
        self.local_store = local_store
        self.page_size = page_size

        self.profile_state = SyncState.IDLE
        self.history_state = SyncState.IDLE
        self.history = WorkoutHistory(page_size=page_size)
        self._history_lock = asyncio.Lock()

    @property
    def is_loading(self) -> bool:
        return self._history_lock.locked()

    async def load_profile(self) -> ProfileResult:
        self.profile_state = SyncState.FETCHING
        cached = await self.profile_cache.get_profile()
        if cached is not None:
            self.profile_state = SyncState.SUCCESS
            return ProfileResult(cached, DataSource.cache)

        try:
            profile = await self.profile_service.fetch_profile()
        except Exception as exc:
            logger.warning(f"Profile load failed: {exc}")
            self.profile_state = SyncState.FAILED
            raise

        await self.profile_cache.save_profile(profile)
        self.profile_state = SyncState.SUCCESS
        return ProfileResult(profile, DataSource.remote)

    async def load_workout_history(self, page: int = 1, page_size: int | None = None) -> WorkoutHistory:
        async with self._history_lock:
            return await self._load(page, page_size or self.page_size, use_cache=True)

    async def refresh(self) -> WorkoutHistory:
        async with self._history_lock:
            return await self._load(1, self.page_size, use_cache=False, notice=OFFLINE_NOTICE)

    async def load_more(self) -> WorkoutHistory:
        if not self.history.has_more_pages or self.is_loading:
            logger.debug(
                f"load_more skipped: has_more_pages={self.history.has_more_pages} in_flight={self.is_loading}"
            )
            return self.history
        async with self._history_lock:
            return await self._load(self.history.page + 1, self.history.page_size, use_cache=True)

    async def _load(self, page: int, page_size: int, *, use_cache: bool, notice: str | None = None) -> WorkoutHistory:
        self.history_state = SyncState.FETCHING
        try:
            items, source = await self._fetch_page(page, page_size, use_cache=use_cache)
        except (NoSessionError, AuthenticationExpiredError):
            self.history_state = SyncState.FAILED
            raise
        except UserServiceError as exc:
            if page != 1:
                logger.warning(f"Loading workouts page={page} failed, keeping current list: {exc}")
                self.history_state = SyncState.FAILED
                raise
            return await self._fall_back(exc, page_size, notice)

        workouts = items if page == 1 else [*self.history.workouts, *items]
        self.history = WorkoutHistory(
            workouts=workouts,
            page=page,
            page_size=page_size,
            has_more_pages=len(items) >= page_size,
            source=source,
        )
        self.history_state = SyncState.SUCCESS
        return self.history

    async def _fetch_page(self, page: int, page_size: int, *, use_cache: bool) -> tuple[list[Workout], DataSource]:
        if use_cache:
            cached = await self.workout_cache.get_page(page)
            if cached is not None:
                return cached, DataSource.cache

        result = await self.workout_service.fetch_page(page, page_size)
        await self.workout_cache.save_page(page, result.items)
        return result.items, DataSource.remote

    async def _fall_back(self, error: UserServiceError, page_size: int, notice: str | None) -> WorkoutHistory:
        local = await self.local_store.get_workouts()
        if not local.ok:
            logger.error(f"Remote and local workout reads both failed: {error}; {local.error}")
            self.history_state = SyncState.FAILED
            raise error

        logger.warning(f"Workouts page=1 unavailable, serving local data: {error}")
        self.history = WorkoutHistory(
            page_size=page_size,
            workouts=sort_by_date_desc(local.value or []),
            page=1,
            has_more_pages=False,
            offline=True,
            notice=notice,
            source=DataSource.local,
        )
        self.history_state = SyncState.FALLBACK
        return self.history
