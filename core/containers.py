from typing import Any

import httpx
from dependency_injector import containers, providers

from config.app_settings import settings
from core.cache import ProfileCacheManager, WorkoutPageCacheManager
from core.flows.workout import WorkoutFlow
from core.infra.local_store import LocalStore
from core.services.internal.api_client import APIClient
from core.services.internal.auth_service import AuthService
from core.services.internal.profile_service import ProfileService
from core.services.internal.session_manager import SessionManager
from core.services.internal.workout_service import WorkoutService
from core.storage import RedisKeyValueStore
from core.sync import SyncCoordinator


def build_http_client(**_: Any) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.API_TIMEOUT,
        limits=httpx.Limits(
            max_connections=settings.API_MAX_CONNECTIONS,
            max_keepalive_connections=settings.API_MAX_KEEPALIVE_CONNECTIONS,
        ),
    )


def build_store(**_: Any) -> RedisKeyValueStore:
    return RedisKeyValueStore(settings.REDIS_URL, db=settings.REDIS_DB, prefix=settings.STORE_KEY_PREFIX)


class App(containers.DeclarativeContainer):
    http_client = providers.Singleton(build_http_client)
    store = providers.Singleton(build_store)

    api_client = providers.Singleton(APIClient, client=http_client, settings=settings)
    session_manager = providers.Singleton(SessionManager, store=store, api=api_client)

    profile_cache = providers.Singleton(ProfileCacheManager, store=store, ttl_ms=settings.PROFILE_CACHE_TTL_MS)
    workout_cache = providers.Singleton(
        WorkoutPageCacheManager,
        store=store,
        ttl_ms=settings.WORKOUT_CACHE_TTL_MS,
        max_page=settings.WORKOUT_CACHE_MAX_PAGE,
    )
    local_store = providers.Singleton(LocalStore, store=store)

    profile_service = providers.Singleton(ProfileService, session=session_manager)
    workout_service = providers.Singleton(WorkoutService, session=session_manager)

    sync_coordinator = providers.Singleton(
        SyncCoordinator,
        profile_service=profile_service,
        workout_service=workout_service,
        profile_cache=profile_cache,
        workout_cache=workout_cache,
        local_store=local_store,
        page_size=settings.WORKOUT_PAGE_SIZE,
    )
    auth_service = providers.Singleton(
        AuthService,
        api=api_client,
        session=session_manager,
        profile_cache=profile_cache,
        coordinator=sync_coordinator,
        local_store=local_store,
    )
    workout_flow = providers.Singleton(WorkoutFlow, workout_service=workout_service, local_store=local_store)


async def shutdown_container(container: "App") -> None:
    await container.api_client().aclose()
    store = container.store()
    close = getattr(store, "close", None)
    if close is not None:
        await close()


_container: App | None = None


def create_container() -> App:
    return App()


def set_container(container: App) -> None:
    global _container
    _container = container


def get_container() -> App:
    if _container is None:
        raise RuntimeError("Container is not initialized")
    return _container
