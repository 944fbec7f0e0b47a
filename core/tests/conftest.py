from types import SimpleNamespace

import httpx
import pytest

from core.cache import ProfileCacheManager, WorkoutPageCacheManager
from core.flows.workout import WorkoutFlow
from core.infra.local_store import LocalStore
from core.services.internal.api_client import APIClient
from core.services.internal.auth_service import AuthService
from core.services.internal.profile_service import ProfileService
from core.services.internal.session_manager import JWT_TOKEN_KEY, SessionManager
from core.services.internal.workout_service import WorkoutService
from core.sync import SyncCoordinator
from core.tests.helpers import API_URL, FakeBackend, FakeClock, InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api_settings() -> SimpleNamespace:
    return SimpleNamespace(API_URL=API_URL, API_TIMEOUT=5)


@pytest.fixture
def api(backend: FakeBackend, api_settings: SimpleNamespace) -> APIClient:
    return APIClient(httpx.AsyncClient(transport=httpx.MockTransport(backend)), api_settings)


@pytest.fixture
def session(store: InMemoryStore, api: APIClient) -> SessionManager:
    return SessionManager(store, api)


@pytest.fixture
def logged_in(store: InMemoryStore) -> str:
    store.data[JWT_TOKEN_KEY] = "tok-123"
    return "tok-123"


@pytest.fixture
def profile_cache(store: InMemoryStore, clock: FakeClock) -> ProfileCacheManager:
    return ProfileCacheManager(store, 600_000, clock=clock)


@pytest.fixture
def workout_cache(store: InMemoryStore, clock: FakeClock) -> WorkoutPageCacheManager:
    return WorkoutPageCacheManager(store, 300_000, max_page=3, clock=clock)


@pytest.fixture
def local_store(store: InMemoryStore) -> LocalStore:
    return LocalStore(store)


@pytest.fixture
def profile_service(session: SessionManager) -> ProfileService:
    return ProfileService(session)


@pytest.fixture
def workout_service(session: SessionManager) -> WorkoutService:
    return WorkoutService(session)


@pytest.fixture
def coordinator(
    profile_service: ProfileService,
    workout_service: WorkoutService,
    profile_cache: ProfileCacheManager,
    workout_cache: WorkoutPageCacheManager,
    local_store: LocalStore,
) -> SyncCoordinator:
    return SyncCoordinator(
        profile_service,
        workout_service,
        profile_cache,
        workout_cache,
        local_store,
        page_size=10,
    )


@pytest.fixture
def auth_service(
    api: APIClient,
    session: SessionManager,
    profile_cache: ProfileCacheManager,
    coordinator: SyncCoordinator,
    local_store: LocalStore,
) -> AuthService:
    return AuthService(api, session, profile_cache, coordinator, local_store)


@pytest.fixture
def workout_flow(workout_service: WorkoutService, local_store: LocalStore, clock: FakeClock) -> WorkoutFlow:
    return WorkoutFlow(workout_service, local_store, clock=clock)
