from typing import TYPE_CHECKING, Any

from loguru import logger

from core.cache import ProfileCacheManager
from core.exceptions import AuthenticationExpiredError, NoSessionError, UserServiceError
from core.infra.local_store import LocalStore
from core.schemas import AuthResponse, LoginData, SignupData
from core.services.internal.api_client import APIClient
from core.services.internal.session_manager import SessionManager

if TYPE_CHECKING:
    from core.sync import SyncCoordinator


class AuthService:
    def __init__(
        self,
        api: APIClient,
        session: SessionManager,
        profile_cache: ProfileCacheManager,
        coordinator: "SyncCoordinator",
        local_store: LocalStore,
    ) -> None:
        self._api = api
        self._session = session
        self._profile_cache = profile_cache
        self._coordinator = coordinator
        self._local_store = local_store

    async def signup(self, data: SignupData | dict[str, Any]) -> AuthResponse:
        payload = data if isinstance(data, SignupData) else SignupData.model_validate(data)
        response = await self._authenticate("/signup", payload.model_dump(mode="json"))
        if response.bearer:
            logger.info("Signup returned token, user is logged in")
        return response

    async def login(self, data: LoginData | dict[str, Any]) -> AuthResponse:
        payload = data if isinstance(data, LoginData) else LoginData.model_validate(data)
        response = await self._authenticate("/login", payload.model_dump(mode="json"))
        if response.bearer:
            await self.hydrate_profile()
        else:
            logger.warning("Login response carried no token")
        return response

    async def logout(self) -> None:
        await self._session.clear_session()

    async def is_logged_in(self) -> bool:
        return await self._session.is_active()

    async def hydrate_profile(self) -> None:
        """Copy the backend profile into the local store.

        Storage and transient backend failures are logged and ignored; a lost
        session is re-raised.
        """
        try:
            result = await self._coordinator.load_profile()
            await self._local_store.save_profile(result.profile)
        except (NoSessionError, AuthenticationExpiredError):
            logger.warning("Session ended while hydrating the profile after login")
            raise
        except UserServiceError as exc:
            logger.warning(f"Profile hydration after login failed: {exc}")

    async def _authenticate(self, path: str, body: dict[str, Any]) -> AuthResponse:
        _, data = await self._api._api_request("post", path, body)
        response = AuthResponse.model_validate(data if isinstance(data, dict) else {})
        token = response.bearer
        if token:
            await self._session.save_token(token)
            await self._profile_cache.invalidate()
            logger.info(f"Session started via {path}, profile cache cleared")
        return response
