from typing import Any, Optional

import httpx
from loguru import logger

from core.cache import PROFILE_CACHE_KEY, WORKOUT_CACHE_PREFIX
from core.exceptions import AuthenticationExpiredError, NoSessionError, StorageError
from core.infra.local_store import USER_PROFILE_KEY, WORKOUTS_KEY
from core.services.internal.api_client import APIClient
from core.storage import KeyValueStore

JWT_TOKEN_KEY = "jwt_token"
SESSION_EXPIRED_STATUSES = frozenset({401, 403})


class SessionManager:
    """Owns the bearer token and the teardown of all user-scoped data.

    A stored token is the sole definition of "logged in".
    """

    def __init__(self, store: KeyValueStore, api: APIClient) -> None:
        self.store = store
        self.api = api

    async def save_token(self, token: str) -> None:
        try:
            await self.store.set(JWT_TOKEN_KEY, token)
        except StorageError as exc:
            logger.error(f"Error saving JWT token: {exc}")
            raise
        logger.info(f"Token saved to storage, length: {len(token)}")

    async def get_token(self) -> str | None:
        try:
            return await self.store.get(JWT_TOKEN_KEY) or None
        except StorageError as exc:
            logger.warning(f"Error getting JWT token, treating as no session: {exc}")
            return None

    async def is_active(self) -> bool:
        return await self.get_token() is not None

    async def clear_session(self) -> None:
        keys = [JWT_TOKEN_KEY, USER_PROFILE_KEY, WORKOUTS_KEY, PROFILE_CACHE_KEY]
        await self.store.multi_remove(keys)
        page_keys = [k for k in await self.store.list_keys() if k.startswith(WORKOUT_CACHE_PREFIX)]
        if page_keys:
            await self.store.multi_remove(page_keys)
        logger.info(f"Session cleared, removed {len(keys) + len(page_keys)} keys")

    async def authenticated_request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        content: bytes | str | None = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        token = await self.get_token()
        if token is None:
            raise NoSessionError(path)

        merged = {"Content-Type": "application/json"}
        merged.update({k: v for k, v in (headers or {}).items() if k.lower() != "authorization"})
        merged["Authorization"] = f"Bearer {token}"

        logger.debug(f"Authenticated {method.upper()} {path} with token length {len(token)}")
        response = await self.api._send(method, path, json=json, content=content, params=params, headers=merged)

        if response.status_code in SESSION_EXPIRED_STATUSES:
            logger.info(f"HTTP {response.status_code} on {method.upper()} {path}, tearing down session")
            try:
                await self.clear_session()
            except StorageError as exc:
                logger.error(f"Session teardown failed: {exc}")
                raise AuthenticationExpiredError(response.status_code, path) from exc
            raise AuthenticationExpiredError(response.status_code, path)

        return response
