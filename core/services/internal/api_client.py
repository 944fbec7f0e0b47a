from json import JSONDecodeError, loads
from typing import Any, Optional, Protocol

import httpx
from loguru import logger

from core.exceptions import MalformedResponseError, NetworkError, UserServiceError


class APIClientHTTPError(UserServiceError):
    def __init__(
        self,
        status: int,
        text: str,
        *,
        method: str,
        url: str,
        reason: str | None = None,
    ) -> None:
        self.status = status
        self.text = text
        self.reason = reason
        super().__init__(
            reason or (f"HTTP {status} on {method.upper()} {url}: {text}" if text else f"HTTP {status} on {method.upper()} {url}"),
            code=status,
            details=f"{method.upper()} {url}",
        )


class APIClientTransportError(NetworkError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class APISettings(Protocol):
    API_URL: str
    API_TIMEOUT: float


class APIClient:
    """Thin httpx wrapper shared by every backend call.

    A failed call fails once: there is no retry and no timeout beyond the
    transport's own.
    """

    def __init__(self, client: httpx.AsyncClient, settings: APISettings) -> None:
        self.client = client
        self.settings = settings
        self.api_url = getattr(settings, "API_URL", "").rstrip("/")
        self.default_timeout = getattr(settings, "API_TIMEOUT", 0) or None

    async def aclose(self) -> None:
        try:
            await self.client.aclose()
        except Exception:  # pragma: no cover - best effort
            logger.exception("Failed to close httpx client")

    def _build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.api_url}/{path.lstrip('/')}"

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        content: bytes | str | None = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        url = self._build_url(path)
        request_kwargs: dict[str, Any] = {"headers": headers or {}, "timeout": self.default_timeout}
        if params:
            request_kwargs["params"] = params
        if content is not None:
            request_kwargs["content"] = content
        elif json is not None:
            request_kwargs["json"] = json

        try:
            return await self.client.request(method.upper(), url, **request_kwargs)
        except httpx.RequestError as exc:
            raise APIClientTransportError(f"{type(exc).__name__} on {method.upper()} {url}: {exc}") from exc

    async def _api_request(
        self,
        method: str,
        path: str,
        data: Any = None,
        *,
        headers: Optional[dict[str, str]] = None,
    ) -> tuple[int, Any | None]:
        """Unauthenticated JSON call. Non-2xx responses raise ``APIClientHTTPError``."""
        merged = {"Content-Type": "application/json", **(headers or {})}
        response = await self._send(method, path, json=data, headers=merged)
        self._raise_for_status(response)
        return response.status_code, self._parse_response_json(response)

    @classmethod
    def _raise_for_status(cls, response: httpx.Response) -> None:
        if response.is_success:
            return
        body = response.text
        raise APIClientHTTPError(
            response.status_code,
            body,
            method=response.request.method,
            url=str(response.request.url),
            reason=cls._extract_reason(body),
        )

    @staticmethod
    def _parse_response_json(response: httpx.Response) -> Any | None:
        if not response.content:
            return None
        try:
            return response.json()
        except (JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning(f"Failed to decode JSON response from {response.request.url}")
            raise MalformedResponseError(f"Invalid JSON from {response.request.url}", str(exc)) from exc

    @staticmethod
    def _extract_reason(body: str) -> str | None:
        if not body:
            return None
        try:
            data = loads(body)
        except JSONDecodeError:
            return None
        if isinstance(data, dict):
            for field in ("message", "reason", "detail"):
                value = data.get(field)
                if isinstance(value, str):
                    return value
            detail = data.get("detail")
            if isinstance(detail, dict):
                nested_reason = detail.get("reason")
                if isinstance(nested_reason, str):
                    return nested_reason
        return None


def read_json(response: httpx.Response) -> Any | None:
    """Raise for non-2xx statuses, then decode the body."""
    APIClient._raise_for_status(response)
    return APIClient._parse_response_json(response)
