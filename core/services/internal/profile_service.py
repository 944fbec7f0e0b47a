from core.schemas import UserProfile
from core.services.internal.api_client import read_json
from core.services.internal.session_manager import SessionManager
from core.utils.validators import validate_or_raise


class ProfileService:
    def __init__(self, session: SessionManager) -> None:
        self._session = session

    async def fetch_profile(self) -> UserProfile:
        response = await self._session.authenticated_request("get", "/profile")
        data = read_json(response)
        return validate_or_raise(data, UserProfile, context="GET /profile")
