from core.services.internal.api_client import APIClient, APIClientHTTPError, APIClientTransportError
from core.services.internal.session_manager import SessionManager
from core.services.internal.profile_service import ProfileService
from core.services.internal.workout_service import WorkoutService
from core.services.internal.auth_service import AuthService

__all__ = [
    "APIClient",
    "APIClientHTTPError",
    "APIClientTransportError",
    "AuthService",
    "ProfileService",
    "SessionManager",
    "WorkoutService",
]
