from core.services.internal import AuthService, ProfileService, SessionManager, WorkoutService


__all__ = [
    "AuthService",
    "ProfileService",
    "SessionManager",
    "WorkoutService",
]
