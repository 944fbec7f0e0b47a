from .coordinator import OFFLINE_NOTICE, ProfileResult, SyncCoordinator, WorkoutHistory

__all__ = ["OFFLINE_NOTICE", "ProfileResult", "SyncCoordinator", "WorkoutHistory"]
