from .base import TTLCacheManager, epoch_millis
from .profile import PROFILE_CACHE_KEY, ProfileCacheManager
from .workout import WORKOUT_CACHE_PREFIX, WorkoutPageCacheManager

__all__ = [
    "PROFILE_CACHE_KEY",
    "WORKOUT_CACHE_PREFIX",
    "ProfileCacheManager",
    "TTLCacheManager",
    "WorkoutPageCacheManager",
    "epoch_millis",
]
