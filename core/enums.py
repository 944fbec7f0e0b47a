from enum import Enum


class Sex(str, Enum):
    male = "male"
    female = "female"

    def __str__(self) -> str:
        return self.value


class SyncState(str, Enum):
    IDLE = "IDLE"
    FETCHING = "FETCHING"
    SUCCESS = "SUCCESS"
    FALLBACK = "FALLBACK"
    FAILED = "FAILED"

    def __str__(self) -> str:
        return self.value


class DataSource(str, Enum):
    cache = "cache"
    remote = "remote"
    local = "local"

    def __str__(self) -> str:
        return self.value
