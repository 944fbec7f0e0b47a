from dataclasses import dataclass
from typing import Generic, TypeVar

from core.exceptions import StorageError

T = TypeVar("T")


@dataclass(frozen=True)
class StorageResult(Generic[T]):
    """Outcome of a local read: either a value or the storage failure."""

    value: T | None = None
    error: StorageError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T | None:
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T | None) -> "StorageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StorageError) -> "StorageResult[T]":
        return cls(error=error)
