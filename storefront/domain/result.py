# storefront/domain/result.py
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, Optional, TypeVar

from storefront.domain.errors import StorefrontError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a service operation: a value or a typed error, never both."""

    value: Optional[T] = None
    error: Optional[StorefrontError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StorefrontError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value


def returns_result(func: Callable[..., T]) -> Callable[..., Result[T]]:
    """Wrap a service method so storefront errors come back as Result.failure."""

    @wraps(func)
    def wrapper(*args, **kwargs) -> Result[T]:
        try:
            return Result.success(func(*args, **kwargs))
        except StorefrontError as exc:
            return Result.failure(exc)

    return wrapper
