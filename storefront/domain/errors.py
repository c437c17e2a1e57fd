"""
Storefront error taxonomy.

    StorefrontError
    ├── DomainError            (terminal, never retried)
    │   ├── InvalidArgument
    │   ├── NotFound
    │   ├── Unavailable
    │   └── PermissionDenied
    ├── Conflict               (transient, safe to retry by the caller)
    ├── InvariantViolation
    └── Unauthenticated        (raised by the HTTP boundary only)

VersionConflict is not part of the taxonomy: stores raise it when a
conditional write loses a race and the transaction runner consumes it.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    INVARIANT_VIOLATION = "invariant_violation"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorCode.INVALID_ARGUMENT: 400,
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.PERMISSION_DENIED: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.UNAVAILABLE: 503,
    ErrorCode.INVARIANT_VIOLATION: 500,
}


class StorefrontError(Exception):
    """
    Base exception for storefront failures.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code, mapped to a status by the boundary
        details: Additional context for logs
    """

    code: ErrorCode = ErrorCode.INVARIANT_VIOLATION

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value!r}, message={self.message!r})"


class DomainError(StorefrontError):
    """Business-rule failure. Aborts a transaction without retry."""


class InvalidArgument(DomainError):
    code = ErrorCode.INVALID_ARGUMENT


class NotFound(DomainError):
    code = ErrorCode.NOT_FOUND


class Unavailable(DomainError):
    code = ErrorCode.UNAVAILABLE


class PermissionDenied(DomainError):
    code = ErrorCode.PERMISSION_DENIED


class Conflict(StorefrontError):
    """Optimistic concurrency retries exhausted."""

    code = ErrorCode.CONFLICT


class InvariantViolation(StorefrontError):
    code = ErrorCode.INVARIANT_VIOLATION


class Unauthenticated(StorefrontError):
    code = ErrorCode.UNAUTHENTICATED


class VersionConflict(Exception):
    """A conditional write found a different version than expected."""

    def __init__(self, kind: str, doc_id: Optional[str], expected_version: Optional[int] = None):
        self.kind = kind
        self.doc_id = doc_id
        self.expected_version = expected_version
        super().__init__(
            f"{kind}/{doc_id} changed since version {expected_version}"
            if expected_version is not None
            else f"{kind}/{doc_id} already exists"
        )
