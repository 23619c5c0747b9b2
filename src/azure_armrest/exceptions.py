"""Error taxonomy raised by the ARM client core."""

from __future__ import annotations

from enum import StrEnum


class ApiErrorKind(StrEnum):
    """Classification of a failed ARM call, derived from the HTTP status."""

    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    GATEWAY_TIMEOUT = "gateway_timeout"
    BAD_GATEWAY = "bad_gateway"
    GENERIC = "generic"


class ArmrestError(Exception):
    """Base class carrying the upstream error code, message and cause."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause


class ValidationError(ArmrestError, ValueError):
    """Raised when a configuration cannot be built (never retried)."""


class ApiError(ArmrestError):
    """A transport failure normalised into one of :class:`ApiErrorKind`."""

    def __init__(
        self,
        kind: ApiErrorKind,
        message: str,
        code: str | None = None,
        cause: BaseException | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause)
        self.kind = kind
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"ApiError(kind={self.kind.value!r}, status_code={self.status_code!r}, "
            f"code={self.code!r}, message={self.message!r})"
        )
