"""Uniform result envelope returned by every facade operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from realestate.domain.exceptions import RealEstateException, ValidationException

T = TypeVar("T")

# Map domain error_code to status code (single table for all services)
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "DUPLICATE_EMAIL": 400,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "STORE_ERROR": 500,
}


def status_for(exc: RealEstateException) -> int:
    """Return the status code for a domain exception (500 when unmapped)."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 500)


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """success/status/message/data/errors wrapper.

    success is True exactly when status_code is in the 2xx range. data is
    only set on success paths that produce a value.
    """

    success: bool
    status_code: int
    message: str
    data: T | None = None
    errors: list[str] | None = field(default=None)

    def __post_init__(self) -> None:
        if self.success != (200 <= self.status_code <= 299):
            raise ValueError(
                f"Inconsistent result: success={self.success} with status {self.status_code}"
            )

    @classmethod
    def ok(cls, data: T | None = None, message: str = "OK", status_code: int = 200) -> ServiceResult[T]:
        return cls(success=True, status_code=status_code, message=message, data=data)

    @classmethod
    def created(cls, data: T | None = None, message: str = "Created") -> ServiceResult[T]:
        return cls(success=True, status_code=201, message=message, data=data)

    @classmethod
    def fail(
        cls,
        message: str,
        status_code: int = 400,
        errors: list[str] | None = None,
    ) -> ServiceResult[T]:
        return cls(success=False, status_code=status_code, message=message, errors=errors)

    @classmethod
    def from_exception(cls, exc: RealEstateException) -> ServiceResult[T]:
        """Build a failure envelope from a domain exception (status via error_code)."""
        errors = exc.errors if isinstance(exc, ValidationException) else None
        return cls.fail(exc.message, status_for(exc), errors)
