"""Application DTOs: write inputs, read results, envelopes (no storage imports)."""

from realestate.application.dtos.auth import AuthTokens, LoginInput
from realestate.application.dtos.owner import OwnerInput, OwnerResult
from realestate.application.dtos.property import PropertyInput, PropertyResult
from realestate.application.dtos.property_image import (
    PropertyImageInput,
    PropertyImageResult,
)
from realestate.application.dtos.property_trace import (
    PropertyTraceInput,
    PropertyTraceResult,
)
from realestate.application.dtos.result import ServiceResult
from realestate.application.dtos.user import UserInput, UserResult
from realestate.application.dtos.validation import ValidationResult

__all__ = [
    "AuthTokens",
    "LoginInput",
    "OwnerInput",
    "OwnerResult",
    "PropertyImageInput",
    "PropertyImageResult",
    "PropertyInput",
    "PropertyResult",
    "PropertyTraceInput",
    "PropertyTraceResult",
    "ServiceResult",
    "UserInput",
    "UserResult",
    "ValidationResult",
]
