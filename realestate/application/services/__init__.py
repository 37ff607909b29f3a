"""Application services: cached entity facades, auth and their helpers."""

from realestate.application.services.auth_service import AuthService
from realestate.application.services.authorization import AdminOnlyRoleChangePolicy
from realestate.application.services.base import CachedEntityService
from realestate.application.services.caching import ReadThroughCache
from realestate.application.services.owner_service import OwnerService
from realestate.application.services.property_image_service import PropertyImageService
from realestate.application.services.property_service import PropertyService
from realestate.application.services.property_trace_service import PropertyTraceService
from realestate.application.services.user_service import UserService
from realestate.application.services.validators import SchemaRecordValidator

__all__ = [
    "AdminOnlyRoleChangePolicy",
    "AuthService",
    "CachedEntityService",
    "OwnerService",
    "PropertyImageService",
    "PropertyService",
    "PropertyTraceService",
    "ReadThroughCache",
    "SchemaRecordValidator",
    "UserService",
]
