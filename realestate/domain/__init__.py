"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from realestate.domain.entities import (
    Owner,
    Property,
    PropertyImage,
    PropertyTrace,
    User,
)
from realestate.domain.enums import TokenType, UserRole
from realestate.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConfigurationException,
    DuplicateEmailException,
    RealEstateException,
    ResourceNotFoundException,
    StoreException,
    ValidationException,
)

__all__ = [
    # Entities
    "Owner",
    "Property",
    "PropertyImage",
    "PropertyTrace",
    "User",
    # Enums
    "TokenType",
    "UserRole",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "ConfigurationException",
    "DuplicateEmailException",
    "RealEstateException",
    "ResourceNotFoundException",
    "StoreException",
    "ValidationException",
]
