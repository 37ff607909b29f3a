"""Domain entities (records owned by the persistence store)."""

from realestate.domain.entities.owner import Owner
from realestate.domain.entities.property import Property
from realestate.domain.entities.property_image import PropertyImage
from realestate.domain.entities.property_trace import PropertyTrace
from realestate.domain.entities.user import User

__all__ = [
    "Owner",
    "Property",
    "PropertyImage",
    "PropertyTrace",
    "User",
]
