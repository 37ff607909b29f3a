"""Property domain entity.

Stores only the property's own columns; owner, image and traces live in
their own collections and are composed by the property service.
"""

from dataclasses import dataclass


@dataclass
class Property:
    """A listed property. price is in whole currency units."""

    id: str
    name: str
    address: str
    price: int
    year: int
    code_internal: int
    id_owner: str | None = None
