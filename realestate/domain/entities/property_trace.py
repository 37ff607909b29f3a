"""Property trace domain entity (sale history entry)."""

from dataclasses import dataclass
from datetime import date


@dataclass
class PropertyTrace:
    """One recorded sale or valuation of a property."""

    id: str
    id_property: str
    name: str
    date_sale: date | None = None
    value: float | None = None
    tax: float | None = None
