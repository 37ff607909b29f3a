"""DTOs for property trace use cases."""

from dataclasses import dataclass
from datetime import date


@dataclass
class PropertyTraceInput:
    """Trace write model. id_property may be empty when nested in a new property."""

    name: str
    id_property: str = ""
    date_sale: date | None = None
    value: float | None = None
    tax: float | None = None


@dataclass(frozen=True)
class PropertyTraceResult:
    """Property trace read-model."""

    id: str
    id_property: str
    name: str
    date_sale: date | None
    value: float | None
    tax: float | None
