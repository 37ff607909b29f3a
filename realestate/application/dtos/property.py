"""DTOs for property use cases.

PropertyResult carries the composed owner, image and traces when read by
id; list reads leave them unset.
"""

from dataclasses import dataclass, field

from realestate.application.dtos.owner import OwnerInput, OwnerResult
from realestate.application.dtos.property_image import (
    PropertyImageInput,
    PropertyImageResult,
)
from realestate.application.dtos.property_trace import (
    PropertyTraceInput,
    PropertyTraceResult,
)


@dataclass
class PropertyInput:
    """Property write model. Nested owner/image/traces are only used on create."""

    name: str
    address: str
    price: int
    year: int
    code_internal: int
    id_owner: str | None = None
    owner: OwnerInput | None = None
    image: PropertyImageInput | None = None
    traces: list[PropertyTraceInput] = field(default_factory=list)


@dataclass(frozen=True)
class PropertyResult:
    """Property read-model."""

    id: str
    name: str
    address: str
    price: int
    year: int
    code_internal: int
    id_owner: str | None
    owner: OwnerResult | None = None
    image: PropertyImageResult | None = None
    traces: tuple[PropertyTraceResult, ...] | None = None
