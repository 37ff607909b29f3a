"""DTOs for property image use cases."""

from dataclasses import dataclass


@dataclass
class PropertyImageInput:
    """Image write model. id_property may be empty when nested in a new property."""

    file: str
    id_property: str = ""
    enabled: bool = True


@dataclass(frozen=True)
class PropertyImageResult:
    """Property image read-model."""

    id: str
    id_property: str
    file: str
    enabled: bool
