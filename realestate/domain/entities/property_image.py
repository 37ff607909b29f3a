"""Property image domain entity (at most one image per property)."""

from dataclasses import dataclass


@dataclass
class PropertyImage:
    """Image attached to a property. file is a URL or base64 payload."""

    id: str
    id_property: str
    file: str
    enabled: bool = True
