"""DTOs for owner use cases (no dependency on storage)."""

from dataclasses import dataclass
from datetime import date


@dataclass
class OwnerInput:
    """Owner write model (create and full update)."""

    name: str
    address: str | None = None
    photo: str | None = None
    birthday: date | None = None


@dataclass(frozen=True)
class OwnerResult:
    """Owner read-model."""

    id: str
    name: str
    address: str | None
    photo: str | None
    birthday: date | None
