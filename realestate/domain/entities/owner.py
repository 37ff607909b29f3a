"""Owner domain entity."""

from dataclasses import dataclass
from datetime import date


@dataclass
class Owner:
    """Owner of one or more properties."""

    id: str
    name: str
    address: str | None = None
    photo: str | None = None
    birthday: date | None = None
