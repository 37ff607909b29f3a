"""Entity <-> DTO mappers.

Each mapper knows the writable fields of its entity and converts between
write inputs, stored entities and read results. normalize_fields resolves
field aliases for partial updates: snake_case, camelCase and PascalCase
names are all accepted (``id_owner``, ``idOwner``, ``IdOwner``).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any, ClassVar, Generic, TypeVar

from realestate.application.dtos import (
    OwnerInput,
    OwnerResult,
    PropertyImageInput,
    PropertyImageResult,
    PropertyInput,
    PropertyResult,
    PropertyTraceInput,
    PropertyTraceResult,
    UserInput,
    UserResult,
)
from realestate.domain.entities import Owner, Property, PropertyImage, PropertyTrace, User
from realestate.domain.exceptions import ValidationException

EntityT = TypeVar("EntityT")
InputT = TypeVar("InputT")
ResultT = TypeVar("ResultT")


def _compact(name: str) -> str:
    return name.replace("_", "").lower()


class EntityMapper(Generic[EntityT, InputT, ResultT]):
    """Generic mapper driven by the dataclass fields of entity, input and result."""

    entity_type: ClassVar[type]
    input_type: ClassVar[type]
    result_type: ClassVar[type]
    writable_fields: ClassVar[tuple[str, ...]]
    date_fields: ClassVar[frozenset[str]] = frozenset()

    def __init__(self) -> None:
        self._aliases = {_compact(name): name for name in self.writable_fields}
        self._result_fields = tuple(f.name for f in dataclasses.fields(self.result_type))

    def to_result(self, entity: EntityT) -> ResultT:
        values = {name: getattr(entity, name) for name in self._result_fields if hasattr(entity, name)}
        return self.result_type(**values)

    def to_results(self, entities: Iterable[EntityT]) -> tuple[ResultT, ...]:
        return tuple(self.to_result(e) for e in entities)

    def to_entity(self, data: InputT, entity_id: str) -> EntityT:
        values = {name: getattr(data, name) for name in self.writable_fields}
        return self.entity_type(id=entity_id, **values)

    def merge(self, data: InputT, entity: EntityT) -> EntityT:
        """Full replace: every writable field comes from data; id is kept."""
        return self.to_entity(data, getattr(entity, "id"))

    def apply(self, entity: EntityT, fields: Mapping[str, Any]) -> EntityT:
        """Return a copy of entity with the given (normalized) fields set."""
        return dataclasses.replace(entity, **fields)

    def to_input(self, entity: EntityT) -> InputT:
        """Rebuild a write input from an entity (used to re-validate patches)."""
        return self.input_type(**{name: getattr(entity, name) for name in self.writable_fields})

    def normalize_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Resolve aliases to canonical field names and coerce ISO date strings.

        Raises:
            ValidationException: On unknown or duplicated fields, or bad dates.
        """
        normalized: dict[str, Any] = {}
        errors: list[str] = []
        for raw_name, value in fields.items():
            name = self._aliases.get(_compact(str(raw_name)))
            if name is None:
                errors.append(f"{raw_name}: unknown field")
                continue
            if name in normalized:
                errors.append(f"{raw_name}: duplicates field '{name}'")
                continue
            if name in self.date_fields and isinstance(value, str):
                try:
                    value = date.fromisoformat(value)
                except ValueError:
                    errors.append(f"{name}: invalid date '{value}'")
                    continue
            elif name in self.date_fields and isinstance(value, datetime):
                value = value.date()
            normalized[name] = value
        if errors:
            raise ValidationException("Invalid fields", errors=errors)
        return normalized


class OwnerMapper(EntityMapper[Owner, OwnerInput, OwnerResult]):
    entity_type = Owner
    input_type = OwnerInput
    result_type = OwnerResult
    writable_fields = ("name", "address", "photo", "birthday")
    date_fields = frozenset({"birthday"})


class PropertyMapper(EntityMapper[Property, PropertyInput, PropertyResult]):
    entity_type = Property
    input_type = PropertyInput
    result_type = PropertyResult
    writable_fields = ("name", "address", "price", "year", "code_internal", "id_owner")

    def compose(
        self,
        entity: Property | PropertyResult,
        owner: OwnerResult | None,
        image: PropertyImageResult | None,
        traces: Iterable[PropertyTraceResult],
    ) -> PropertyResult:
        """Attach owner, image and traces to a property result."""
        base = entity if isinstance(entity, PropertyResult) else self.to_result(entity)
        return dataclasses.replace(base, owner=owner, image=image, traces=tuple(traces))


class PropertyImageMapper(EntityMapper[PropertyImage, PropertyImageInput, PropertyImageResult]):
    entity_type = PropertyImage
    input_type = PropertyImageInput
    result_type = PropertyImageResult
    writable_fields = ("id_property", "file", "enabled")


class PropertyTraceMapper(EntityMapper[PropertyTrace, PropertyTraceInput, PropertyTraceResult]):
    entity_type = PropertyTrace
    input_type = PropertyTraceInput
    result_type = PropertyTraceResult
    writable_fields = ("id_property", "name", "date_sale", "value", "tax")
    date_fields = frozenset({"date_sale"})


class UserMapper(EntityMapper[User, UserInput, UserResult]):
    """Password is write-only: never copied to results or back into inputs."""

    entity_type = User
    input_type = UserInput
    result_type = UserResult
    writable_fields = ("name", "email", "password", "role")

    def merge(self, data: UserInput, entity: User) -> User:
        """Full replace keeping the stored hash when no new password is given."""
        merged = self.to_entity(data, entity.id)
        if not data.password:
            merged.password = entity.password
        return merged

    def to_input(self, entity: User) -> UserInput:
        return UserInput(name=entity.name, email=entity.email, password=None, role=entity.role)
