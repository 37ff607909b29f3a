"""Persistence store interface (port) for the application layer.

The store works on domain entity records keyed by their string ``id``.
Queries are expressed as a flat AND of Conditions so that in-memory and
SQL adapters can evaluate them the same way.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol, TypeVar

RecordT = TypeVar("RecordT")


class ConditionOp(StrEnum):
    """Supported comparison operators."""

    EQ = "eq"
    CONTAINS = "contains"  # case-insensitive substring
    GTE = "gte"
    LTE = "lte"


@dataclass(frozen=True)
class Condition:
    """field <op> value."""

    field: str
    op: ConditionOp
    value: Any


def eq(field: str, value: Any) -> Condition:
    return Condition(field, ConditionOp.EQ, value)


def contains(field: str, value: str) -> Condition:
    return Condition(field, ConditionOp.CONTAINS, value)


def gte(field: str, value: Any) -> Condition:
    return Condition(field, ConditionOp.GTE, value)


def lte(field: str, value: Any) -> Condition:
    return Condition(field, ConditionOp.LTE, value)


@dataclass(frozen=True)
class InsertResult:
    acknowledged: bool
    inserted_id: str | None = None


@dataclass(frozen=True)
class UpdateResult:
    """Result of replace_one/update_one. matched_count is 0 when the id was absent."""

    acknowledged: bool
    matched_count: int = 0
    modified_count: int = 0


@dataclass(frozen=True)
class DeleteResult:
    acknowledged: bool
    deleted_count: int = 0


class IDocumentStore(Protocol[RecordT]):
    """Protocol for an entity collection (one per entity type)."""

    async def find(
        self,
        conditions: Sequence[Condition] = (),
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[RecordT]:
        """Return records matching all conditions, ordered by id, paginated."""
        ...

    async def find_one(self, conditions: Sequence[Condition]) -> RecordT | None:
        """Return the first matching record or None."""
        ...

    async def insert_one(self, record: RecordT) -> InsertResult:
        """Insert a new record."""
        ...

    async def replace_one(self, record_id: str, record: RecordT) -> UpdateResult:
        """Replace the whole record with the given id."""
        ...

    async def update_one(self, record_id: str, fields: Mapping[str, Any]) -> UpdateResult:
        """Set the given fields on the record with the given id."""
        ...

    async def delete_one(self, record_id: str) -> DeleteResult:
        """Delete the record with the given id."""
        ...

    async def delete_many(self, conditions: Sequence[Condition]) -> DeleteResult:
        """Delete every record matching all conditions."""
        ...
