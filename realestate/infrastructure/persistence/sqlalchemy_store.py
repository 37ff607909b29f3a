"""SQLAlchemy async Core implementation of IDocumentStore.

One store per table. Reads open a plain session; writes run inside
session.begin() so they commit on success and roll back on error. Driver
errors are wrapped in StoreException for the services to report.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, Table, and_, delete, insert, select, true, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from realestate.application.interfaces.repositories import (
    Condition,
    ConditionOp,
    DeleteResult,
    InsertResult,
    UpdateResult,
)
from realestate.domain.exceptions import StoreException

RecordT = TypeVar("RecordT")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def where_clause(table: Table, conditions: Sequence[Condition]) -> ColumnElement[bool]:
    """Build an AND of column comparisons for the given conditions.

    Raises:
        StoreException: If a condition names a column the table does not have.
    """
    clauses: list[ColumnElement[bool]] = []
    for condition in conditions:
        if condition.field not in table.c:
            raise StoreException("find", f"unknown column {condition.field!r} on {table.name}")
        column = table.c[condition.field]
        match condition.op:
            case ConditionOp.EQ:
                clauses.append(column.is_(None) if condition.value is None else column == condition.value)
            case ConditionOp.CONTAINS:
                pattern = f"%{_escape_like(str(condition.value))}%"
                clauses.append(column.ilike(pattern, escape="\\"))
            case ConditionOp.GTE:
                clauses.append(column >= condition.value)
            case ConditionOp.LTE:
                clauses.append(column <= condition.value)
            case _:
                raise ValueError(f"Unsupported condition operator: {condition.op}")
    return and_(true(), *clauses)


class SqlAlchemyDocumentStore(Generic[RecordT]):
    """IDocumentStore over one Core table; rows map to record_type by column name."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        table: Table,
        record_type: type[RecordT],
    ) -> None:
        self.session_factory = session_factory
        self.table = table
        self.record_type = record_type

    def _to_record(self, row: Any) -> RecordT:
        return self.record_type(**dict(row._mapping))

    def _to_row(self, record: RecordT) -> dict[str, Any]:
        return dataclasses.asdict(record)  # type: ignore[call-overload]

    async def find(
        self,
        conditions: Sequence[Condition] = (),
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[RecordT]:
        stmt = (
            select(self.table)
            .where(where_clause(self.table, conditions))
            .order_by(self.table.c.id)
            .offset(skip)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return [self._to_record(row) for row in result]
        except SQLAlchemyError as e:
            raise StoreException("find", str(e)) from e

    async def find_one(self, conditions: Sequence[Condition]) -> RecordT | None:
        rows = await self.find(conditions, limit=1)
        return rows[0] if rows else None

    async def insert_one(self, record: RecordT) -> InsertResult:
        values = self._to_row(record)
        try:
            async with self.session_factory() as session, session.begin():
                await session.execute(insert(self.table).values(**values))
        except SQLAlchemyError as e:
            raise StoreException("insert_one", str(e)) from e
        return InsertResult(acknowledged=True, inserted_id=values["id"])

    async def replace_one(self, record_id: str, record: RecordT) -> UpdateResult:
        values = self._to_row(record)
        values.pop("id", None)
        return await self._update("replace_one", record_id, values)

    async def update_one(self, record_id: str, fields: Mapping[str, Any]) -> UpdateResult:
        values = dict(fields)
        if values.get("id", record_id) != record_id:
            raise StoreException("update_one", "id cannot be changed")
        values.pop("id", None)
        unknown = [name for name in values if name not in self.table.c]
        if unknown:
            raise StoreException("update_one", f"unknown column(s) on {self.table.name}: {', '.join(unknown)}")
        return await self._update("update_one", record_id, values)

    async def _update(self, operation: str, record_id: str, values: dict[str, Any]) -> UpdateResult:
        if not values:
            found = await self.find_one([Condition("id", ConditionOp.EQ, record_id)])
            return UpdateResult(acknowledged=True, matched_count=int(found is not None))
        stmt = update(self.table).where(self.table.c.id == record_id).values(**values)
        try:
            async with self.session_factory() as session, session.begin():
                result = await session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreException(operation, str(e)) from e
        # rowcount is the number of matched rows for UPDATE
        matched = result.rowcount or 0
        return UpdateResult(acknowledged=True, matched_count=matched, modified_count=matched)

    async def delete_one(self, record_id: str) -> DeleteResult:
        return await self._delete("delete_one", self.table.c.id == record_id)

    async def delete_many(self, conditions: Sequence[Condition]) -> DeleteResult:
        return await self._delete("delete_many", where_clause(self.table, conditions))

    async def _delete(self, operation: str, criteria: ColumnElement[bool]) -> DeleteResult:
        try:
            async with self.session_factory() as session, session.begin():
                result = await session.execute(delete(self.table).where(criteria))
        except SQLAlchemyError as e:
            raise StoreException(operation, str(e)) from e
        return DeleteResult(acknowledged=True, deleted_count=result.rowcount or 0)
