"""SQLAlchemy adapter: tables from settings, WHERE compilation, error wrapping."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from fakes import make_settings
from realestate.application.interfaces.repositories import contains, eq, gte
from realestate.domain.entities import Owner
from realestate.domain.exceptions import ConfigurationException, StoreException
from realestate.infrastructure.persistence import SqlAlchemyDocumentStore, build_tables, create_engine
from realestate.infrastructure.persistence.sqlalchemy_store import where_clause


def _session_factory(execute: AsyncMock) -> MagicMock:
    session = MagicMock()
    session.execute = execute
    session.__aenter__.return_value = session
    session.__aexit__.return_value = False
    session.begin.return_value.__aexit__.return_value = False
    return MagicMock(return_value=session)


def test_tables_follow_configured_names() -> None:
    tables = build_tables(make_settings(collection_owner="duenos", collection_user="cuentas"))
    assert tables.owner.name == "duenos"
    assert set(tables.metadata.tables) == {
        "duenos",
        "properties",
        "property_images",
        "property_traces",
        "cuentas",
    }
    assert any(index.unique and index.name == "uq_cuentas_email" for index in tables.user.indexes)
    assert not tables.property.foreign_keys


def test_empty_table_name_is_configuration_error() -> None:
    with pytest.raises(ConfigurationException, match="COLLECTION_PROPERTY_TRACE"):
        build_tables(make_settings(collection_property_trace=" "))


def test_engine_requires_database_url() -> None:
    with pytest.raises(ConfigurationException, match="DATABASE_URL"):
        create_engine(make_settings(database_url=""))


def test_where_clause_compiles_conditions() -> None:
    table = build_tables(make_settings()).owner
    compiled = where_clause(
        table, [contains("name", "50%_off"), eq("address", None), gte("birthday", "2000-01-01")]
    ).compile(dialect=postgresql.dialect())
    sql = str(compiled)
    assert "ILIKE" in sql
    assert "owners.address IS NULL" in sql
    assert "owners.birthday >=" in sql
    assert "%50\\%\\_off%" in compiled.params.values()


def test_where_clause_unknown_column() -> None:
    table = build_tables(make_settings()).owner
    with pytest.raises(StoreException):
        where_clause(table, [eq("colour", "red")])


async def test_find_maps_rows_to_records() -> None:
    row = MagicMock()
    row._mapping = {"id": "o1", "name": "Ana", "address": None, "photo": None, "birthday": None}
    factory = _session_factory(AsyncMock(return_value=[row]))
    store = SqlAlchemyDocumentStore(factory, build_tables(make_settings()).owner, Owner)
    assert await store.find([eq("name", "Ana")], limit=6) == [Owner(id="o1", name="Ana")]


async def test_update_reports_rowcount() -> None:
    result = MagicMock(rowcount=1)
    factory = _session_factory(AsyncMock(return_value=result))
    store = SqlAlchemyDocumentStore(factory, build_tables(make_settings()).owner, Owner)
    updated = await store.update_one("o1", {"name": "Ana B"})
    assert (updated.acknowledged, updated.matched_count) == (True, 1)


async def test_driver_errors_become_store_exceptions() -> None:
    error = OperationalError("INSERT", {}, Exception("connection refused"))
    factory = _session_factory(AsyncMock(side_effect=error))
    store = SqlAlchemyDocumentStore(factory, build_tables(make_settings()).owner, Owner)
    with pytest.raises(StoreException) as exc_info:
        await store.insert_one(Owner(id="o1", name="Ana"))
    assert exc_info.value.details["operation"] == "insert_one"


async def test_update_rejects_unknown_columns() -> None:
    factory = _session_factory(AsyncMock())
    store = SqlAlchemyDocumentStore(factory, build_tables(make_settings()).owner, Owner)
    with pytest.raises(StoreException):
        await store.update_one("o1", {"colour": "red"})
    factory.assert_not_called()
