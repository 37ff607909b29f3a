"""SQLAlchemy Core tables, one per collection.

Table names come from Settings (COLLECTION_*), so tables are built per
configuration instead of being declared at import time. Columns mirror the
entity dataclass fields one to one. References between
collections are plain indexed columns; the services keep them consistent.
"""

from dataclasses import dataclass

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
)

from realestate.core.config import Settings
from realestate.domain.exceptions import ConfigurationException

# CUID2 ids are 24-32 chars
_ID = String(32)


@dataclass(frozen=True)
class EntityTables:
    """Metadata plus the five entity tables built for one configuration."""

    metadata: MetaData
    owner: Table
    property: Table
    property_image: Table
    property_trace: Table
    user: Table


def _require(name: str, setting: str) -> str:
    if not name or not name.strip():
        raise ConfigurationException(setting)
    return name


def build_tables(settings: Settings, metadata: MetaData | None = None) -> EntityTables:
    """Build Core tables named after the configured collections.

    Raises:
        ConfigurationException: If any collection name is empty.
    """
    metadata = metadata or MetaData()
    owner_name = _require(settings.collection_owner, "COLLECTION_OWNER")
    property_name = _require(settings.collection_property, "COLLECTION_PROPERTY")

    owner = Table(
        owner_name,
        metadata,
        Column("id", _ID, primary_key=True),
        Column("name", String(200), nullable=False),
        Column("address", String(500), nullable=True),
        Column("photo", String, nullable=True),
        Column("birthday", Date, nullable=True),
    )
    prop = Table(
        property_name,
        metadata,
        Column("id", _ID, primary_key=True),
        Column("name", String(200), nullable=False),
        Column("address", String(500), nullable=False),
        Column("price", Integer, nullable=False),
        Column("year", Integer, nullable=False),
        Column("code_internal", Integer, nullable=False),
        Column("id_owner", _ID, nullable=True, index=True),
    )
    image = Table(
        _require(settings.collection_property_image, "COLLECTION_PROPERTY_IMAGE"),
        metadata,
        Column("id", _ID, primary_key=True),
        Column("id_property", _ID, nullable=False, index=True),
        Column("file", String, nullable=False),
        Column("enabled", Boolean, nullable=False, default=True),
    )
    trace = Table(
        _require(settings.collection_property_trace, "COLLECTION_PROPERTY_TRACE"),
        metadata,
        Column("id", _ID, primary_key=True),
        Column("id_property", _ID, nullable=False, index=True),
        Column("name", String(200), nullable=False),
        Column("date_sale", Date, nullable=True),
        Column("value", Float, nullable=True),
        Column("tax", Float, nullable=True),
    )
    user_name = _require(settings.collection_user, "COLLECTION_USER")
    user = Table(
        user_name,
        metadata,
        Column("id", _ID, primary_key=True),
        Column("name", String(200), nullable=False),
        Column("email", String(320), nullable=False),
        Column("role", String(20), nullable=False, default="user"),
        Column("password", String(255), nullable=True),
        Index(f"uq_{user_name}_email", "email", unique=True),
    )
    return EntityTables(
        metadata=metadata,
        owner=owner,
        property=prop,
        property_image=image,
        property_trace=trace,
        user=user,
    )
