"""Record validators backed by JSON Schema (jsonschema, Draft 2020-12).

Each write input dataclass is converted to a JSON-like dict (dates as ISO
strings) and checked against its entity schema. Every failure is reported
as "<field>: <message>"; nested inputs (e.g. a property's owner) are not
part of the parent schema and are validated by their own validators.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from realestate.application.dtos.validation import ValidationResult
from realestate.domain.enums import UserRole

_NON_BLANK = {"type": "string", "minLength": 1, "maxLength": 200, "pattern": r"\S"}

OWNER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": _NON_BLANK,
        "address": {"type": ["string", "null"], "maxLength": 500},
        "photo": {"type": ["string", "null"]},
        "birthday": {"type": ["string", "null"], "format": "date"},
    },
}

PROPERTY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["name", "address", "price", "year", "code_internal"],
    "properties": {
        "name": _NON_BLANK,
        "address": {"type": "string", "minLength": 1, "maxLength": 500, "pattern": r"\S"},
        "price": {"type": "integer", "minimum": 0},
        "year": {"type": "integer", "minimum": 1800, "maximum": 2100},
        "code_internal": {"type": "integer", "minimum": 0},
        "id_owner": {"type": ["string", "null"], "minLength": 1},
    },
}

PROPERTY_IMAGE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id_property", "file", "enabled"],
    "properties": {
        "id_property": {"type": "string", "minLength": 1},
        "file": {"type": "string", "minLength": 1, "pattern": r"\S"},
        "enabled": {"type": "boolean"},
    },
}

PROPERTY_TRACE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id_property", "name"],
    "properties": {
        "id_property": {"type": "string", "minLength": 1},
        "name": _NON_BLANK,
        "date_sale": {"type": ["string", "null"], "format": "date"},
        "value": {"type": ["number", "null"], "minimum": 0},
        "tax": {"type": ["number", "null"], "minimum": 0},
    },
}

USER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["name", "email", "role"],
    "properties": {
        "name": _NON_BLANK,
        "email": {"type": "string", "maxLength": 320, "format": "email", "pattern": r"^[^@\s]+@[^@\s]+\.[^@\s]+$"},
        "password": {"type": ["string", "null"], "minLength": 6, "maxLength": 128},
        "role": {"enum": [role.value for role in UserRole]},
    },
}


def _json_value(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_instance(value)
    if isinstance(value, (list, tuple)):
        return [_json_value(v) for v in value]
    return value


def to_instance(record: Any) -> dict[str, Any]:
    """Convert a dataclass record into a JSON-like dict for schema validation."""
    return {f.name: _json_value(getattr(record, f.name)) for f in dataclasses.fields(record)}


def _format_error(error: ValidationError) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    if not path and error.validator == "required":
        # message is "'<field>' is a required property"
        path = str(error.message).split("'")[1] if "'" in error.message else "record"
        return f"{path}: is required"
    return f"{path or 'record'}: {error.message}"


class SchemaRecordValidator:
    """IRecordValidator that checks dataclass records against one JSON Schema."""

    def __init__(self, schema: dict[str, Any], name: str = "record") -> None:
        """Compile the schema.

        Raises:
            jsonschema.exceptions.SchemaError: If schema itself is not a valid Draft 2020-12 schema.
        """
        Draft202012Validator.check_schema(schema)
        self.name = name
        self._validator = Draft202012Validator(
            schema, format_checker=Draft202012Validator.FORMAT_CHECKER
        )

    async def validate(self, record: Any) -> ValidationResult:
        instance = to_instance(record)
        errors = sorted(
            self._validator.iter_errors(instance),
            key=lambda e: ".".join(str(p) for p in e.absolute_path),
        )
        return ValidationResult(errors=[_format_error(e) for e in errors])


def owner_validator() -> SchemaRecordValidator:
    return SchemaRecordValidator(OWNER_SCHEMA, "owner")


def property_validator() -> SchemaRecordValidator:
    return SchemaRecordValidator(PROPERTY_SCHEMA, "property")


def property_image_validator() -> SchemaRecordValidator:
    return SchemaRecordValidator(PROPERTY_IMAGE_SCHEMA, "property_image")


def property_trace_validator() -> SchemaRecordValidator:
    return SchemaRecordValidator(PROPERTY_TRACE_SCHEMA, "property_trace")


def user_validator() -> SchemaRecordValidator:
    return SchemaRecordValidator(USER_SCHEMA, "user")

