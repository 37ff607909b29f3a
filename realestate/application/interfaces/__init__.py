"""Ports: store, validator, hasher and policy protocols (DIP)."""

from realestate.application.interfaces.repositories import (
    Condition,
    ConditionOp,
    DeleteResult,
    IDocumentStore,
    InsertResult,
    UpdateResult,
    contains,
    eq,
    gte,
    lte,
)
from realestate.application.interfaces.services import (
    IPasswordHasher,
    IRecordValidator,
    IRoleChangePolicy,
)

__all__ = [
    "Condition",
    "ConditionOp",
    "DeleteResult",
    "IDocumentStore",
    "IPasswordHasher",
    "IRecordValidator",
    "IRoleChangePolicy",
    "InsertResult",
    "UpdateResult",
    "contains",
    "eq",
    "gte",
    "lte",
]
