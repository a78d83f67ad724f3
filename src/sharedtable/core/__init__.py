"""Core components for sharedtable."""

from sharedtable.core.config import get_max_identifier_length
from sharedtable.core.types import (
    EntityTypeSpec,
    FieldType,
    ForeignKeySpec,
    IndexSpec,
    KeySpec,
    ModelSpec,
    NameChange,
    NameCollision,
    NameKind,
    NameSource,
    OnDeleteActionType,
    PropertySpec,
    ResolutionReport,
    TableInfo,
)

__all__ = [
    "get_max_identifier_length",
    "NameSource",
    "NameKind",
    "FieldType",
    "OnDeleteActionType",
    "PropertySpec",
    "KeySpec",
    "ForeignKeySpec",
    "IndexSpec",
    "EntityTypeSpec",
    "ModelSpec",
    "NameChange",
    "NameCollision",
    "TableInfo",
    "ResolutionReport",
]
