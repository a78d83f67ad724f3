"""sharedtable - Name resolution for entity types sharing a database table.

When several entity types map to one table (inheritance mapping or table
splitting) their columns, keys, foreign keys and indexes must coexist in a
single namespace. sharedtable separates entity types that only ended up in
the same table because their names were truncated, then renames colliding
convention-derived names while keeping intentional sharing intact.

Example:
    from sharedtable import load_model, resolve

    model = load_model({
        "entity_types": [
            {
                "name": "Zoo.Animal",
                "table": "Animals",
                "properties": [{"name": "Id", "type": "int"}],
                "keys": [{"properties": ["Id"], "primary": True}],
            },
            {"name": "Zoo.Dog", "base": "Zoo.Animal", "properties": [{"name": "Color"}]},
            {"name": "Zoo.Cat", "base": "Zoo.Animal", "properties": [{"name": "Color"}]},
        ]
    })
    resolve(model, max_identifier_length=63)
    # Dog keeps "Color", Cat's column becomes "Cat_Color"

    # Materialise as SQLAlchemy tables
    from sharedtable import build_metadata
    metadata = build_metadata(model)
"""

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
from sharedtable.exceptions import (
    ConfigurationError,
    EntityTypeNotFoundError,
    InvalidIdentifierLengthError,
    ModelLoadError,
    PinnedNameError,
    SharedTableError,
    UnresolvedNameCollisionError,
)
from sharedtable.naming import SharedTableConvention, resolve, truncate, uniquify
from sharedtable.schema import (
    EntityType,
    ForeignKey,
    Index,
    Key,
    Name,
    Property,
    SchemaModel,
    dump_model,
    load_model,
)
from sharedtable.storage import build_metadata

__version__ = "0.1.0"

__all__ = [
    # Main entry points
    "resolve",
    "SharedTableConvention",
    "load_model",
    "dump_model",
    "build_metadata",
    "get_max_identifier_length",
    "truncate",
    "uniquify",
    # Schema model
    "SchemaModel",
    "EntityType",
    "Property",
    "Key",
    "ForeignKey",
    "Index",
    "Name",
    # Types
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
    # Exceptions
    "SharedTableError",
    "InvalidIdentifierLengthError",
    "PinnedNameError",
    "EntityTypeNotFoundError",
    "ModelLoadError",
    "UnresolvedNameCollisionError",
    "ConfigurationError",
]
