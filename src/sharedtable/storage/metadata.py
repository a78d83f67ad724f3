"""SQLAlchemy metadata for a resolved schema model.

Builds one ``Table`` per physical table with the resolved column, key,
foreign key and index names, so the host can hand it to
``MetaData.create_all`` or Alembic autogenerate. Objects that share a name
(compatible keys, shared columns, merged indexes) are emitted once.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)

from sharedtable.core.types import FieldType, OnDeleteActionType
from sharedtable.schema.model import EntityType, Property, SchemaModel

logger = logging.getLogger(__name__)


# Mapping from property store types to SQLAlchemy column types
FIELD_TYPE_MAP = {
    FieldType.STRING: lambda: String(255),
    FieldType.TEXT: lambda: Text(),
    FieldType.INT: lambda: Integer(),
    FieldType.FLOAT: lambda: Float(),
    FieldType.BOOL: lambda: Boolean(),
    FieldType.DATETIME: lambda: DateTime(timezone=True),
    FieldType.UUID: lambda: String(36),
    FieldType.JSON: lambda: JSON(),
}


def _map_on_delete(action: OnDeleteActionType) -> str | None:
    """Map OnDeleteActionType to SQL ON DELETE clause."""
    mapping = {
        OnDeleteActionType.CASCADE: "CASCADE",
        OnDeleteActionType.SET_NULL: "SET NULL",
        OnDeleteActionType.RESTRICT: "RESTRICT",
        OnDeleteActionType.NO_ACTION: None,
    }
    return mapping.get(action)


def _full_table_name(entity_type: EntityType) -> str:
    table_name, schema = entity_type.table_key()  # type: ignore[misc]
    return f"{schema}.{table_name}" if schema else table_name


def _table_properties(entity_type: EntityType) -> list[Property]:
    """Columns an entity type contributes to its table.

    Declared properties, plus the primary key when it is inherited from a
    base type mapped to another table.
    """
    properties = list(entity_type.properties)
    primary_key = entity_type.find_primary_key()
    if primary_key is not None:
        for prop in primary_key.properties:
            inherited = prop.declaring_type.table_key() != entity_type.table_key()
            if inherited and prop not in properties:
                properties.insert(0, prop)
    return properties


def build_metadata(model: SchemaModel, metadata: MetaData | None = None) -> MetaData:
    """Create SQLAlchemy tables for every mapped table of the model.

    Args:
        model: A schema model, normally already resolved
        metadata: MetaData to add tables to (a new one by default)

    Returns:
        The MetaData holding the tables
    """
    metadata = metadata if metadata is not None else MetaData()

    for (table_name, schema), entity_types in model.get_tables().items():
        columns: dict[str, Column[Any]] = {}
        constraints: list[Any] = []
        constraint_names: set[str] = set()
        index_specs: dict[str, tuple[list[str], bool]] = {}

        for entity_type in entity_types:
            for prop in _table_properties(entity_type):
                column_name = prop.column_name.value
                if column_name in columns:
                    continue
                columns[column_name] = Column(
                    column_name,
                    FIELD_TYPE_MAP[prop.store_type](),
                    nullable=prop.nullable and not prop.is_primary_key,
                )

        primary_key_added = False
        for entity_type in entity_types:
            for key in entity_type.keys:
                if key.name.value in constraint_names:
                    continue
                if key.is_primary:
                    if primary_key_added:
                        continue
                    primary_key_added = True
                    constraints.append(
                        PrimaryKeyConstraint(*key.column_names(), name=key.name.value)
                    )
                else:
                    constraints.append(UniqueConstraint(*key.column_names(), name=key.name.value))
                constraint_names.add(key.name.value)

            if not primary_key_added:
                primary_key = entity_type.find_primary_key()
                if primary_key is not None:
                    primary_key_added = True
                    constraint_names.add(primary_key.name.value)
                    constraints.append(
                        PrimaryKeyConstraint(
                            *primary_key.column_names(), name=primary_key.name.value
                        )
                    )

            for foreign_key in entity_type.foreign_keys:
                principal = foreign_key.principal_type
                if principal.table_key() is None or foreign_key.is_linking(table_name, schema):
                    continue
                if foreign_key.name.value in constraint_names:
                    continue
                principal_table = _full_table_name(principal)
                principal_columns = foreign_key.principal_key.column_names()
                constraints.append(
                    ForeignKeyConstraint(
                        list(foreign_key.column_names()),
                        [f"{principal_table}.{c}" for c in principal_columns],
                        name=foreign_key.name.value,
                        ondelete=_map_on_delete(foreign_key.on_delete),
                    )
                )
                constraint_names.add(foreign_key.name.value)

            for index in entity_type.indexes:
                index_specs.setdefault(
                    index.name.value, (list(index.column_names()), index.is_unique)
                )

        table = Table(table_name, metadata, *columns.values(), *constraints, schema=schema)
        for index_name, (index_columns, unique) in index_specs.items():
            Index(index_name, *[table.c[c] for c in index_columns], unique=unique)
        logger.debug(f"Built table {table.fullname} with {len(columns)} column(s)")

    return metadata
