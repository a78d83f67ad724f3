"""Build schema models from JSON documents and dump them back.

Names missing from the document get the usual convention defaults, e.g.
``PK_Animals``, ``FK_Orders_Customers_CustomerId`` or ``IX_Orders_CustomerId``.
These are marked as derived and follow later table and column renames.
Foreign keys get a convention index over their properties unless an index
with the same properties is already declared.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from sharedtable.core.types import (
    EntityTypeSpec,
    FieldType,
    ForeignKeySpec,
    IndexSpec,
    KeySpec,
    ModelSpec,
    NameSource,
    OnDeleteActionType,
    PropertySpec,
)
from sharedtable.exceptions import ModelLoadError
from sharedtable.schema.model import EntityType, Name, Property, SchemaModel

logger = logging.getLogger(__name__)


def _name(value: str | None, explicit: bool, derived: bool) -> Name | None:
    if value is None:
        return None
    if explicit:
        return Name(value, NameSource.EXPLICIT)
    return Name(value, derived=derived)


def _resolve_properties(entity_type: EntityType, names: list[str], what: str) -> list[Property]:
    properties = []
    for name in names:
        prop = entity_type.find_property(name)
        if prop is None:
            available = [p.name for p in entity_type.get_properties()]
            raise ModelLoadError(
                f"{what} on '{entity_type.name}' references unknown property '{name}'. "
                f"Available properties: {', '.join(available) or 'none'}",
                {"entity_name": entity_type.name, "property": name, "available": available},
            )
        properties.append(prop)
    return properties


def load_model(document: ModelSpec | dict[str, Any]) -> SchemaModel:
    """Build a schema model from a model document.

    Args:
        document: A ModelSpec or its dict form (e.g. parsed JSON)

    Returns:
        The populated SchemaModel

    Raises:
        ModelLoadError: If the document is invalid or references unknown
            entity types (as base type) or properties
    """
    if isinstance(document, ModelSpec):
        spec = document
    else:
        try:
            spec = ModelSpec.model_validate(document)
        except ValidationError as e:
            raise ModelLoadError(f"Invalid model document: {e}", {"errors": e.errors()}) from e

    model = SchemaModel()
    by_name: dict[str, EntityType] = {}
    for type_spec in spec.entity_types:
        if type_spec.name in by_name:
            raise ModelLoadError(
                f"Entity type '{type_spec.name}' is declared more than once.",
                {"entity_name": type_spec.name},
            )
        by_name[type_spec.name] = model.add_entity_type(
            type_spec.name,
            table_name=type_spec.table,
            schema=type_spec.table_schema,
            table_explicit=type_spec.table_explicit,
        )

    for type_spec in spec.entity_types:
        if type_spec.base is None:
            continue
        base_type = by_name.get(type_spec.base)
        if base_type is None:
            raise ModelLoadError(
                f"Entity type '{type_spec.name}' derives from unknown type '{type_spec.base}'.",
                {"entity_name": type_spec.name, "base": type_spec.base},
            )
        by_name[type_spec.name].base_type = base_type

    # Derived types without a table of their own share their base type's table
    for entity_type in model:
        if entity_type.table_name is None:
            for base_type in entity_type.base_types():
                if base_type.table_name is not None:
                    entity_type.table_name = Name(base_type.table_name.value)
                    entity_type.schema = base_type.schema
                    break

    for type_spec in spec.entity_types:
        entity_type = by_name[type_spec.name]
        for prop_spec in type_spec.properties:
            entity_type.add_property(
                prop_spec.name,
                prop_spec.column_name,
                column_name_explicit=prop_spec.column_name_explicit,
                store_type=FieldType(prop_spec.type),
                nullable=prop_spec.nullable,
                concurrency_token=prop_spec.concurrency_token,
                member=prop_spec.member,
            )

    for type_spec in spec.entity_types:
        entity_type = by_name[type_spec.name]
        for key_spec in type_spec.keys:
            properties = _resolve_properties(entity_type, key_spec.properties, "Key")
            entity_type.add_key(
                properties,
                _name(key_spec.name, key_spec.name_explicit, key_spec.name_derived),
                primary=key_spec.primary,
            )

    for type_spec in spec.entity_types:
        entity_type = by_name[type_spec.name]
        for fk_spec in type_spec.foreign_keys:
            _add_foreign_key(entity_type, fk_spec, by_name)

    for type_spec in spec.entity_types:
        entity_type = by_name[type_spec.name]
        for index_spec in type_spec.indexes:
            properties = _resolve_properties(entity_type, index_spec.properties, "Index")
            entity_type.add_index(
                properties,
                _name(index_spec.name, index_spec.name_explicit, index_spec.name_derived),
                unique=index_spec.unique,
                source=NameSource(index_spec.origin),
            )

    for entity_type in model:
        for foreign_key in entity_type.foreign_keys:
            primary_key = entity_type.find_primary_key()
            if primary_key is not None and primary_key.properties == foreign_key.properties:
                continue
            if any(index.properties == foreign_key.properties for index in entity_type.indexes):
                continue
            entity_type.add_index(
                foreign_key.properties,
                unique=foreign_key.is_unique,
                source=NameSource.CONVENTION,
            )

    logger.debug(f"Loaded model with {len(model)} entity type(s)")
    return model


def _add_foreign_key(
    entity_type: EntityType, fk_spec: ForeignKeySpec, by_name: dict[str, EntityType]
) -> None:
    properties = _resolve_properties(entity_type, fk_spec.properties, "Foreign key")
    principal = by_name.get(fk_spec.principal)
    if principal is None:
        logger.warning(
            f"Skipping foreign key on '{entity_type.name}': "
            f"principal '{fk_spec.principal}' is not part of the model"
        )
        return

    if fk_spec.principal_key is not None:
        principal_properties = _resolve_properties(
            principal, fk_spec.principal_key, "Principal key"
        )
        keys = [k for t in (principal, *principal.base_types()) for k in t.keys]
        principal_key = next((k for k in keys if k.properties == principal_properties), None)
        if principal_key is None:
            raise ModelLoadError(
                f"'{principal.name}' has no key over ({', '.join(fk_spec.principal_key)}).",
                {"entity_name": principal.name, "principal_key": fk_spec.principal_key},
            )
    else:
        principal_key = principal.find_primary_key()
        if principal_key is None:
            logger.warning(
                f"Skipping foreign key on '{entity_type.name}': "
                f"principal '{principal.name}' has no primary key"
            )
            return

    entity_type.add_foreign_key(
        properties,
        principal,
        _name(fk_spec.name, fk_spec.name_explicit, fk_spec.name_derived),
        principal_key=principal_key,
        dependent_to_principal=fk_spec.dependent_to_principal,
        principal_to_dependent=fk_spec.principal_to_dependent,
        on_delete=OnDeleteActionType(fk_spec.on_delete),
        unique=fk_spec.unique,
    )


def dump_model(model: SchemaModel) -> ModelSpec:
    """Turn a schema model back into a document; every name is written out.

    Derived names keep their ``name_derived`` flag so a reloaded model still
    recomputes them.
    """
    entity_types = []
    for entity_type in model:
        entity_types.append(
            EntityTypeSpec(
                name=entity_type.name,
                base=entity_type.base_type.name if entity_type.base_type else None,
                table=entity_type.table_name.value if entity_type.table_name else None,
                table_schema=entity_type.schema,
                table_explicit=entity_type.is_table_name_explicit,
                properties=[
                    PropertySpec(
                        name=p.name,
                        column_name=p.column_name.value,
                        column_name_explicit=p.column_name.is_explicit,
                        type=p.store_type,
                        nullable=p.nullable,
                        concurrency_token=p.is_concurrency_token,
                        member=p.identifying_member,
                    )
                    for p in entity_type.properties
                ],
                keys=[
                    KeySpec(
                        properties=[p.name for p in k.properties],
                        primary=k.is_primary,
                        name=k.name.value,
                        name_explicit=k.name.is_explicit,
                        name_derived=k.name.derived,
                    )
                    for k in entity_type.keys
                ],
                foreign_keys=[
                    ForeignKeySpec(
                        properties=[p.name for p in fk.properties],
                        principal=fk.principal_type.name,
                        principal_key=[p.name for p in fk.principal_key.properties],
                        name=fk.name.value,
                        name_explicit=fk.name.is_explicit,
                        name_derived=fk.name.derived,
                        dependent_to_principal=fk.dependent_to_principal,
                        principal_to_dependent=fk.principal_to_dependent,
                        on_delete=fk.on_delete,
                        unique=fk.is_unique,
                    )
                    for fk in entity_type.foreign_keys
                ],
                indexes=[
                    IndexSpec(
                        properties=[p.name for p in ix.properties],
                        unique=ix.is_unique,
                        name=ix.name.value,
                        name_explicit=ix.name.is_explicit,
                        name_derived=ix.name.derived,
                        origin=ix.source,
                    )
                    for ix in entity_type.indexes
                ],
            )
        )
    return ModelSpec(entity_types=entity_types)
