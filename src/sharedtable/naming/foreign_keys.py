"""Foreign key constraint name resolution."""

from __future__ import annotations

import logging

from sharedtable.core.types import NameKind
from sharedtable.naming.base import NamingContext, TableNamer, format_table
from sharedtable.schema.model import EntityType, ForeignKey, SchemaModel

logger = logging.getLogger(__name__)


class ForeignKeyNamer(TableNamer[ForeignKey]):
    """Makes foreign key constraint names unique within a table.

    Linking foreign keys, whose principal lives in the same table, join two
    entity types on one row and have no physical constraint, so they are
    skipped.
    """

    kind = NameKind.FOREIGN_KEY

    def __init__(self, context: NamingContext, model: SchemaModel) -> None:
        super().__init__(context)
        self.model = model

    def members(self, entity_type: EntityType) -> list[ForeignKey]:
        return entity_type.foreign_keys

    def process_entity_type(
        self,
        entity_type: EntityType,
        used: dict[str, ForeignKey],
        table_name: str,
        schema: str | None,
    ) -> None:
        table = format_table(table_name, schema)
        for foreign_key in entity_type.foreign_keys:
            principal = foreign_key.principal_type
            if principal not in self.model or principal.table_key() is None:
                logger.debug(
                    f"Skipping {foreign_key!r}: principal '{principal.name}' is not mapped"
                )
                continue

            if principal.table_key() == (table_name, schema):
                continue

            foreign_key_name = foreign_key.name.value
            other = used.get(foreign_key_name)
            if other is None:
                used[foreign_key_name] = foreign_key
                continue

            if self.are_compatible(foreign_key, other):
                continue

            self.resolve_collision(foreign_key, other, foreign_key_name, used, table)

    def are_compatible(self, foreign_key: ForeignKey, duplicate_foreign_key: ForeignKey) -> bool:
        """Whether two foreign keys mapped to the same constraint name can share it.

        Both must represent the same relationship (navigations, where present,
        identify the same members on both ends) and map to the same columns,
        principal table, principal key columns and delete behaviour.
        """
        return (
            foreign_key.dependent_to_principal == duplicate_foreign_key.dependent_to_principal
            and foreign_key.principal_to_dependent == duplicate_foreign_key.principal_to_dependent
            and foreign_key.column_names() == duplicate_foreign_key.column_names()
            and foreign_key.principal_type.table_key()
            == duplicate_foreign_key.principal_type.table_key()
            and foreign_key.principal_key.column_names()
            == duplicate_foreign_key.principal_key.column_names()
            and foreign_key.on_delete == duplicate_foreign_key.on_delete
        )
