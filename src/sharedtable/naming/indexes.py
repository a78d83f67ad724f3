"""Index name resolution, including indexes backing equivalent foreign keys."""

from __future__ import annotations

from sharedtable.core.types import NameKind
from sharedtable.naming.base import NamingContext, TableNamer, format_table
from sharedtable.naming.foreign_keys import ForeignKeyNamer
from sharedtable.schema.model import EntityType, Index


class IndexNamer(TableNamer[Index]):
    """Makes index names unique within a table.

    Two convention-created indexes that back foreign keys sharing one
    constraint are the same physical index and keep the same name.
    """

    kind = NameKind.INDEX

    def __init__(self, context: NamingContext, foreign_key_namer: ForeignKeyNamer) -> None:
        super().__init__(context)
        self.foreign_key_namer = foreign_key_namer

    def members(self, entity_type: EntityType) -> list[Index]:
        return entity_type.indexes

    def process_entity_type(
        self,
        entity_type: EntityType,
        used: dict[str, Index],
        table_name: str,
        schema: str | None,
    ) -> None:
        table = format_table(table_name, schema)
        for index in entity_type.indexes:
            index_name = index.name.value
            other = used.get(index_name)
            if other is None:
                used[index_name] = index
                continue

            if self.are_compatible(index, other):
                continue

            if index.name.can_rename and self.back_same_foreign_key(index, other):
                continue

            self.resolve_collision(index, other, index_name, used, table)

    def are_compatible(self, index: Index, duplicate_index: Index) -> bool:
        """Whether two indexes mapped to the same name define the same index."""
        return (
            index.column_names() == duplicate_index.column_names()
            and index.is_unique == duplicate_index.is_unique
        )

    def back_same_foreign_key(self, index: Index, duplicate_index: Index) -> bool:
        """Whether both indexes only exist to back foreign keys sharing a constraint.

        Requires both indexes to be convention-created with renameable names,
        each covered by exactly one foreign key over its properties, and those
        foreign keys to carry the same constraint name and be compatible.
        """
        if not (
            index.is_convention
            and duplicate_index.is_convention
            and duplicate_index.name.can_rename
        ):
            return False

        foreign_keys = index.declaring_type.find_foreign_keys(index.properties)
        duplicate_foreign_keys = duplicate_index.declaring_type.find_foreign_keys(
            duplicate_index.properties
        )
        if len(foreign_keys) != 1 or len(duplicate_foreign_keys) != 1:
            return False

        foreign_key = foreign_keys[0]
        duplicate_foreign_key = duplicate_foreign_keys[0]
        return (
            foreign_key.name.value == duplicate_foreign_key.name.value
            and self.foreign_key_namer.are_compatible(foreign_key, duplicate_foreign_key)
        )
