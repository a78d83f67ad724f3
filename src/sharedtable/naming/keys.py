"""Primary and alternate key constraint name resolution."""

from __future__ import annotations

from sharedtable.core.types import NameKind
from sharedtable.naming.base import TableNamer, format_table
from sharedtable.schema.model import EntityType, Key


class KeyNamer(TableNamer[Key]):
    """Makes key constraint names unique within a table.

    A table has exactly one physical primary key however many entity types
    map to it, so a clash involving a primary key is never a conflict.
    """

    kind = NameKind.KEY

    def members(self, entity_type: EntityType) -> list[Key]:
        return entity_type.keys

    def process_entity_type(
        self,
        entity_type: EntityType,
        used: dict[str, Key],
        table_name: str,
        schema: str | None,
    ) -> None:
        table = format_table(table_name, schema)
        for key in entity_type.keys:
            key_name = key.name.value
            other = used.get(key_name)
            if other is None:
                used[key_name] = key
                continue

            if key.is_primary or other.is_primary or self.are_compatible(key, other):
                continue

            self.resolve_collision(key, other, key_name, used, table)

    def are_compatible(self, key: Key, duplicate_key: Key) -> bool:
        """Whether two keys mapped to the same constraint name can share it.

        Override to apply stricter rules; the default requires the same
        ordered columns.
        """
        return key.column_names() == duplicate_key.column_names()
