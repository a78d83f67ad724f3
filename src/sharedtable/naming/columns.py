"""Column name resolution for entity types sharing a table."""

from __future__ import annotations

from sharedtable.core.types import NameKind
from sharedtable.naming.base import TableNamer, format_table
from sharedtable.naming.uniquifier import truncate, uniquify
from sharedtable.schema.model import EntityType, Property


class ColumnNamer(TableNamer[Property]):
    """Makes column names unique within a table.

    Properties that identify the same underlying member (e.g. a property
    declared once on a shared base) are meant to share a column and are left
    alone, as are two primary-key or two concurrency-token columns of
    entity types splitting one row. Primary-key and concurrency-token columns
    are never renamed; the other property of the clash is renamed instead.
    """

    kind = NameKind.COLUMN

    def members(self, entity_type: EntityType) -> list[Property]:
        return entity_type.properties

    def refresh_name(self, prop: Property, table: str, schema: str | None) -> None:
        """Clip an over-long convention column name; clashes are left to the namer."""
        name = prop.column_name
        if not name.can_rename or len(name.value) <= self.context.max_length:
            return
        new_name = truncate(name.value, self.context.max_length)
        prop.set_column_name(new_name)
        self.context.record_change(
            self.kind, prop.declaring_type, table, name.value, new_name, member=prop.name
        )

    def process_entity_type(
        self,
        entity_type: EntityType,
        used: dict[str, Property],
        table_name: str,
        schema: str | None,
    ) -> None:
        table = format_table(table_name, schema)
        for prop in entity_type.properties:
            column_name = prop.column_name.value
            other = used.get(column_name)
            if other is None:
                used[column_name] = prop
                continue

            if (
                prop.identifies_same_member(other)
                or (prop.is_primary_key and other.is_primary_key)
                or (prop.is_concurrency_token and other.is_concurrency_token)
            ):
                continue

            use_prefix = (
                prop.declaring_type is not other.declaring_type
                or prop.is_primary_key
                or other.is_primary_key
            )

            if self._can_rename(prop):
                new_name = self._try_uniquify_column(prop, column_name, used, use_prefix, table)
                if new_name is not None:
                    used[new_name] = prop
                    continue

            if self._can_rename(other):
                new_other_name = self._try_uniquify_column(
                    other, column_name, used, use_prefix, table
                )
                if new_other_name is not None:
                    used[column_name] = prop
                    used[new_other_name] = other
                    continue

            self.context.record_collision(
                self.kind, column_name, table, [prop.declaring_type, other.declaring_type]
            )

    def _can_rename(self, prop: Property) -> bool:
        """Key and concurrency-token columns are referenced elsewhere and keep their names."""
        return not (prop.is_primary_key or prop.is_concurrency_token)

    def _try_uniquify_column(
        self,
        prop: Property,
        column_name: str,
        used: dict[str, Property],
        use_prefix: bool,
        table: str,
    ) -> str | None:
        if not prop.column_name.can_rename:
            return None

        candidate = column_name
        if use_prefix:
            prefix = prop.declaring_type.short_name()
            if not candidate.lower().startswith(prefix.lower()):
                candidate = f"{prefix}_{candidate}"

        new_name = uniquify(candidate, used, self.context.max_length)
        prop.set_column_name(new_name)
        self.context.record_change(
            self.kind, prop.declaring_type, table, column_name, new_name, member=prop.name
        )
        return new_name
