"""Shared plumbing for the per-table namers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sharedtable.core.types import NameChange, NameCollision, NameKind
from sharedtable.naming.uniquifier import uniquify
from sharedtable.schema.model import EntityType

logger = logging.getLogger(__name__)

T = TypeVar("T")


def format_table(table_name: str, schema: str | None) -> str:
    """Display form of a table (e.g. ``sales.Orders``)."""
    return f"{schema}.{table_name}" if schema else table_name


@dataclass
class NamingContext:
    """State of one resolution run shared by all namers."""

    max_length: int
    changes: list[NameChange] = field(default_factory=list)
    collisions: list[NameCollision] = field(default_factory=list)
    clipped: dict[str | None, dict[str, str]] = field(default_factory=dict)

    def clip(self, name: str, schema: str | None) -> str:
        """Fit a constraint or index name to the limit.

        The same name always clips to the same value. Different names that
        clip alike get a suffix: on engines such as PostgreSQL, constraint and
        index names of a schema share one namespace.
        """
        if len(name) <= self.max_length:
            return name
        clipped = self.clipped.setdefault(schema, {})
        if name not in clipped:
            clipped[name] = uniquify(name, set(clipped.values()), self.max_length)
        return clipped[name]

    def record_change(
        self,
        kind: NameKind,
        entity_type: EntityType,
        table: str,
        old_name: str,
        new_name: str,
        member: str | None = None,
    ) -> None:
        logger.info(f"Renamed {kind} '{old_name}' -> '{new_name}' on {table} ({entity_type.name})")
        self.changes.append(
            NameChange(
                kind=kind,
                entity_type=entity_type.name,
                member=member,
                table=table,
                old_name=old_name,
                new_name=new_name,
            )
        )

    def record_collision(
        self, kind: NameKind, name: str, table: str, entity_types: list[EntityType]
    ) -> None:
        logger.warning(
            f"Unresolved {kind} name collision '{name}' on {table}: "
            f"both names are pinned ({', '.join(e.name for e in entity_types)})"
        )
        self.collisions.append(
            NameCollision(
                kind=kind,
                name=name,
                table=table,
                entity_types=[e.name for e in entity_types],
            )
        )


class TableNamer(ABC, Generic[T]):
    """Resolves one kind of name across the entity types sharing a table.

    Subclasses visit declared members only; inherited members were already
    named with their declaring type. The used-names map is scoped to a
    single table.
    """

    kind: NameKind

    def __init__(self, context: NamingContext) -> None:
        self.context = context

    def process_table(
        self, table_name: str, schema: str | None, entity_types: list[EntityType]
    ) -> None:
        table = format_table(table_name, schema)
        for entity_type in entity_types:
            for item in self.members(entity_type):
                self.refresh_name(item, table, schema)

        used: dict[str, T] = {}
        for entity_type in entity_types:
            self.process_entity_type(entity_type, used, table_name, schema)

    @abstractmethod
    def members(self, entity_type: EntityType) -> list[T]:
        """Members declared on entity_type whose names this namer owns."""

    @abstractmethod
    def process_entity_type(
        self,
        entity_type: EntityType,
        used: dict[str, T],
        table_name: str,
        schema: str | None,
    ) -> None:
        """Name the members declared on entity_type, updating ``used``."""

    def refresh_name(self, item: Any, table: str, schema: str | None) -> None:
        """Bring a convention name up to date before clashes are looked for.

        Derived names are rebuilt from the current table and column names,
        which table splitting and column renames may have changed. Names
        over the limit are clipped.
        """
        name = item.name
        if not name.can_rename:
            return
        value = item.default_name() if name.derived else name.value
        value = self.context.clip(value, schema)
        if value == name.value:
            return
        item.set_name(value, derived=name.derived)
        self.context.record_change(
            self.kind,
            item.declaring_type,
            table,
            name.value,
            value,
            member=", ".join(p.name for p in item.properties),
        )

    def try_uniquify(self, item: Any, name: str, used: dict[str, T], table: str) -> str | None:
        """Give a renameable item a free name; None when its name is pinned."""
        if not item.name.can_rename:
            return None
        new_name = uniquify(name, used, self.context.max_length)
        item.set_name(new_name)
        self.context.record_change(
            self.kind,
            item.declaring_type,
            table,
            name,
            new_name,
            member=", ".join(p.name for p in item.properties),
        )
        return new_name

    def resolve_collision(
        self, item: T, other: T, name: str, used: dict[str, T], table: str
    ) -> None:
        """Rename item, or failing that the item already holding the name."""
        new_name = self.try_uniquify(item, name, used, table)
        if new_name is not None:
            used[new_name] = item
            return

        new_other_name = self.try_uniquify(other, name, used, table)
        if new_other_name is not None:
            used[name] = item
            used[new_other_name] = other
            return

        self.context.record_collision(
            self.kind,
            name,
            table,
            [item.declaring_type, other.declaring_type],  # type: ignore[attr-defined]
        )
