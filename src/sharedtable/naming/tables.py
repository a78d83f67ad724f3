"""Partition entity types into tables, undoing merges caused by truncation.

Two unrelated entity types can end up with the same table name once their
names are clipped to the database's maximum identifier length (e.g.
``CustomerOrderHistoryArchive`` and ``CustomerOrderHistoryAudit`` both become
``CustomerOrderHistor`` at 19 characters). Entity types that really share a
table are connected through inheritance or a linking (same-row) foreign key;
anything else in the bucket was merged by accident and is moved to a new,
uniquified table name.
"""

from __future__ import annotations

import logging
from collections import deque

from sharedtable.core.types import NameKind
from sharedtable.naming.base import NamingContext, format_table
from sharedtable.naming.uniquifier import truncate, uniquify
from sharedtable.schema.model import EntityType, SchemaModel

logger = logging.getLogger(__name__)

TableKey = tuple[str, str | None]


def connected_components(
    vertices: list[EntityType], edges: list[tuple[EntityType, EntityType]]
) -> list[list[EntityType]]:
    """Weakly-connected components, ordered by their earliest vertex.

    Members of each component keep the order of ``vertices``.
    """
    neighbours: dict[int, list[EntityType]] = {id(v): [] for v in vertices}
    for source, target in edges:
        neighbours[id(source)].append(target)
        neighbours[id(target)].append(source)

    position = {id(v): i for i, v in enumerate(vertices)}
    seen: set[int] = set()
    components: list[list[EntityType]] = []
    for vertex in vertices:
        if id(vertex) in seen:
            continue
        seen.add(id(vertex))
        component = [vertex]
        queue = deque([vertex])
        while queue:
            current = queue.popleft()
            for neighbour in neighbours[id(current)]:
                if id(neighbour) not in seen:
                    seen.add(id(neighbour))
                    component.append(neighbour)
                    queue.append(neighbour)
        components.append(sorted(component, key=lambda e: position[id(e)]))
    return components


class TableGrouper:
    """Builds the final table -> entity types partition for a model."""

    def __init__(self, context: NamingContext) -> None:
        self.context = context

    def group(self, model: SchemaModel) -> dict[TableKey, list[EntityType]]:
        """Bucket mapped entity types by table and split accidental merges.

        Convention table names longer than the limit are clipped first, the
        way the database would clip them. Entity types without a table name or
        without a primary key do not take part. Renamed components get a fresh
        bucket.

        Returns:
            Mapping of (table name, schema) to entity types in declaration order,
            tables ordered by their first entity type
        """
        tables: dict[TableKey, list[EntityType]] = {}
        for entity_type in model:
            self._clip(entity_type)
            table_key = entity_type.table_key()
            if table_key is None:
                continue
            if entity_type.find_primary_key() is None:
                logger.debug(f"Skipping '{entity_type.name}': mapped to a table but keyless")
                continue
            tables.setdefault(table_key, []).append(entity_type)

        to_uniquify: list[tuple[list[EntityType], TableKey]] = []
        for table_key, entity_types in tables.items():
            table_name, schema = table_key
            if len(entity_types) == 1 or len(table_name) < self.context.max_length:
                continue

            components = connected_components(
                entity_types, self._sharing_edges(entity_types, table_name, schema)
            )
            any_component_skipped = False
            for component in components[1:]:
                if any(e.is_table_name_explicit for e in component):
                    any_component_skipped = True
                    continue
                to_uniquify.append((component, table_key))

            # Once a pinned component keeps the name, the first component has
            # no better claim to it than any other.
            if any_component_skipped:
                first = components[0]
                if not any(e.is_table_name_explicit for e in first):
                    to_uniquify.append((first, table_key))

        for component, table_key in to_uniquify:
            self._move(component, table_key, tables)

        # Moved components go back to where their first entity type was declared
        position = {id(e): i for i, e in enumerate(model)}
        ordered = sorted(
            ((key, entity_types) for key, entity_types in tables.items() if entity_types),
            key=lambda item: position[id(item[1][0])],
        )
        return dict(ordered)

    def _clip(self, entity_type: EntityType) -> None:
        name = entity_type.table_name
        if name is None or not name.can_rename or len(name.value) <= self.context.max_length:
            return
        new_name = truncate(name.value, self.context.max_length)
        entity_type.set_table_name(new_name)
        self.context.record_change(
            NameKind.TABLE,
            entity_type,
            format_table(name.value, entity_type.schema),
            name.value,
            new_name,
        )

    def _sharing_edges(
        self, entity_types: list[EntityType], table_name: str, schema: str | None
    ) -> list[tuple[EntityType, EntityType]]:
        members = {id(e) for e in entity_types}
        edges = []
        for entity_type in entity_types:
            base_type = entity_type.base_type
            if base_type is not None and id(base_type) in members:
                edges.append((entity_type, base_type))
            for foreign_key in entity_type.foreign_keys:
                principal = foreign_key.principal_type
                if id(principal) in members and foreign_key.is_linking(table_name, schema):
                    edges.append((entity_type, principal))
        return edges

    def _move(
        self,
        component: list[EntityType],
        table_key: TableKey,
        tables: dict[TableKey, list[EntityType]],
    ) -> None:
        table_name, schema = table_key
        new_name = uniquify(
            table_name, tables, self.context.max_length, key=lambda n: (n, schema)
        )
        tables[(new_name, schema)] = list(component)
        for entity_type in component:
            entity_type.set_table_name(new_name)
            tables[table_key].remove(entity_type)
            self.context.record_change(
                NameKind.TABLE,
                entity_type,
                format_table(table_name, schema),
                table_name,
                new_name,
            )
