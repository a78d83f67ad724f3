"""Shared table convention: resolve name clashes between entity types sharing a table."""

from __future__ import annotations

import logging

from sharedtable.core.types import ResolutionReport, TableInfo
from sharedtable.exceptions import UnresolvedNameCollisionError
from sharedtable.naming.base import NamingContext
from sharedtable.naming.columns import ColumnNamer
from sharedtable.naming.foreign_keys import ForeignKeyNamer
from sharedtable.naming.indexes import IndexNamer
from sharedtable.naming.keys import KeyNamer
from sharedtable.naming.tables import TableGrouper
from sharedtable.naming.uniquifier import check_max_length
from sharedtable.schema.model import SchemaModel

logger = logging.getLogger(__name__)


class SharedTableConvention:
    """Renames database objects of entity types that share a table to avoid clashes.

    Runs once, when the model is finalized. Table names are separated first
    (undoing merges caused by identifier truncation), then for every table
    column, key, foreign key and index names are made unique in that order.
    Before each pass, derived names such as ``PK_Animals`` are rebuilt from the
    final table and column names, and every convention name is clipped to
    ``max_identifier_length``.
    Only convention-derived names are rewritten; clashes between pinned names
    are reported and left for model validation to reject.

    Subclass and override the ``*_namer_class`` attributes to plug in
    namers with different compatibility rules.
    """

    column_namer_class = ColumnNamer
    key_namer_class = KeyNamer
    foreign_key_namer_class = ForeignKeyNamer
    index_namer_class = IndexNamer

    def __init__(self, max_identifier_length: int, strict: bool = False) -> None:
        """Initialize the convention.

        Args:
            max_identifier_length: Maximum identifier length of the target database
            strict: If True, raise after the run when clashes remain unresolved

        Raises:
            InvalidIdentifierLengthError: If max_identifier_length is not positive
        """
        check_max_length(max_identifier_length)
        self.max_identifier_length = max_identifier_length
        self.strict = strict

    def process_model_finalizing(self, model: SchemaModel) -> ResolutionReport:
        """Resolve names across the model in place.

        Args:
            model: The schema model to update

        Returns:
            Report of the final tables, the renames made and unresolved clashes

        Raises:
            UnresolvedNameCollisionError: In strict mode, if clashes remain
        """
        context = NamingContext(self.max_identifier_length)
        tables = TableGrouper(context).group(model)

        foreign_key_namer = self.foreign_key_namer_class(context, model)
        namers = [
            self.column_namer_class(context),
            self.key_namer_class(context),
            foreign_key_namer,
            self.index_namer_class(context, foreign_key_namer),
        ]
        for (table_name, schema), entity_types in tables.items():
            for namer in namers:
                namer.process_table(table_name, schema, entity_types)

        report = ResolutionReport(
            max_identifier_length=self.max_identifier_length,
            tables=[
                TableInfo(
                    name=table_name,
                    table_schema=schema,
                    entity_types=[e.name for e in entity_types],
                )
                for (table_name, schema), entity_types in tables.items()
            ],
            changes=context.changes,
            collisions=context.collisions,
        )
        logger.info(
            f"Resolved {len(report.tables)} table(s): {len(report.changes)} rename(s), "
            f"{len(report.collisions)} unresolved collision(s)"
        )

        if self.strict and report.collisions:
            raise UnresolvedNameCollisionError(report.collisions)
        return report


def resolve(model: SchemaModel, max_identifier_length: int, strict: bool = False) -> None:
    """Resolve shared-table name clashes in ``model`` in place.

    Args:
        model: The schema model to update
        max_identifier_length: Maximum identifier length of the target database
        strict: If True, raise when clashes between pinned names remain
    """
    SharedTableConvention(max_identifier_length, strict=strict).process_model_finalizing(model)
