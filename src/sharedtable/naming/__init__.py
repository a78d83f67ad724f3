"""Name resolution for entity types sharing a table."""

from sharedtable.naming.columns import ColumnNamer
from sharedtable.naming.convention import SharedTableConvention, resolve
from sharedtable.naming.foreign_keys import ForeignKeyNamer
from sharedtable.naming.indexes import IndexNamer
from sharedtable.naming.keys import KeyNamer
from sharedtable.naming.tables import TableGrouper
from sharedtable.naming.uniquifier import truncate, uniquify

__all__ = [
    "SharedTableConvention",
    "resolve",
    "TableGrouper",
    "ColumnNamer",
    "KeyNamer",
    "ForeignKeyNamer",
    "IndexNamer",
    "truncate",
    "uniquify",
]
