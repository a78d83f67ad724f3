"""Schema model for sharedtable."""

from sharedtable.schema.builder import dump_model, load_model
from sharedtable.schema.model import (
    EntityType,
    ForeignKey,
    Index,
    Key,
    Name,
    Property,
    SchemaModel,
)

__all__ = [
    "SchemaModel",
    "EntityType",
    "Property",
    "Key",
    "ForeignKey",
    "Index",
    "Name",
    "load_model",
    "dump_model",
]
