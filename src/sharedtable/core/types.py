"""Core types and specifications for sharedtable.

Input specs describe a schema model as a JSON document; report types describe
what a resolution run changed. All types are JSON-serializable.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

try:  # Python 3.11+
    from enum import StrEnum  # type: ignore[attr-defined]
except ImportError:  # Python 3.10

    class StrEnum(str, Enum):  # type: ignore[no-redef]
        """String-valued enum base for Python 3.10."""

        def __str__(self) -> str:
            return str(self.value)


class NameSource(StrEnum):
    """Where a name came from. Only convention names may be rewritten."""

    CONVENTION = "convention"  # Assigned by default heuristics
    EXPLICIT = "explicit"  # Configured by a caller, pinned

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid name source values."""
        return [s.value for s in cls]


class FieldType(StrEnum):
    """Column store types understood by the SQLAlchemy exporter."""

    STRING = "string"
    TEXT = "text"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DATETIME = "datetime"
    JSON = "json"
    UUID = "uuid"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid field type values."""
        return [t.value for t in cls]


class OnDeleteActionType(StrEnum):
    """Referential actions when a principal row is deleted."""

    CASCADE = "CASCADE"  # Delete dependent rows
    SET_NULL = "SET_NULL"  # Set foreign key columns to NULL
    RESTRICT = "RESTRICT"  # Prevent deletion if dependent rows exist
    NO_ACTION = "NO_ACTION"  # Database default

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid on_delete action values."""
        return [a.value for a in cls]


class NameKind(StrEnum):
    """Kinds of database object names managed by the convention."""

    TABLE = "table"
    COLUMN = "column"
    KEY = "key"
    FOREIGN_KEY = "foreign_key"
    INDEX = "index"


# === Input specs ===


class PropertySpec(BaseModel):
    """Specification for a property mapped to a column."""

    name: str = Field(..., description="Property name")
    column_name: str | None = Field(
        default=None, description="Column name (defaults to the property name)"
    )
    column_name_explicit: bool = Field(
        default=False, description="Whether the column name is pinned"
    )
    type: FieldType = Field(default=FieldType.STRING, description="Column store type")
    nullable: bool = Field(default=True, description="Whether the column accepts NULL")
    concurrency_token: bool = Field(
        default=False, description="Whether the property is a concurrency token"
    )
    member: str | None = Field(
        default=None,
        description="Identity of the underlying member; equal members share one column",
    )

    model_config = {"use_enum_values": True}


class KeySpec(BaseModel):
    """Specification for a primary or alternate key."""

    properties: list[str] = Field(..., min_length=1, description="Key property names")
    primary: bool = Field(default=False, description="Whether this is the primary key")
    name: str | None = Field(default=None, description="Constraint name")
    name_explicit: bool = Field(default=False, description="Whether the name is pinned")
    name_derived: bool = Field(
        default=False, description="Whether the name follows the table and column names"
    )


class ForeignKeySpec(BaseModel):
    """Specification for a foreign key declared on the dependent entity type."""

    properties: list[str] = Field(..., min_length=1, description="Dependent property names")
    principal: str = Field(..., description="Principal entity type name")
    principal_key: list[str] | None = Field(
        default=None, description="Principal key properties (defaults to its primary key)"
    )
    name: str | None = Field(default=None, description="Constraint name")
    name_explicit: bool = Field(default=False, description="Whether the name is pinned")
    name_derived: bool = Field(
        default=False, description="Whether the name follows the table and column names"
    )
    dependent_to_principal: str | None = Field(
        default=None, description="Identity of the navigation on the dependent side"
    )
    principal_to_dependent: str | None = Field(
        default=None, description="Identity of the navigation on the principal side"
    )
    on_delete: OnDeleteActionType = Field(
        default=OnDeleteActionType.NO_ACTION, description="Action when principal is deleted"
    )
    unique: bool = Field(default=False, description="Whether the relationship is one-to-one")

    model_config = {"use_enum_values": True}


class IndexSpec(BaseModel):
    """Specification for an index."""

    properties: list[str] = Field(..., min_length=1, description="Indexed property names")
    unique: bool = Field(default=False, description="Whether the index is unique")
    name: str | None = Field(default=None, description="Index name")
    name_explicit: bool = Field(default=False, description="Whether the name is pinned")
    name_derived: bool = Field(
        default=False, description="Whether the name follows the table and column names"
    )
    origin: NameSource = Field(
        default=NameSource.EXPLICIT,
        description="Whether the index was configured explicitly or created by a convention",
    )

    model_config = {"use_enum_values": True}


class EntityTypeSpec(BaseModel):
    """Specification for an entity type and its declared members."""

    name: str = Field(..., description="Entity type name, optionally namespace-qualified")
    base: str | None = Field(default=None, description="Base entity type name")
    table: str | None = Field(default=None, description="Table name (None when unmapped)")
    table_schema: str | None = Field(default=None, description="Database schema")
    table_explicit: bool = Field(default=False, description="Whether the table name is pinned")
    properties: list[PropertySpec] = Field(default_factory=list)
    keys: list[KeySpec] = Field(default_factory=list)
    foreign_keys: list[ForeignKeySpec] = Field(default_factory=list)
    indexes: list[IndexSpec] = Field(default_factory=list)


class ModelSpec(BaseModel):
    """A whole schema model document."""

    entity_types: list[EntityTypeSpec] = Field(default_factory=list)
    max_identifier_length: int | None = Field(
        default=None, gt=0, description="Maximum identifier length of the target database"
    )


# === Output types ===


class NameChange(BaseModel):
    """A single rename performed by the convention."""

    kind: NameKind
    entity_type: str
    member: str | None = None
    table: str
    old_name: str
    new_name: str

    model_config = {"use_enum_values": True}


class NameCollision(BaseModel):
    """A clash the convention could not resolve because both names are pinned."""

    kind: NameKind
    name: str
    table: str
    entity_types: list[str] = Field(default_factory=list)

    model_config = {"use_enum_values": True}


class TableInfo(BaseModel):
    """A physical table and the entity types mapped to it."""

    name: str
    table_schema: str | None = None
    entity_types: list[str]


class ResolutionReport(BaseModel):
    """Outcome of one resolution run."""

    max_identifier_length: int
    tables: list[TableInfo] = Field(default_factory=list)
    changes: list[NameChange] = Field(default_factory=list)
    collisions: list[NameCollision] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        """Whether the run renamed anything."""
        return bool(self.changes)
