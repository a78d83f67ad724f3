"""In-memory schema model consumed by the shared table convention.

Entity types own their declared members (properties, keys, foreign keys and
indexes). Every database object name is a :class:`Name` carrying its source,
so the convention can tell convention-derived names, which it may rewrite,
from pinned ones, which it must leave alone.

Example:
    model = SchemaModel()
    animal = model.add_entity_type("Zoo.Animal", table_name="Animals")
    animal_id = animal.add_property("Id")
    animal.add_key([animal_id], primary=True)  # PK_Animals
    dog = model.add_entity_type("Zoo.Dog", base_type=animal, table_name="Animals")
    dog.add_property("Color")
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from sharedtable.core.types import FieldType, NameSource, OnDeleteActionType
from sharedtable.exceptions import EntityTypeNotFoundError, PinnedNameError


@dataclass(frozen=True)
class Name:
    """A database object name tagged with where it came from.

    A derived name was built from the current table and column names (e.g.
    ``PK_Animals``) and is recomputed whenever those change.
    """

    value: str
    source: NameSource = NameSource.CONVENTION
    derived: bool = field(default=False, compare=False)

    @property
    def is_explicit(self) -> bool:
        return self.source == NameSource.EXPLICIT

    @property
    def can_rename(self) -> bool:
        """Only convention-derived names may be rewritten."""
        return self.source == NameSource.CONVENTION

    def __str__(self) -> str:
        return self.value


def _as_name(value: str | Name, explicit: bool) -> Name:
    if isinstance(value, Name):
        return value
    return Name(value, NameSource.EXPLICIT if explicit else NameSource.CONVENTION)


def _renamed(current: Name, new_value: str, kind: str, derived: bool = False) -> Name:
    if not current.can_rename:
        raise PinnedNameError(kind, current.value, new_value)
    return Name(new_value, NameSource.CONVENTION, derived)


def _table_label(entity_type: EntityType) -> str:
    if entity_type.table_name is not None:
        return entity_type.table_name.value
    return entity_type.short_name()


def _columns_label(properties: list[Property]) -> str:
    return "_".join(p.column_name.value for p in properties)


@dataclass(eq=False)
class Property:
    """A property mapped to a column of its declaring entity type's table."""

    name: str
    declaring_type: EntityType
    column_name: Name
    store_type: FieldType = FieldType.STRING
    nullable: bool = True
    is_concurrency_token: bool = False
    identifying_member: str | None = None

    @property
    def is_primary_key(self) -> bool:
        primary_key = self.declaring_type.find_primary_key()
        return primary_key is not None and self in primary_key.properties

    def identifies_same_member(self, other: Property) -> bool:
        """Whether both properties represent the same underlying member."""
        return self.identifying_member is not None and (
            self.identifying_member == other.identifying_member
        )

    def set_column_name(self, value: str) -> None:
        self.column_name = _renamed(self.column_name, value, "column")

    def __repr__(self) -> str:
        return f"<Property {self.declaring_type.name}.{self.name} -> {self.column_name}>"


@dataclass(eq=False)
class Key:
    """A primary or alternate key over an ordered set of properties."""

    properties: list[Property]
    declaring_type: EntityType
    name: Name
    is_primary: bool = False

    def column_names(self) -> tuple[str, ...]:
        return tuple(p.column_name.value for p in self.properties)

    def default_name(self) -> str:
        table = _table_label(self.declaring_type)
        if self.is_primary:
            return f"PK_{table}"
        return f"AK_{table}_{_columns_label(self.properties)}"

    def set_name(self, value: str, derived: bool = False) -> None:
        self.name = _renamed(self.name, value, "key", derived)

    def __repr__(self) -> str:
        kind = "PrimaryKey" if self.is_primary else "Key"
        return f"<{kind} {self.declaring_type.name}({', '.join(p.name for p in self.properties)})>"


@dataclass(eq=False)
class ForeignKey:
    """A relationship declared on its dependent entity type."""

    properties: list[Property]
    declaring_type: EntityType
    principal_type: EntityType
    principal_key: Key
    name: Name
    dependent_to_principal: str | None = None
    principal_to_dependent: str | None = None
    on_delete: OnDeleteActionType = OnDeleteActionType.NO_ACTION
    is_unique: bool = False

    def column_names(self) -> tuple[str, ...]:
        return tuple(p.column_name.value for p in self.properties)

    def is_linking(self, table_name: str, schema: str | None) -> bool:
        """Whether both ends live in the given table, i.e. the row links to itself."""
        return (
            self.declaring_type.table_key() == (table_name, schema)
            and self.principal_type.table_key() == (table_name, schema)
        )

    def default_name(self) -> str:
        """``FK_{table}_{principal table}_{columns}`` from the current names."""
        return (
            f"FK_{_table_label(self.declaring_type)}_{_table_label(self.principal_type)}"
            f"_{_columns_label(self.properties)}"
        )

    def set_name(self, value: str, derived: bool = False) -> None:
        self.name = _renamed(self.name, value, "foreign key", derived)

    def __repr__(self) -> str:
        return (
            f"<ForeignKey {self.declaring_type.name}({', '.join(p.name for p in self.properties)})"
            f" -> {self.principal_type.name}>"
        )


@dataclass(eq=False)
class Index:
    """An index over an ordered set of properties of one entity type."""

    properties: list[Property]
    declaring_type: EntityType
    name: Name
    is_unique: bool = False
    source: NameSource = NameSource.EXPLICIT

    @property
    def is_convention(self) -> bool:
        """Whether the index itself was created by a convention."""
        return self.source == NameSource.CONVENTION

    def column_names(self) -> tuple[str, ...]:
        return tuple(p.column_name.value for p in self.properties)

    def default_name(self) -> str:
        return f"IX_{_table_label(self.declaring_type)}_{_columns_label(self.properties)}"

    def set_name(self, value: str, derived: bool = False) -> None:
        self.name = _renamed(self.name, value, "index", derived)

    def __repr__(self) -> str:
        return f"<Index {self.name} on {self.declaring_type.name}>"


@dataclass(eq=False)
class EntityType:
    """A mapped record type. Members listed here are declared, not inherited."""

    name: str
    base_type: EntityType | None = None
    table_name: Name | None = None
    schema: str | None = None
    properties: list[Property] = field(default_factory=list)
    keys: list[Key] = field(default_factory=list)
    foreign_keys: list[ForeignKey] = field(default_factory=list)
    indexes: list[Index] = field(default_factory=list)

    def short_name(self) -> str:
        """Name without namespace qualification (e.g. Zoo.Dog -> Dog)."""
        return self.name.rsplit(".", 1)[-1]

    def table_key(self) -> tuple[str, str | None] | None:
        if self.table_name is None:
            return None
        return (self.table_name.value, self.schema)

    @property
    def is_table_name_explicit(self) -> bool:
        return self.table_name is not None and self.table_name.is_explicit

    def set_table_name(self, value: str) -> None:
        if self.table_name is None:
            self.table_name = Name(value)
        else:
            self.table_name = _renamed(self.table_name, value, "table")

    def base_types(self) -> Iterator[EntityType]:
        base = self.base_type
        while base is not None:
            yield base
            base = base.base_type

    def find_primary_key(self) -> Key | None:
        """Primary key declared on this type or inherited from a base type."""
        for entity_type in (self, *self.base_types()):
            for key in entity_type.keys:
                if key.is_primary:
                    return key
        return None

    def get_properties(self) -> list[Property]:
        """Declared and inherited properties, base types first."""
        chain = [self, *self.base_types()]
        return [p for entity_type in reversed(chain) for p in entity_type.properties]

    def get_foreign_keys(self) -> list[ForeignKey]:
        chain = [self, *self.base_types()]
        return [fk for entity_type in reversed(chain) for fk in entity_type.foreign_keys]

    def find_property(self, name: str) -> Property | None:
        for prop in self.get_properties():
            if prop.name == name:
                return prop
        return None

    def find_foreign_keys(self, properties: Sequence[Property]) -> list[ForeignKey]:
        """Foreign keys, declared or inherited, over exactly these properties."""
        return [fk for fk in self.get_foreign_keys() if fk.properties == list(properties)]

    # === Builder helpers ===

    def add_property(
        self,
        name: str,
        column_name: str | Name | None = None,
        *,
        column_name_explicit: bool = False,
        store_type: FieldType = FieldType.STRING,
        nullable: bool = True,
        concurrency_token: bool = False,
        member: str | None = None,
    ) -> Property:
        prop = Property(
            name=name,
            declaring_type=self,
            column_name=_as_name(column_name or name, column_name_explicit),
            store_type=store_type,
            nullable=nullable,
            is_concurrency_token=concurrency_token,
            identifying_member=member,
        )
        self.properties.append(prop)
        return prop

    def add_key(
        self,
        properties: Sequence[Property],
        name: str | Name | None = None,
        *,
        primary: bool = False,
        name_explicit: bool = False,
    ) -> Key:
        """Declare a key; without a name it gets a derived one such as ``PK_Animals``."""
        key = Key(
            properties=list(properties),
            declaring_type=self,
            name=Name(""),
            is_primary=primary,
        )
        key.name = _name_or_default(key, name, name_explicit)
        self.keys.append(key)
        return key

    def add_foreign_key(
        self,
        properties: Sequence[Property],
        principal_type: EntityType,
        name: str | Name | None = None,
        *,
        principal_key: Key | None = None,
        name_explicit: bool = False,
        dependent_to_principal: str | None = None,
        principal_to_dependent: str | None = None,
        on_delete: OnDeleteActionType = OnDeleteActionType.NO_ACTION,
        unique: bool = False,
    ) -> ForeignKey:
        key = principal_key or principal_type.find_primary_key()
        if key is None:
            raise ValueError(
                f"Principal '{principal_type.name}' has no primary key; pass principal_key"
            )
        foreign_key = ForeignKey(
            properties=list(properties),
            declaring_type=self,
            principal_type=principal_type,
            principal_key=key,
            name=Name(""),
            dependent_to_principal=dependent_to_principal,
            principal_to_dependent=principal_to_dependent,
            on_delete=on_delete,
            is_unique=unique,
        )
        foreign_key.name = _name_or_default(foreign_key, name, name_explicit)
        self.foreign_keys.append(foreign_key)
        return foreign_key

    def add_index(
        self,
        properties: Sequence[Property],
        name: str | Name | None = None,
        *,
        unique: bool = False,
        name_explicit: bool = False,
        source: NameSource = NameSource.EXPLICIT,
    ) -> Index:
        index = Index(
            properties=list(properties),
            declaring_type=self,
            name=Name(""),
            is_unique=unique,
            source=source,
        )
        index.name = _name_or_default(index, name, name_explicit)
        self.indexes.append(index)
        return index

    def __repr__(self) -> str:
        return f"<EntityType {self.name} -> {self.table_name}>"


def _name_or_default(
    item: Key | ForeignKey | Index, name: str | Name | None, explicit: bool
) -> Name:
    if name is None:
        return Name(item.default_name(), derived=True)
    return _as_name(name, explicit)


class SchemaModel:
    """Ordered collection of entity types.

    Declaration order is kept and is the order in which the convention visits
    entity types, so renames are reproducible.
    """

    def __init__(self) -> None:
        self._entity_types: list[EntityType] = []

    def add_entity_type(
        self,
        name: str,
        *,
        base_type: EntityType | None = None,
        table_name: str | Name | None = None,
        schema: str | None = None,
        table_explicit: bool = False,
    ) -> EntityType:
        entity_type = EntityType(
            name=name,
            base_type=base_type,
            table_name=_as_name(table_name, table_explicit) if table_name is not None else None,
            schema=schema,
        )
        self._entity_types.append(entity_type)
        return entity_type

    def get_entity_types(self) -> list[EntityType]:
        return list(self._entity_types)

    def find_entity_type(self, name: str) -> EntityType | None:
        for entity_type in self._entity_types:
            if entity_type.name == name:
                return entity_type
        return None

    def get_entity_type(self, name: str) -> EntityType:
        """Get an entity type by name.

        Raises:
            EntityTypeNotFoundError: If no entity type has that name
        """
        entity_type = self.find_entity_type(name)
        if entity_type is None:
            raise EntityTypeNotFoundError(name, [e.name for e in self._entity_types])
        return entity_type

    def get_tables(self) -> dict[tuple[str, str | None], list[EntityType]]:
        """Current table partition, tables in order of first appearance."""
        tables: dict[tuple[str, str | None], list[EntityType]] = {}
        for entity_type in self._entity_types:
            table_key = entity_type.table_key()
            if table_key is not None:
                tables.setdefault(table_key, []).append(entity_type)
        return tables

    def __contains__(self, entity_type: object) -> bool:
        return any(entity_type is e for e in self._entity_types)

    def __iter__(self) -> Iterator[EntityType]:
        return iter(self._entity_types)

    def __len__(self) -> int:
        return len(self._entity_types)
