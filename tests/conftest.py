"""Shared test fixtures for sharedtable."""

from collections.abc import Callable

import pytest

from sharedtable.core.types import FieldType
from sharedtable.naming.base import NamingContext
from sharedtable.schema.model import EntityType, SchemaModel

EntityFactory = Callable[..., EntityType]


@pytest.fixture
def model() -> SchemaModel:
    """An empty schema model."""
    return SchemaModel()


@pytest.fixture
def make_entity(model: SchemaModel) -> EntityFactory:
    """Factory adding an entity type to ``model``.

    Root types get an ``Id`` primary key property; derived types inherit it.
    """

    def factory(
        name: str,
        table: str | None = None,
        *,
        base: EntityType | None = None,
        schema: str | None = None,
        table_explicit: bool = False,
        keyless: bool = False,
    ) -> EntityType:
        entity_type = model.add_entity_type(
            name,
            base_type=base,
            table_name=table,
            schema=schema,
            table_explicit=table_explicit,
        )
        if base is None and not keyless:
            key_property = entity_type.add_property("Id", store_type=FieldType.INT, nullable=False)
            key_name = f"PK_{table or entity_type.short_name()}"
            entity_type.add_key([key_property], key_name, primary=True)
        return entity_type

    return factory


@pytest.fixture
def animals(make_entity: EntityFactory) -> tuple[EntityType, EntityType, EntityType]:
    """Table-per-hierarchy: Animal with derived Dog and Cat, all in Animals."""
    animal = make_entity("Zoo.Animal", "Animals")
    dog = make_entity("Zoo.Dog", "Animals", base=animal)
    cat = make_entity("Zoo.Cat", "Animals", base=animal)
    return animal, dog, cat


@pytest.fixture
def context() -> NamingContext:
    """Naming context with a generous identifier length."""
    return NamingContext(max_length=63)
