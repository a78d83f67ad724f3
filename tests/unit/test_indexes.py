"""Tests for index name resolution."""

import pytest

from sharedtable.core.types import NameKind, NameSource, OnDeleteActionType
from sharedtable.naming.base import NamingContext
from sharedtable.naming.columns import ColumnNamer
from sharedtable.naming.foreign_keys import ForeignKeyNamer
from sharedtable.naming.indexes import IndexNamer

INDEX_NAME = "IX_Animals_OwnerId"


@pytest.fixture
def owner(make_entity):
    return make_entity("Zoo.Owner", "Owners")


@pytest.fixture
def namer(model, context: NamingContext) -> IndexNamer:
    return IndexNamer(context, ForeignKeyNamer(context, model))


def add_owned(entity_type, owner, fk_name="FK_Animals_Owners_OwnerId", unique=False, **kwargs):
    """OwnerId with a foreign key to owner and the index created for it."""
    prop = entity_type.add_property("OwnerId", member="Zoo.IOwned.OwnerId")
    entity_type.add_foreign_key([prop], owner, fk_name, unique=unique, **kwargs)
    return entity_type.add_index([prop], INDEX_NAME, unique=unique, source=NameSource.CONVENTION)


class TestIndexNamer:
    """Tests for IndexNamer."""

    def test_same_definition_shares_name(self, namer, animals, context):
        """Indexes over the same columns with the same uniqueness are one index."""
        animal, dog, cat = animals
        dog.add_index([dog.add_property("Color")], "IX_Animals_Color")
        cat_index = cat.add_index([cat.add_property("Color")], "IX_Animals_Color")

        namer.process_table("Animals", None, [animal, dog, cat])

        assert cat_index.name.value == "IX_Animals_Color"
        assert context.changes == []

    def test_different_columns_renamed(self, namer, animals, context):
        """Indexes over different columns need different names."""
        animal, dog, cat = animals
        dog.add_index([dog.add_property("Color")], "IX_Animals_Color")
        cat_index = cat.add_index([cat.add_property("Shade")], "IX_Animals_Color")

        namer.process_table("Animals", None, [animal, dog, cat])

        assert cat_index.name.value == "IX_Animals_Color1"
        change = context.changes[0]
        assert change.kind == NameKind.INDEX
        assert change.member == "Shade"

    def test_different_uniqueness_renamed(self, namer, animals):
        """A unique and a non-unique index are different indexes."""
        animal, dog, cat = animals
        dog.add_index([dog.add_property("Color")], "IX_Animals_Color")
        cat_index = cat.add_index([cat.add_property("Color")], "IX_Animals_Color", unique=True)

        namer.process_table("Animals", None, [animal, dog, cat])

        assert cat_index.name.value == "IX_Animals_Color1"

    def test_indexes_backing_same_foreign_key_share_name(self, namer, animals, owner, context):
        """Convention indexes for one shared constraint keep one name."""
        animal, dog, cat = animals
        dog_index = add_owned(dog, owner)
        cat_index = add_owned(cat, owner, unique=True)

        namer.process_table("Animals", None, [animal, dog, cat])

        assert not dog_index.is_unique and cat_index.is_unique
        assert cat_index.name.value == dog_index.name.value == INDEX_NAME
        assert context.changes == []

    def test_indexes_backing_different_foreign_keys_renamed(self, namer, animals, owner):
        """Differently named foreign keys get their own indexes."""
        animal, dog, cat = animals
        add_owned(dog, owner)
        cat_index = add_owned(cat, owner, fk_name="FK_Cat_Owner", unique=True)

        namer.process_table("Animals", None, [animal, dog, cat])

        assert cat_index.name.value == f"{INDEX_NAME}1"

    def test_incompatible_foreign_keys_renamed(self, namer, animals, owner):
        """Same constraint name is not enough when the relationships differ."""
        animal, dog, cat = animals
        add_owned(dog, owner, on_delete=OnDeleteActionType.CASCADE)
        cat_index = add_owned(cat, owner, unique=True)

        namer.process_table("Animals", None, [animal, dog, cat])

        assert cat_index.name.value == f"{INDEX_NAME}1"

    def test_explicit_indexes_not_merged(self, namer, animals, owner):
        """Only convention-created indexes are merged on their foreign keys."""
        animal, dog, cat = animals
        add_owned(dog, owner)
        cat_prop = cat.add_property("OwnerId", member="Zoo.IOwned.OwnerId")
        cat.add_foreign_key([cat_prop], owner, "FK_Animals_Owners_OwnerId", unique=True)
        cat_index = cat.add_index([cat_prop], INDEX_NAME, unique=True)

        namer.process_table("Animals", None, [animal, dog, cat])

        assert cat_index.name.value == f"{INDEX_NAME}1"

    def test_pinned_index_renames_other(self, namer, animals):
        """A pinned later index keeps its name."""
        animal, dog, cat = animals
        dog_index = dog.add_index([dog.add_property("Color")], "IX_Animals_Color")
        cat_index = cat.add_index(
            [cat.add_property("Shade")], "IX_Animals_Color", name_explicit=True
        )

        namer.process_table("Animals", None, [animal, dog, cat])

        assert cat_index.name.value == "IX_Animals_Color"
        assert dog_index.name.value == "IX_Animals_Color1"

    def test_both_pinned_recorded(self, namer, animals, context):
        """Clashing pinned index names are reported."""
        animal, dog, cat = animals
        dog.add_index([dog.add_property("Color")], "IX_Animals_Color", name_explicit=True)
        cat.add_index([cat.add_property("Shade")], "IX_Animals_Color", name_explicit=True)

        namer.process_table("Animals", None, [animal, dog, cat])

        assert [(c.kind, c.table) for c in context.collisions] == [(NameKind.INDEX, "Animals")]

    def test_names_scoped_per_table(self, namer, make_entity, context):
        """The same index name in two tables is no clash."""
        order = make_entity("Shop.Order", "Orders")
        invoice = make_entity("Shop.Invoice", "Invoices")
        order.add_index([order.add_property("Code")], "IX_Code")
        invoice_index = invoice.add_index([invoice.add_property("Number")], "IX_Code")

        namer.process_table("Orders", None, [order])
        namer.process_table("Invoices", None, [invoice])

        assert invoice_index.name.value == "IX_Code"
        assert context.changes == []

    def test_derived_name_follows_renamed_column(self, namer, animals, context):
        """A derived index name is rebuilt from the column's resolved name."""
        animal, dog, cat = animals
        dog.add_index([dog.add_property("Color")])
        cat_index = cat.add_index([cat.add_property("Color")])
        ColumnNamer(context).process_table("Animals", None, [animal, dog, cat])

        namer.process_table("Animals", None, [animal, dog, cat])

        assert cat_index.name.value == "IX_Animals_Cat_Color"
        assert [(c.kind, c.new_name) for c in context.changes] == [
            (NameKind.COLUMN, "Cat_Color"),
            (NameKind.INDEX, "IX_Animals_Cat_Color"),
        ]
