"""Tests for table grouping and truncation-merge splitting."""

from sharedtable.core.types import NameKind
from sharedtable.naming.base import NamingContext
from sharedtable.naming.tables import TableGrouper, connected_components
from sharedtable.schema.model import SchemaModel

# 25 characters: what a longer table name looks like after truncation to 25
TRUNCATED = "CUSTOMER_ORDER_HISTORY_TA"


def group(model: SchemaModel, max_length: int):
    context = NamingContext(max_length)
    return TableGrouper(context).group(model), context


class TestConnectedComponents:
    """Tests for the component helper."""

    def test_components_in_vertex_order(self, make_entity):
        """Components are ordered by their earliest vertex, members too."""
        a = make_entity("A", "T")
        b = make_entity("B", "T")
        c = make_entity("C", "T")
        d = make_entity("D", "T")
        components = connected_components([a, b, c, d], [(d, a), (c, b)])
        assert components == [[a, d], [b, c]]

    def test_isolated_vertices(self, make_entity):
        """Vertices without edges form singleton components."""
        a = make_entity("A", "T")
        b = make_entity("B", "T")
        assert connected_components([a, b], []) == [[a], [b]]


class TestTableGrouper:
    """Tests for TableGrouper."""

    def test_buckets_by_table_and_schema(self, model, make_entity):
        """Same table name in different schemas are different tables."""
        sales = make_entity("Sales.Order", "Orders", schema="sales")
        archive = make_entity("Archive.Order", "Orders", schema="archive")

        tables, _ = group(model, 63)

        assert tables == {("Orders", "sales"): [sales], ("Orders", "archive"): [archive]}

    def test_unmapped_and_keyless_types_skipped(self, model, make_entity):
        """Types without a table or a primary key take no part."""
        make_entity("Zoo.Report")
        make_entity("Zoo.Keyless", "Keyless", keyless=True)
        animal = make_entity("Zoo.Animal", "Animals")

        tables, _ = group(model, 63)

        assert tables == {("Animals", None): [animal]}

    def test_truncated_unrelated_types_split(self, model, make_entity):
        """Unrelated types sharing a truncated name are separated."""
        customer = make_entity("Shop.Customer", TRUNCATED)
        order = make_entity("Shop.Order", TRUNCATED)

        tables, context = group(model, 25)

        assert customer.table_name.value == TRUNCATED
        assert order.table_name.value == "CUSTOMER_ORDER_HISTORY_T1"
        assert len(order.table_name.value) <= 25
        assert tables == {
            (TRUNCATED, None): [customer],
            ("CUSTOMER_ORDER_HISTORY_T1", None): [order],
        }
        assert [(c.kind, c.entity_type) for c in context.changes] == [
            (NameKind.TABLE, "Shop.Order")
        ]

    def test_each_extra_component_gets_its_own_table(self, model, make_entity):
        """Three unrelated types end up in three tables."""
        first = make_entity("A", TRUNCATED)
        second = make_entity("B", TRUNCATED)
        third = make_entity("C", TRUNCATED)

        tables, _ = group(model, 25)

        assert first.table_name.value == TRUNCATED
        assert second.table_name.value == "CUSTOMER_ORDER_HISTORY_T1"
        assert third.table_name.value == "CUSTOMER_ORDER_HISTORY_T2"
        assert len(tables) == 3

    def test_below_threshold_never_split(self, model, make_entity):
        """Short names shared by unrelated types are intentional."""
        customer = make_entity("Shop.Customer", "Shared")
        order = make_entity("Shop.Order", "Shared")

        tables, context = group(model, 25)

        assert tables == {("Shared", None): [customer, order]}
        assert context.changes == []

    def test_inheritance_keeps_types_together(self, model, make_entity):
        """Base and derived types in one bucket are one component."""
        animal = make_entity("Zoo.Animal", TRUNCATED)
        dog = make_entity("Zoo.Dog", TRUNCATED, base=animal)

        tables, _ = group(model, 25)

        assert tables == {(TRUNCATED, None): [animal, dog]}

    def test_linking_foreign_key_keeps_types_together(self, model, make_entity):
        """Table splitting (same-row foreign key) connects the types."""
        order = make_entity("Shop.Order", TRUNCATED)
        details = make_entity("Shop.OrderDetails", TRUNCATED)
        details.add_foreign_key(
            [details.find_property("Id")], order, "FK_Details_Order", unique=True
        )

        tables, _ = group(model, 25)

        assert tables == {(TRUNCATED, None): [order, details]}

    def test_pinned_component_keeps_name_first_moves(self, model, make_entity):
        """When a later component is pinned, the first component moves instead."""
        customer = make_entity("Shop.Customer", TRUNCATED)
        order = make_entity("Shop.Order", TRUNCATED, table_explicit=True)

        tables, _ = group(model, 25)

        assert order.table_name.value == TRUNCATED
        assert order.table_name.is_explicit
        assert customer.table_name.value == "CUSTOMER_ORDER_HISTORY_T1"
        assert tables == {
            (TRUNCATED, None): [order],
            ("CUSTOMER_ORDER_HISTORY_T1", None): [customer],
        }

    def test_pinned_components_never_renamed(self, model, make_entity):
        """If every component is pinned nothing moves."""
        customer = make_entity("Shop.Customer", TRUNCATED, table_explicit=True)
        order = make_entity("Shop.Order", TRUNCATED, table_explicit=True)

        tables, context = group(model, 25)

        assert customer.table_name.value == TRUNCATED
        assert order.table_name.value == TRUNCATED
        assert tables == {(TRUNCATED, None): [customer, order]}
        assert context.changes == []

    def test_uniquified_name_avoids_existing_tables(self, model, make_entity):
        """New table names do not collide with tables already in the schema."""
        make_entity("Shop.Existing", "CUSTOMER_ORDER_HISTORY_T1")
        make_entity("Shop.Customer", TRUNCATED)
        order = make_entity("Shop.Order", TRUNCATED)

        group(model, 25)

        assert order.table_name.value == "CUSTOMER_ORDER_HISTORY_T2"

    def test_split_is_idempotent(self, model, make_entity):
        """Grouping an already split model changes nothing."""
        make_entity("Shop.Customer", TRUNCATED)
        make_entity("Shop.Order", TRUNCATED)
        first, _ = group(model, 25)

        second, context = group(model, 25)

        assert second == first
        assert context.changes == []

    def test_over_long_shared_name_split(self, model, make_entity):
        """A name longer than the limit is clipped, then the merge is split."""
        customer = make_entity("Shop.Customer", "CUSTOMER_ORDER_HISTORY_TAB")
        order = make_entity("Shop.Order", "CUSTOMER_ORDER_HISTORY_TAB")

        _, context = group(model, 25)

        assert customer.table_name.value == TRUNCATED
        assert order.table_name.value == "CUSTOMER_ORDER_HISTORY_T1"
        assert [(c.entity_type, c.old_name, c.new_name) for c in context.changes] == [
            ("Shop.Customer", "CUSTOMER_ORDER_HISTORY_TAB", TRUNCATED),
            ("Shop.Order", "CUSTOMER_ORDER_HISTORY_TAB", TRUNCATED),
            ("Shop.Order", TRUNCATED, "CUSTOMER_ORDER_HISTORY_T1"),
        ]

    def test_pinned_over_long_name_kept(self, model, make_entity):
        """Pinned table names are never clipped."""
        report = make_entity("Shop.Report", "CUSTOMER_ORDER_HISTORY_TAB", table_explicit=True)

        _, context = group(model, 25)

        assert report.table_name.value == "CUSTOMER_ORDER_HISTORY_TAB"
        assert context.changes == []

    def test_moved_tables_keep_declaration_order(self, model, make_entity):
        """A moved component is listed where its first entity type was declared."""
        make_entity("Shop.Customer", TRUNCATED)
        make_entity("Shop.Order", TRUNCATED)
        make_entity("Shop.Line", "Lines")

        tables, _ = group(model, 25)

        assert list(tables) == [
            (TRUNCATED, None),
            ("CUSTOMER_ORDER_HISTORY_T1", None),
            ("Lines", None),
        ]
