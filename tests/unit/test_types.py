"""Tests for core types."""

import pytest
from pydantic import ValidationError

from sharedtable.core.types import (
    FieldType,
    ForeignKeySpec,
    IndexSpec,
    KeySpec,
    ModelSpec,
    NameChange,
    NameKind,
    NameSource,
    OnDeleteActionType,
    PropertySpec,
    ResolutionReport,
)


class TestEnums:
    """Tests for the string enums."""

    def test_field_types(self):
        """All documented field types should exist."""
        expected = ["string", "text", "int", "float", "bool", "datetime", "json", "uuid"]
        assert FieldType.values() == expected

    def test_name_sources(self):
        """Names are either convention-derived or explicit."""
        assert NameSource.values() == ["convention", "explicit"]
        assert NameSource("explicit") == NameSource.EXPLICIT

    def test_on_delete_actions(self):
        """Referential actions use their SQL-ish spelling."""
        assert OnDeleteActionType.values() == ["CASCADE", "SET_NULL", "RESTRICT", "NO_ACTION"]

    def test_name_kind_formats_as_value(self):
        """Kinds render as plain strings in messages."""
        assert f"{NameKind.FOREIGN_KEY}" == "foreign_key"
        assert str(NameKind.INDEX) == "index"


class TestInputSpecs:
    """Tests for the model document specs."""

    def test_minimal_property(self):
        """A property needs only a name."""
        spec = PropertySpec(name="Color")
        assert spec.column_name is None
        assert spec.column_name_explicit is False
        assert spec.type == "string"
        assert spec.nullable is True
        assert spec.member is None

    def test_key_requires_properties(self):
        """Keys must cover at least one property."""
        with pytest.raises(ValidationError):
            KeySpec(properties=[])

    def test_foreign_key_defaults(self):
        """Foreign keys default to the principal's primary key and no action."""
        spec = ForeignKeySpec(properties=["OwnerId"], principal="Zoo.Owner")
        assert spec.principal_key is None
        assert spec.on_delete == "NO_ACTION"
        assert spec.unique is False

    def test_index_origin_default(self):
        """Declared indexes are explicit unless stated otherwise."""
        assert IndexSpec(properties=["Color"]).origin == "explicit"
        assert IndexSpec(properties=["Color"], origin="convention").origin == "convention"

    def test_invalid_field_type(self):
        """Unknown store types are rejected."""
        with pytest.raises(ValidationError):
            PropertySpec(name="Color", type="colour")

    def test_max_identifier_length_positive(self):
        """A stored identifier length must be positive."""
        assert ModelSpec(max_identifier_length=63).max_identifier_length == 63
        with pytest.raises(ValidationError):
            ModelSpec(max_identifier_length=0)


class TestResolutionReport:
    """Tests for ResolutionReport."""

    def test_empty_report_unchanged(self):
        """A report without renames says so."""
        report = ResolutionReport(max_identifier_length=63)
        assert report.changed is False
        assert report.tables == []
        assert report.collisions == []

    def test_report_serializes(self):
        """Reports are JSON-serializable with plain string kinds."""
        change = NameChange(
            kind=NameKind.COLUMN,
            entity_type="Zoo.Cat",
            member="Color",
            table="Animals",
            old_name="Color",
            new_name="Cat_Color",
        )
        report = ResolutionReport(max_identifier_length=63, changes=[change])

        assert report.changed is True
        data = report.model_dump(mode="json")
        assert data["changes"][0]["kind"] == "column"
        assert data["changes"][0]["new_name"] == "Cat_Color"
