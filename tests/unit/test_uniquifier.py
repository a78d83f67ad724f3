"""Tests for identifier truncation and uniquification."""

import pytest

from sharedtable.exceptions import InvalidIdentifierLengthError
from sharedtable.naming.uniquifier import truncate, uniquify


class TestTruncate:
    """Tests for truncate()."""

    def test_short_name_unchanged(self):
        """Names within the limit are returned as-is."""
        assert truncate("Orders", 10) == "Orders"

    def test_clips_to_max_length(self):
        """Long names are clipped to the limit."""
        assert truncate("CustomerOrders", 8) == "Customer"

    def test_suffix_kept_whole(self):
        """The base is shortened so the suffix still fits."""
        assert truncate("CustomerOrders", 8, 12) == "Custom12"
        assert truncate("Orders", 10, 3) == "Orders3"

    def test_suffix_longer_than_limit(self):
        """A suffix that cannot fit at all is a configuration error."""
        with pytest.raises(InvalidIdentifierLengthError):
            truncate("Orders", 1, 10)

    @pytest.mark.parametrize("max_length", [0, -5, True, "30"])
    def test_invalid_max_length(self, max_length):
        """Max length must be a positive integer."""
        with pytest.raises(InvalidIdentifierLengthError) as exc_info:
            truncate("Orders", max_length)
        assert "positive integer" in str(exc_info.value)


class TestUniquify:
    """Tests for uniquify()."""

    def test_free_candidate_returned(self):
        """A free candidate is used unchanged."""
        assert uniquify("Color", {"Size"}, 30) == "Color"

    def test_first_suffix_is_one(self):
        """Taken names get suffix 1 first."""
        assert uniquify("Color", {"Color"}, 30) == "Color1"

    def test_skips_taken_suffixes(self):
        """Suffixes already taken are skipped."""
        assert uniquify("Color", {"Color", "Color1", "Color2"}, 30) == "Color3"

    def test_free_after_trimming(self):
        """A candidate that is free once trimmed needs no suffix."""
        assert uniquify("CustomerOrders", {"CustomerOrders"}, 10) == "CustomerOr"

    def test_suffix_truncates_base(self):
        """The suffixed name still respects the limit."""
        name = uniquify("CustomerOrders", {"CustomerOr"}, 10)
        assert name == "CustomerO1"
        assert len(name) == 10

    def test_works_with_dict_keys(self):
        """Any container works, including used-name maps."""
        used = {"IX_Animals_Color": object()}
        assert uniquify("IX_Animals_Color", used, 63) == "IX_Animals_Color1"

    def test_key_scopes_lookup(self):
        """The key function decides what counts as taken (e.g. per schema)."""
        used = {("Orders", "sales")}
        assert uniquify("Orders", used, 30, key=lambda n: (n, "dbo")) == "Orders"
        assert uniquify("Orders", used, 30, key=lambda n: (n, "sales")) == "Orders1"
