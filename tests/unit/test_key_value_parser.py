"""
Unit tests for term and facet parsing.
"""
from internal.domain.value_objects import KeyValues
from internal.usecase.key_value_parser import parse_key_values


class TestParseKeyValues:
    """Tests for parse_key_values."""

    def test_splits_key_and_values(self):
        """Test a single entry with several values."""
        assert parse_key_values(["Color:red,blue"]) == [
            KeyValues(key="Color", values=("red", "blue")),
        ]

    def test_none_and_empty_input(self):
        """Test that missing input yields no groups."""
        assert parse_key_values(None) == []
        assert parse_key_values([]) == []

    def test_entries_without_colon_are_skipped(self):
        """Test that malformed entries are ignored."""
        assert parse_key_values(["Color", "Brand:acme"]) == [
            KeyValues(key="Brand", values=("acme",)),
        ]

    def test_splits_on_first_colon_only(self):
        """Test that values may contain colons."""
        assert parse_key_values(["Time:10:30"]) == [
            KeyValues(key="Time", values=("10:30",)),
        ]

    def test_same_key_is_merged_with_distinct_values(self):
        """Test that repeated keys merge in first-seen order."""
        result = parse_key_values(["Color:red,blue", "Brand:acme", "Color:blue,green"])

        assert result == [
            KeyValues(key="Color", values=("red", "blue", "green")),
            KeyValues(key="Brand", values=("acme",)),
        ]

    def test_keys_are_case_sensitive(self):
        """Test that keys differing in case stay separate groups."""
        result = parse_key_values(["Color:red", "color:blue"])

        assert [g.key for g in result] == ["Color", "color"]

    def test_empty_values_are_dropped(self):
        """Test that empty value segments are discarded."""
        assert parse_key_values(["Color:red,,blue,", "Size:"]) == [
            KeyValues(key="Color", values=("red", "blue")),
            KeyValues(key="Size", values=()),
        ]
