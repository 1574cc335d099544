"""
Unit tests for domain entities.
"""
import pytest
from decimal import Decimal

from internal.domain.errors import AmbiguousFilterError, DomainValidationError, StoreNotFoundError
from internal.domain.filters import (
    FILTERED_BROWSING_PROPERTY,
    AppliedFilter,
    FilterContext,
    FilterDefinition,
    FilteredBrowsing,
    FilterKind,
)
from internal.domain.search_criteria import DEFAULT_SORT_ORDER, DEFAULT_TAKE, SearchCriteria
from internal.domain.store import SearchResponseGroup, Store
from internal.domain.value_objects import FilterValue, SortSpec


class TestFilterValue:
    """Tests for FilterValue value object."""

    def test_empty_id_raises_error(self):
        """Test that an empty value id is rejected."""
        with pytest.raises(DomainValidationError):
            FilterValue(id="")

    def test_inverted_bounds_raise_error(self):
        """Test that lower bound above upper bound is rejected."""
        with pytest.raises(DomainValidationError) as exc_info:
            FilterValue(id="bad", lower=Decimal("10"), upper=Decimal("5"))

        assert "lower bound exceeds upper bound" in str(exc_info.value)

    def test_is_range(self):
        """Test range detection by bounds."""
        assert FilterValue(id="cheap", upper=Decimal("10")).is_range
        assert not FilterValue(id="red").is_range

    def test_from_dict_parses_bounds(self):
        """Test that bounds stored as strings come back as decimals."""
        value = FilterValue.from_dict({"id": "mid", "lower": "10", "upper": "20.5"})

        assert value.lower == Decimal("10")
        assert value.upper == Decimal("20.5")
        assert value.display_value == ""


class TestFilterDefinition:
    """Tests for FilterDefinition."""

    def test_empty_key_raises_error(self):
        """Test that an empty key is rejected."""
        with pytest.raises(DomainValidationError):
            FilterDefinition(key="")

    def test_price_range_requires_currency(self):
        """Test that price range filters must carry a currency."""
        with pytest.raises(DomainValidationError) as exc_info:
            FilterDefinition(key="Price", kind=FilterKind.PRICE_RANGE)

        assert "requires a currency" in str(exc_info.value)

    def test_matches_key_case_insensitively(self, color_filter):
        """Test that keys compare ignoring case."""
        assert color_filter.matches("color", None)
        assert color_filter.matches("COLOR", "USD")
        assert not color_filter.matches("colour", None)

    def test_price_range_matches_currency(self, price_usd_filter):
        """Test that price filters only match their own currency."""
        assert price_usd_filter.matches("price", "usd")
        assert not price_usd_filter.matches("price", "EUR")
        assert not price_usd_filter.matches("price", None)

    def test_index_field_defaults_to_lowercased_key(self, color_filter):
        """Test index field derivation."""
        assert color_filter.index_field == "color"
        assert FilterDefinition(key="Color", field="Colour_Code").index_field == "colour_code"

    def test_find_value_is_exact(self, color_filter):
        """Test that value lookup compares ids exactly."""
        assert color_filter.find_value("red").display_value == "Red"
        assert color_filter.find_value("RED") is None


class TestFilteredBrowsing:
    """Tests for FilteredBrowsing store configuration."""

    def test_json_keeps_order_and_kinds(self, color_filter, weight_filter, price_usd_filter):
        """Test that stored configuration parses back in section order."""
        browsing = FilteredBrowsing(
            attributes=[color_filter],
            ranges=[weight_filter],
            prices=[price_usd_filter],
        )

        parsed = FilteredBrowsing.from_json(browsing.to_json())

        assert [d.key for d in parsed.definitions()] == ["Color", "Weight", "Price"]
        assert parsed.prices[0].kind is FilterKind.PRICE_RANGE
        assert parsed.prices[0].currency == "USD"
        assert parsed.ranges[0].values[0].upper == Decimal("1")

    def test_kind_is_forced_by_section(self):
        """Test that a definition's kind follows the section it is stored in."""
        raw = '{"ranges": [{"key": "Size", "kind": "attribute", "values": []}]}'

        parsed = FilteredBrowsing.from_json(raw)

        assert parsed.ranges[0].kind is FilterKind.RANGE
        assert parsed.attributes == []

    def test_invalid_json_raises_error(self):
        """Test that a malformed payload is a validation error."""
        with pytest.raises(DomainValidationError):
            FilteredBrowsing.from_json("{not json")


class TestStore:
    """Tests for Store entity."""

    def test_store_without_configuration(self):
        """Test a store with no filtered browsing property."""
        store = Store(id="s1", name="Store", catalog="main")

        assert store.filtered_browsing is None
        assert store.selected_filter_keys() == []

    def test_filtered_browsing_is_stored_as_dynamic_property(self, store):
        """Test that filtered browsing lives in a dynamic property."""
        assert FILTERED_BROWSING_PROPERTY in store.dynamic_properties
        assert store.selected_filter_keys() == ["Color", "Brand"]


class TestFilterContext:
    """Tests for FilterContext."""

    def test_cache_key_for_root_and_category(self):
        """Test cache keys with and without a category."""
        assert FilterContext(store_id="s1").cache_key == "search:filters:s1:*root*"
        assert FilterContext(store_id="s1", category_id="tv").cache_key == "search:filters:s1:tv"


class TestSearchCriteria:
    """Tests for SearchCriteria."""

    def test_defaults(self):
        """Test default take, sort and fuzzy flag."""
        criteria = SearchCriteria(catalog="main")

        assert criteria.take == DEFAULT_TAKE
        assert criteria.sort == DEFAULT_SORT_ORDER
        assert criteria.is_fuzzy_search is True
        assert criteria.filters == []
        assert criteria.applied_filters == []

    def test_apply_requires_registered_filter(self, color_filter):
        """Test that only registered definitions can be applied."""
        criteria = SearchCriteria(catalog="main")

        with pytest.raises(DomainValidationError):
            criteria.apply(AppliedFilter(filter=color_filter, values=("red",)))

        criteria.add_filter(color_filter)
        criteria.apply(AppliedFilter(filter=color_filter, values=("red",)))

        assert criteria.applied_filters[0].key == "Color"

    def test_to_dict(self, color_filter):
        """Test dictionary representation."""
        criteria = SearchCriteria(catalog="main", sort=SortSpec.by("name", True))
        criteria.add_filter(color_filter)

        data = criteria.to_dict()

        assert data["catalog"] == "main"
        assert data["filters"][0]["key"] == "Color"
        assert data["sort"]["fields"][0] == {
            "name": "name",
            "is_descending": True,
            "data_type": "default",
            "ignore_if_field_missing": False,
        }


class TestErrors:
    """Tests for domain errors."""

    def test_store_not_found_message(self):
        """Test store not found error message."""
        error = StoreNotFoundError("missing")

        assert error.store_id == "missing"
        assert "missing" in error.message

    def test_ambiguous_filter_carries_details(self):
        """Test ambiguous filter error attributes."""
        error = AmbiguousFilterError("Color", "USD", 2)

        assert error.key == "Color"
        assert error.currency == "USD"
        assert error.matches == 2


class TestSearchResponseGroup:
    """Tests for SearchResponseGroup flags."""

    def test_default_includes_products_and_aggregations(self):
        """Test the default response group."""
        group = SearchResponseGroup.DEFAULT

        assert group & SearchResponseGroup.WITH_PRODUCTS
        assert group & SearchResponseGroup.WITH_AGGREGATIONS
        assert not group & SearchResponseGroup.WITH_PROPERTIES
