"""
Unit tests for SortCompiler.
"""
from internal.domain.search_criteria import DEFAULT_SORT_ORDER, SearchCriteria
from internal.domain.value_objects import SortDataType, SortField, SortSpec
from internal.usecase.sort_compiler import SortCompiler


def _criteria(**overrides) -> SearchCriteria:
    values = {
        "catalog": "main",
        "category_id": "TVs",
        "currency": "USD",
        "pricelists": ["Gold", "Silver"],
    }
    values.update(overrides)
    return SearchCriteria(**values)


class TestSortCompiler:
    """Tests for sort compilation."""

    def test_price_sorts_by_every_pricelist(self):
        """Test one double field per pricelist, in pricelist order."""
        spec = SortCompiler().compile("price", True, _criteria())

        assert spec.fields == (
            SortField(
                name="price_usd_gold",
                is_descending=True,
                data_type=SortDataType.DOUBLE,
                ignore_if_field_missing=True,
            ),
            SortField(
                name="price_usd_silver",
                is_descending=True,
                data_type=SortDataType.DOUBLE,
                ignore_if_field_missing=True,
            ),
        )

    def test_price_without_pricelists_is_empty(self):
        """Test that price sort without pricelists sorts by nothing."""
        spec = SortCompiler().compile("price", False, _criteria(pricelists=[]))

        assert spec.is_empty

    def test_position_field_is_catalog_and_category(self):
        """Test the per-category position field."""
        spec = SortCompiler().compile("Position", False, _criteria())

        assert spec.fields == (
            SortField(name="sortmaintvs", ignore_if_field_missing=True),
        )

    def test_position_without_category(self):
        """Test the position field at catalog root."""
        spec = SortCompiler().compile("position", True, _criteria(category_id=None))

        assert spec.fields[0].name == "sortmain"
        assert spec.fields[0].is_descending is True

    def test_name_sort(self):
        """Test sort by name."""
        assert SortCompiler().compile("NAME", True, _criteria()) == SortSpec.by("name", True)

    def test_rating_and_reviews_use_configured_fields(self):
        """Test review sorts use the criteria field names."""
        criteria = _criteria(reviews_average_field="avg", reviews_total_field="count")
        compiler = SortCompiler()

        assert compiler.compile("rating", True, criteria) == SortSpec.by("avg", True)
        assert compiler.compile("reviews", False, criteria) == SortSpec.by("count", False)

    def test_unknown_and_missing_names_use_default(self):
        """Test fallback to the default sort order."""
        compiler = SortCompiler()

        assert compiler.compile(None, True, _criteria()) == DEFAULT_SORT_ORDER
        assert compiler.compile("popularity", True, _criteria()) == DEFAULT_SORT_ORDER

    def test_custom_default(self):
        """Test a configured default sort."""
        default = SortSpec.by("created", True)

        assert SortCompiler(default_sort=default).compile("", False, _criteria()) == default
