"""
Sort compilation.

Maps a requested sort name and direction to index sort fields.
"""
from typing import Optional

from internal.domain.search_criteria import (
    DEFAULT_SORT_ORDER,
    POSITION_SORT_PREFIX,
    SearchCriteria,
)
from internal.domain.value_objects import SortDataType, SortField, SortSpec


class SortCompiler:
    """
    Compiles sort requests against criteria under construction.

    Known sort names: price, position, name, rating, reviews. Anything else
    falls back to the default sort order and its own direction.
    """

    def __init__(self, default_sort: SortSpec = DEFAULT_SORT_ORDER) -> None:
        """
        Initialize the compiler.

        Args:
            default_sort: Sort used for absent or unknown sort names.
        """
        self._default_sort = default_sort

    def compile(
        self,
        sort_name: Optional[str],
        is_descending: bool,
        criteria: SearchCriteria,
    ) -> SortSpec:
        """
        Compile a sort specification.

        Args:
            sort_name: Requested sort name (any case), or None.
            is_descending: Requested direction.
            criteria: Criteria providing catalog, category, currency,
                pricelists and review field names.

        Returns:
            Sort specification.
        """
        name = (sort_name or "").lower()

        if name == "price":
            return self._price_sort(is_descending, criteria)
        if name == "position":
            field_name = "".join(
                [POSITION_SORT_PREFIX, criteria.catalog or "", criteria.category_id or ""]
            ).lower()
            return SortSpec(fields=(
                SortField(
                    name=field_name,
                    is_descending=is_descending,
                    ignore_if_field_missing=True,
                ),
            ))
        if name == "name":
            return SortSpec.by("name", is_descending)
        if name == "rating":
            return SortSpec.by(criteria.reviews_average_field, is_descending)
        if name == "reviews":
            return SortSpec.by(criteria.reviews_total_field, is_descending)

        return self._default_sort

    @staticmethod
    def _price_sort(is_descending: bool, criteria: SearchCriteria) -> SortSpec:
        # Not every product has a price in every pricelist
        currency = (criteria.currency or "").lower()
        return SortSpec(fields=tuple(
            SortField(
                name=f"price_{currency}_{pricelist.lower()}",
                is_descending=is_descending,
                data_type=SortDataType.DOUBLE,
                ignore_if_field_missing=True,
            )
            for pricelist in criteria.pricelists
        ))
