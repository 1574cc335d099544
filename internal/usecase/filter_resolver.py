"""
Filter resolution for search terms and facets.

Binds parsed key/value groups to definitions of the current filter catalog.
"""
from typing import Optional, Sequence

from internal.domain.errors import AmbiguousFilterError
from internal.domain.filters import AppliedFilter, FilterDefinition
from internal.domain.value_objects import KeyValues
from internal.infrastructure.metrics import DROPPED_FILTER_REQUESTS
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


# Legacy catch-all key: its values name filter values, not a filter
TAGS_KEY = "tags"


class FilterResolver:
    """
    Resolves requested filter keys against a filter catalog.

    A key matches a definition case-insensitively; price-range definitions
    must also match the request currency. Keys that match nothing are
    dropped, except "tags", whose values are looked up one by one in the
    value sets of all definitions.
    """

    def find_filter(
        self,
        filters: Sequence[FilterDefinition],
        key: str,
        currency: Optional[str],
    ) -> Optional[FilterDefinition]:
        """
        Find the single definition answering a key.

        Args:
            filters: Filter catalog.
            key: Requested key.
            currency: Request currency.

        Returns:
            The matching definition, or None.

        Raises:
            AmbiguousFilterError: If more than one definition matches.
        """
        matches = [f for f in filters if f.matches(key, currency)]

        if len(matches) > 1:
            raise AmbiguousFilterError(key, currency, len(matches))

        return matches[0] if matches else None

    def resolve(
        self,
        filters: Sequence[FilterDefinition],
        currency: Optional[str],
        group: KeyValues,
        source: str = "terms",
    ) -> list[AppliedFilter]:
        """
        Resolve one term or facet group into applied filters.

        Args:
            filters: Filter catalog.
            currency: Request currency.
            group: Parsed key/value group.
            source: Request field the group came from, for diagnostics.

        Returns:
            Zero or more applied filters.
        """
        definition = self.find_filter(filters, group.key, currency)

        if definition is not None:
            return [AppliedFilter(filter=definition, values=group.values)]

        if group.key != TAGS_KEY:
            logger.debug("Dropping unknown filter key", key=group.key, source=source)
            DROPPED_FILTER_REQUESTS.labels(source=source, reason="unknown_key").inc()
            return []

        return self._resolve_tags(filters, currency, group, source)

    def _resolve_tags(
        self,
        filters: Sequence[FilterDefinition],
        currency: Optional[str],
        group: KeyValues,
        source: str,
    ) -> list[AppliedFilter]:
        # Price filters of other currencies never own a tag
        candidates = [f for f in filters if f.accepts_currency(currency)]
        applied: list[AppliedFilter] = []

        for value in group.values:
            owner = next(
                (f for f in candidates if f.find_value(value) is not None),
                None,
            )

            if owner is None:
                logger.debug("Dropping unmatched tag value", value=value, source=source)
                DROPPED_FILTER_REQUESTS.labels(source=source, reason="unmatched_tag").inc()
                continue

            applied.append(AppliedFilter(filter=owner, values=(value,)))

        return applied
