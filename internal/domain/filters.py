"""
Domain model for browse filters.

A filter catalog is the list of filter definitions available for one
search context. It is provisioned at runtime from store configuration,
so definitions are plain data matched by key rather than typed classes.
"""
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .errors import DomainValidationError
from .value_objects import FilterValue


class FilterKind(str, Enum):
    """
    Kinds of filter definitions.

    PRICE_RANGE is the only currency-scoped kind: a price filter exists
    once per currency under the same key.
    """

    ATTRIBUTE = "attribute"
    RANGE = "range"
    PRICE_RANGE = "price_range"


@dataclass(frozen=True)
class FilterDefinition:
    """
    A filter the search engine can constrain and aggregate on.

    Attributes:
        key: Filter key, compared case-insensitively.
        kind: Filter kind.
        values: Values the filter advertises.
        currency: ISO currency code, required for price-range filters.
        field: Index field name (defaults to the lower-cased key).
    """

    key: str
    kind: FilterKind = FilterKind.ATTRIBUTE
    values: tuple[FilterValue, ...] = ()
    currency: Optional[str] = None
    field: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate definition constraints."""
        if not self.key:
            raise DomainValidationError("Filter key cannot be empty")
        if self.kind is FilterKind.PRICE_RANGE and not self.currency:
            raise DomainValidationError(
                f"Price range filter '{self.key}' requires a currency"
            )

    @property
    def index_field(self) -> str:
        """Index field the filter constrains."""
        return (self.field or self.key).lower()

    @property
    def is_currency_scoped(self) -> bool:
        """Whether the definition only applies to one currency."""
        return self.kind is FilterKind.PRICE_RANGE

    def matches(self, key: str, currency: Optional[str]) -> bool:
        """
        Check whether the definition answers a requested key.

        Keys compare case-insensitively. Price-range definitions must also
        match the request currency case-insensitively.

        Args:
            key: Requested filter key.
            currency: Request currency.

        Returns:
            True if the definition matches.
        """
        if self.key.lower() != key.lower():
            return False
        return self.accepts_currency(currency)

    def accepts_currency(self, currency: Optional[str]) -> bool:
        """Check the currency scope; non price-range kinds accept any currency."""
        if not self.is_currency_scoped:
            return True
        return currency is not None and self.currency.lower() == currency.lower()

    def find_value(self, value_id: str) -> Optional[FilterValue]:
        """Find an advertised value by exact id."""
        for value in self.values:
            if value.id == value_id:
                return value
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "key": self.key,
            "kind": self.kind.value,
            "currency": self.currency,
            "field": self.field,
            "values": [v.to_dict() for v in self.values],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FilterDefinition":
        """Build a definition from its dictionary representation."""
        return cls(
            key=data["key"],
            kind=FilterKind(data.get("kind") or FilterKind.ATTRIBUTE.value),
            currency=data.get("currency"),
            field=data.get("field"),
            values=tuple(FilterValue.from_dict(v) for v in data.get("values") or []),
        )


@dataclass(frozen=True)
class AppliedFilter:
    """
    A filter definition bound to the values a request asked for.

    Requested values are not checked against the advertised values; the
    search engine decides what an unknown value means.
    """

    filter: FilterDefinition
    values: tuple[str, ...]

    @property
    def key(self) -> str:
        """Key of the bound definition."""
        return self.filter.key

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "key": self.filter.key,
            "kind": self.filter.kind.value,
            "currency": self.filter.currency,
            "values": list(self.values),
        }


@dataclass(frozen=True)
class FilterContext:
    """
    Context a filter catalog is provisioned for.

    Attributes:
        store_id: Store identifier.
        category_id: Category the search is scoped to, if any.
    """

    store_id: str
    category_id: Optional[str] = None

    @property
    def cache_key(self) -> str:
        """Cache key for the filter catalog of this context."""
        return f"search:filters:{self.store_id}:{self.category_id or '*root*'}"


FILTERED_BROWSING_PROPERTY = "FilteredBrowsing"


@dataclass
class FilteredBrowsing:
    """
    Per-store filter configuration persisted on the store.

    Attributes:
        attributes: Attribute filters in selection order.
        ranges: Numeric attribute range filters.
        prices: Price range filters, one per currency.
    """

    attributes: list[FilterDefinition] = field(default_factory=list)
    ranges: list[FilterDefinition] = field(default_factory=list)
    prices: list[FilterDefinition] = field(default_factory=list)

    def selected_keys(self) -> list[str]:
        """Keys of the selected attribute filters, in stored order."""
        return [a.key for a in self.attributes]

    def definitions(self) -> list[FilterDefinition]:
        """All configured definitions: attributes, ranges, then prices."""
        return [*self.attributes, *self.ranges, *self.prices]

    def to_json(self) -> str:
        """Serialize for storage in a store dynamic property."""
        return json.dumps(
            {
                "attributes": [a.to_dict() for a in self.attributes],
                "ranges": [r.to_dict() for r in self.ranges],
                "prices": [p.to_dict() for p in self.prices],
            },
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, raw: str) -> "FilteredBrowsing":
        """
        Parse a stored configuration.

        Kinds are forced by section so a hand-edited payload cannot move a
        definition into the wrong one.
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DomainValidationError(f"Invalid filtered browsing payload: {e}")

        return cls(
            attributes=_section(data.get("attributes"), FilterKind.ATTRIBUTE),
            ranges=_section(data.get("ranges"), FilterKind.RANGE),
            prices=_section(data.get("prices"), FilterKind.PRICE_RANGE),
        )


def _section(items: Optional[Iterable[dict]], kind: FilterKind) -> list[FilterDefinition]:
    return [
        FilterDefinition.from_dict({**item, "kind": kind.value})
        for item in items or []
    ]
