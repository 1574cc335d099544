"""
Domain model for stores and catalog configuration.

Stores, catalog properties and inventory records are owned by other
services; these entities hold what catalog search reads from them.
"""
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Optional

from .filters import FILTERED_BROWSING_PROPERTY, FilteredBrowsing


@dataclass
class Store:
    """
    Store entity.

    Attributes:
        id: Store identifier.
        name: Display name.
        catalog: Catalog id the store sells from.
        default_language: Default language code.
        default_currency: Default currency code.
        fulfillment_center_id: Fulfillment center used for inventory.
        dynamic_properties: Named string settings attached to the store.
    """

    id: str
    name: str
    catalog: str
    default_language: Optional[str] = None
    default_currency: Optional[str] = None
    fulfillment_center_id: Optional[str] = None
    dynamic_properties: dict[str, str] = field(default_factory=dict)

    @property
    def filtered_browsing(self) -> Optional[FilteredBrowsing]:
        """Stored filter configuration, or None when not configured."""
        raw = self.dynamic_properties.get(FILTERED_BROWSING_PROPERTY)
        if not raw:
            return None
        return FilteredBrowsing.from_json(raw)

    @filtered_browsing.setter
    def filtered_browsing(self, browsing: FilteredBrowsing) -> None:
        self.dynamic_properties[FILTERED_BROWSING_PROPERTY] = browsing.to_json()

    def selected_filter_keys(self) -> list[str]:
        """Keys of attribute filters selected for this store, in order."""
        browsing = self.filtered_browsing
        if browsing is None:
            return []
        return browsing.selected_keys()


@dataclass(frozen=True)
class CatalogProperty:
    """A catalog property that can back an attribute filter."""

    id: str
    name: str
    catalog_id: str


@dataclass(frozen=True)
class PropertyDictionaryValue:
    """
    A dictionary value of a catalog property.

    Attributes:
        alias: Value identifier used in the index.
        value: Display value.
    """

    alias: Optional[str]
    value: Optional[str]


@dataclass(frozen=True)
class FilterProperty:
    """A catalog property as shown in the store filter settings."""

    name: str
    is_selected: bool = False


@dataclass(frozen=True)
class InventoryInfo:
    """Stock of one product in one fulfillment center."""

    product_id: str
    fulfillment_center_id: str
    in_stock_quantity: int = 0
    reserved_quantity: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "product_id": self.product_id,
            "fulfillment_center_id": self.fulfillment_center_id,
            "in_stock_quantity": self.in_stock_quantity,
            "reserved_quantity": self.reserved_quantity,
        }


class SearchResponseGroup(IntFlag):
    """Parts of a search response a client asks for."""

    NONE = 0
    WITH_PRODUCTS = 1
    WITH_AGGREGATIONS = 2
    WITH_PROPERTIES = 4
    DEFAULT = WITH_PRODUCTS | WITH_AGGREGATIONS
