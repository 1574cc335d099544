"""
Pytest configuration and fixtures.
"""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from internal.domain.filters import FilterDefinition, FilteredBrowsing, FilterKind
from internal.domain.store import Store
from internal.domain.value_objects import FilterValue


@pytest.fixture
def color_filter():
    """Attribute filter with two colors."""
    return FilterDefinition(
        key="Color",
        kind=FilterKind.ATTRIBUTE,
        values=(
            FilterValue(id="red", display_value="Red"),
            FilterValue(id="blue", display_value="Blue"),
        ),
    )


@pytest.fixture
def brand_filter():
    """Attribute filter with two brands."""
    return FilterDefinition(
        key="Brand",
        kind=FilterKind.ATTRIBUTE,
        values=(
            FilterValue(id="acme", display_value="Acme"),
            FilterValue(id="globex", display_value="Globex"),
        ),
    )


@pytest.fixture
def weight_filter():
    """Numeric range filter."""
    return FilterDefinition(
        key="Weight",
        kind=FilterKind.RANGE,
        values=(
            FilterValue(id="light", display_value="Under 1 kg", upper=Decimal("1")),
            FilterValue(id="heavy", display_value="1 kg and more", lower=Decimal("1")),
        ),
    )


@pytest.fixture
def price_usd_filter():
    """USD price range filter."""
    return FilterDefinition(
        key="Price",
        kind=FilterKind.PRICE_RANGE,
        currency="USD",
        values=(
            FilterValue(id="under-100", upper=Decimal("100")),
            FilterValue(id="100-500", lower=Decimal("100"), upper=Decimal("500")),
        ),
    )


@pytest.fixture
def price_eur_filter():
    """EUR price range filter."""
    return FilterDefinition(
        key="Price",
        kind=FilterKind.PRICE_RANGE,
        currency="EUR",
        values=(FilterValue(id="under-100", upper=Decimal("100")),),
    )


@pytest.fixture
def filter_catalog(color_filter, brand_filter, weight_filter, price_usd_filter, price_eur_filter):
    """Filter catalog in provisioning order."""
    return [color_filter, brand_filter, weight_filter, price_usd_filter, price_eur_filter]


@pytest.fixture
def store(color_filter, brand_filter, weight_filter, price_usd_filter, price_eur_filter):
    """Store with filtered browsing configured."""
    store = Store(
        id="electronics",
        name="Electronics",
        catalog="Main",
        default_language="en-US",
        default_currency="USD",
        fulfillment_center_id="fc-1",
    )
    store.filtered_browsing = FilteredBrowsing(
        attributes=[color_filter, brand_filter],
        ranges=[weight_filter],
        prices=[price_usd_filter, price_eur_filter],
    )
    return store


@pytest.fixture
def mock_store_repository(store):
    """Store repository returning the sample store."""
    repository = MagicMock()
    repository.get_by_id = AsyncMock(
        side_effect=lambda store_id: store if store_id == store.id else None
    )
    repository.save_dynamic_properties = AsyncMock()
    return repository
