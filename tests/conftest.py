"""Pytest configuration and fixtures for add-to-cart tests."""

from unittest.mock import MagicMock

import pytest

from add_to_cart.config import Settings
from add_to_cart.memory import (
    Cart,
    InMemoryCartManager,
    InMemoryCartProvider,
    InMemoryCatalog,
    OrderItem,
    ProductVariation,
    StaticStoreContext,
    Store,
)
from add_to_cart.tools import AddToCartTool


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def store() -> Store:
    """The default test store."""
    return Store(id="store-1", name="Test Store")


@pytest.fixture
def catalog() -> InMemoryCatalog:
    """Catalog with two published variations and one unpublished."""
    return InMemoryCatalog(
        [
            ProductVariation(id=123, title="Blue Mug", sku="MUG-BLUE"),
            ProductVariation(id=124, title="Error Handling Kit", sku="KIT-ERR"),
            ProductVariation(
                id=300, title="Limited Poster", sku="POSTER", is_published=False
            ),
        ]
    )


@pytest.fixture
def cart_provider() -> InMemoryCartProvider:
    return InMemoryCartProvider()


@pytest.fixture
def cart_manager() -> InMemoryCartManager:
    return InMemoryCartManager(first_item_id=456)


@pytest.fixture
def tool(
    catalog: InMemoryCatalog,
    store: Store,
    cart_provider: InMemoryCartProvider,
    cart_manager: InMemoryCartManager,
    settings: Settings,
) -> AddToCartTool:
    """Tool wired to in-memory collaborators."""
    return AddToCartTool(
        catalog=catalog,
        store_context=StaticStoreContext(store),
        cart_provider=cart_provider,
        cart_manager=cart_manager,
        settings=settings,
    )


# ============================================================================
# Mocked collaborators
# ============================================================================


@pytest.fixture
def mock_catalog() -> MagicMock:
    """Catalog returning the Blue Mug for any ID."""
    catalog = MagicMock(spec=InMemoryCatalog)
    catalog.get_variation.return_value = ProductVariation(id=123, title="Blue Mug")
    return catalog


@pytest.fixture
def mock_store_context(store: Store) -> MagicMock:
    context = MagicMock(spec=StaticStoreContext)
    context.current_store.return_value = store
    return context


@pytest.fixture
def mock_cart_provider(store: Store) -> MagicMock:
    """Provider with an existing cart for every scope."""
    provider = MagicMock(spec=InMemoryCartProvider)
    provider.get_cart.return_value = Cart(id=7, cart_type="default", store_id=store.id)
    return provider


@pytest.fixture
def mock_cart_manager() -> MagicMock:
    manager = MagicMock(spec=InMemoryCartManager)
    manager.add_entity.return_value = OrderItem(
        id=456, variation_id=123, title="Blue Mug", quantity=1
    )
    return manager


@pytest.fixture
def mocked_tool(
    mock_catalog: MagicMock,
    mock_store_context: MagicMock,
    mock_cart_provider: MagicMock,
    mock_cart_manager: MagicMock,
    settings: Settings,
) -> AddToCartTool:
    """Tool wired to mocked collaborators."""
    return AddToCartTool(
        catalog=mock_catalog,
        store_context=mock_store_context,
        cart_provider=mock_cart_provider,
        cart_manager=mock_cart_manager,
        settings=settings,
    )
