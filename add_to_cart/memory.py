"""In-memory collaborators.

Process-local catalog, store context, cart provider and cart manager.
They back the MCP server and the tests; state is lost on restart.
"""

import itertools
import threading
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

from add_to_cart.ports import EntityId
from add_to_cart.schema import parse_quantity

logger = structlog.get_logger()


# ============================================================================
# Entities
# ============================================================================


@dataclass
class Store:
    id: EntityId
    name: str = ""


@dataclass
class Customer:
    id: EntityId
    email: str | None = None


@dataclass
class ProductVariation:
    id: int
    title: str
    sku: str | None = None
    is_published: bool = True


@dataclass
class OrderItem:
    """A cart line item."""

    id: int
    variation_id: EntityId
    title: str
    quantity: Decimal


@dataclass
class Cart:
    """A cart scoped to a cart type, a store and an optional customer."""

    id: int
    cart_type: str
    store_id: EntityId
    customer_id: EntityId | None = None
    items: list[OrderItem] = field(default_factory=list)

    def find_item(self, variation_id: EntityId) -> OrderItem | None:
        """Get the first line item for a variation."""
        for item in self.items:
            if item.variation_id == variation_id:
                return item
        return None


# ============================================================================
# Catalog
# ============================================================================


class InMemoryCatalog:
    """Product variations held in a dict."""

    def __init__(self, variations: list[ProductVariation] | None = None) -> None:
        self._variations: dict[int, ProductVariation] = {}
        for variation in variations or []:
            self.add(variation)

    def add(self, variation: ProductVariation) -> None:
        self._variations[variation.id] = variation

    def get_variation(self, variation_id: int) -> ProductVariation | None:
        return self._variations.get(variation_id)

    def __len__(self) -> int:
        return len(self._variations)


class VariationSeed(BaseModel):
    """One variation entry of a catalog seed file."""

    id: int = Field(..., gt=0)
    title: str
    sku: str | None = None
    published: bool = True


class CatalogSeed(BaseModel):
    """Catalog seed file contents."""

    variations: list[VariationSeed] = Field(default_factory=list)


def load_catalog(path: Path) -> InMemoryCatalog:
    """Build a catalog from a JSON seed file.

    Example file:
        {"variations": [{"id": 123, "title": "Blue Mug", "sku": "MUG-BLUE"}]}

    Args:
        path: Path to the seed file.

    Returns:
        Catalog holding the seeded variations.
    """
    seed = CatalogSeed.model_validate_json(Path(path).read_text(encoding="utf-8"))
    catalog = InMemoryCatalog(
        [
            ProductVariation(
                id=v.id,
                title=v.title,
                sku=v.sku,
                is_published=v.published,
            )
            for v in seed.variations
        ]
    )
    logger.info("Catalog loaded", path=str(path), variations=len(catalog))
    return catalog


# ============================================================================
# Store Context
# ============================================================================


class StaticStoreContext:
    """Always resolves to the same store, or to none."""

    def __init__(self, store: Store | None = None) -> None:
        self.store = store

    def current_store(self) -> Store | None:
        return self.store


# ============================================================================
# Cart Provider
# ============================================================================


CartKey = tuple[str, EntityId, EntityId | None]


class InMemoryCartProvider:
    """Carts keyed by (cart type, store, customer).

    ``create_cart`` returns the existing cart when one was created for the
    same scope in the meantime, so concurrent callers share one cart.
    """

    def __init__(self) -> None:
        self._carts: dict[CartKey, Cart] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    @staticmethod
    def _key(cart_type: str, store: Store, customer: Customer | None) -> CartKey:
        return (cart_type, store.id, customer.id if customer else None)

    def get_cart(
        self,
        cart_type: str,
        store: Store,
        customer: Customer | None = None,
    ) -> Cart | None:
        return self._carts.get(self._key(cart_type, store, customer))

    def create_cart(
        self,
        cart_type: str,
        store: Store,
        customer: Customer | None = None,
    ) -> Cart:
        key = self._key(cart_type, store, customer)
        with self._lock:
            cart = self._carts.get(key)
            if cart is None:
                cart = Cart(
                    id=next(self._ids),
                    cart_type=cart_type,
                    store_id=store.id,
                    customer_id=key[2],
                )
                self._carts[key] = cart
                logger.info(
                    "Cart created",
                    cart_id=cart.id,
                    cart_type=cart_type,
                    store_id=store.id,
                )
        return cart

    def list_carts(self) -> list[Cart]:
        return list(self._carts.values())


# ============================================================================
# Cart Manager
# ============================================================================


class InMemoryCartManager:
    """Adds variations to in-memory carts."""

    def __init__(self, first_item_id: int = 1) -> None:
        self._ids = itertools.count(first_item_id)
        self._lock = threading.Lock()

    def add_entity(
        self,
        cart: Cart,
        variation: ProductVariation,
        quantity: str,
        combine: bool = True,
    ) -> OrderItem:
        """Add a quantity of a variation to a cart.

        With ``combine`` the quantity is added to the first line item for the
        same variation; otherwise a new line item is always appended.

        Raises:
            InvalidQuantityError: The quantity is not a positive decimal.
        """
        amount = parse_quantity(quantity)

        with self._lock:
            if combine:
                item = cart.find_item(variation.id)
                if item is not None:
                    item.quantity += amount
                    return item

            item = OrderItem(
                id=next(self._ids),
                variation_id=variation.id,
                title=variation.title,
                quantity=amount,
            )
            cart.items.append(item)
            return item
