"""Collaborator interfaces.

The tool never reaches into a container or global state. Everything it
needs is handed to it as an object satisfying one of these protocols.
"""

from typing import Protocol

EntityId = int | str


# ============================================================================
# Entities handed back by collaborators
# ============================================================================


class ProductVariation(Protocol):
    """A purchasable configuration of a product."""

    id: EntityId
    title: str
    is_published: bool


class Store(Protocol):
    """The selling context carts are scoped to."""

    id: EntityId


class Customer(Protocol):
    """The already resolved caller identity."""

    id: EntityId


class Cart(Protocol):
    """An in-progress order holding line items."""

    id: EntityId


class OrderItem(Protocol):
    """A line item produced or merged by an add."""

    id: EntityId


# ============================================================================
# Collaborators
# ============================================================================


class ProductCatalog(Protocol):
    def get_variation(self, variation_id: int) -> ProductVariation | None:
        """Load a variation by ID, or return None when it does not exist."""
        ...


class StoreContext(Protocol):
    def current_store(self) -> Store | None:
        """Return the active store, or None when there is none."""
        ...


class CartProvider(Protocol):
    """Gets and creates carts for a (cart type, store, customer) scope.

    ``create_cart`` must be safe to call concurrently for the same scope.
    """

    def get_cart(
        self,
        cart_type: str,
        store: Store,
        customer: Customer | None = None,
    ) -> Cart | None: ...

    def create_cart(
        self,
        cart_type: str,
        store: Store,
        customer: Customer | None = None,
    ) -> Cart: ...


class CartManager(Protocol):
    def add_entity(
        self,
        cart: Cart,
        variation: ProductVariation,
        quantity: str,
        combine: bool = True,
    ) -> OrderItem:
        """Add a quantity of a variation to a cart.

        Args:
            cart: Cart to add to.
            variation: Variation to add.
            quantity: Decimal quantity as a string, parsed by the manager.
            combine: Merge into a matching line item instead of appending.

        Returns:
            The new or merged line item.

        Raises:
            Exception: Any failure, with a human-readable message.
        """
        ...
