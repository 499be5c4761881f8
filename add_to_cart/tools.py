"""The add_to_cart tool.

Adds a product variation to the caller's cart in four stages:

1. resolve the variation from the catalog and check it is purchasable
2. resolve the store
3. get the cart for the store, creating it when absent
4. add the variation through the cart manager

A stage that fails ends the invocation; later stages never run. Whatever
happens, ``execute`` returns a ``ToolResult`` and never raises.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from add_to_cart.config import Settings, get_settings
from add_to_cart.exceptions import (
    AddToCartError,
    CartMutationError,
    NoStoreContextError,
    ProductNotFoundError,
    ProductNotPurchasableError,
)
from add_to_cart.formatters import (
    ToolResult,
    format_error,
    format_success,
    format_unexpected,
)
from add_to_cart.ports import (
    Cart,
    CartManager,
    CartProvider,
    Customer,
    OrderItem,
    ProductCatalog,
    ProductVariation,
    Store,
    StoreContext,
)
from add_to_cart.schema import ADD_TO_CART, FunctionDefinition, parse_arguments

logger = structlog.get_logger()


@dataclass(frozen=True)
class InvocationContext:
    """Per-call context values.

    Attributes:
        store: Store to add to. Falls back to the tool's store context.
        customer: Caller the cart belongs to.
    """

    store: Store | None = None
    customer: Customer | None = None


class AddToCartTool:
    """Adds purchasable items to a cart on behalf of an agent.

    Example usage:
        tool = AddToCartTool(
            catalog=catalog,
            store_context=store_context,
            cart_provider=cart_provider,
            cart_manager=cart_manager,
        )
        result = tool.execute({"productVariationId": 123, "quantity": "2"})
        print(result.message)
    """

    definition: FunctionDefinition = ADD_TO_CART

    def __init__(
        self,
        catalog: ProductCatalog,
        store_context: StoreContext,
        cart_provider: CartProvider,
        cart_manager: CartManager,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the tool.

        Args:
            catalog: Product variation lookup.
            store_context: Source of the active store.
            cart_provider: Gets and creates carts.
            cart_manager: Adds items to carts.
            settings: Tool settings. Defaults to the environment settings.
        """
        self.catalog = catalog
        self.store_context = store_context
        self.cart_provider = cart_provider
        self.cart_manager = cart_manager
        self.settings = settings or get_settings()

    def execute(
        self,
        arguments: Mapping[str, Any] | None,
        context: InvocationContext | None = None,
    ) -> ToolResult:
        """Run one add_to_cart invocation.

        Args:
            arguments: Raw arguments, e.g.
                ``{"productVariationId": 123, "quantity": "2", "combine": True}``.
            context: Explicit store and customer for this call.

        Returns:
            The invocation result. Failures are reported with
            ``success=False`` rather than raised.
        """
        context = context or InvocationContext()
        log = logger.bind(tool=self.definition.function_name)
        log.info("Tool called", arguments=arguments)

        try:
            params = parse_arguments(
                arguments,
                validate_quantity=self.settings.validate_quantity_eagerly,
            )
            variation = self._resolve_variation(params.product_variation_id)
            cart = self._resolve_cart(context)
            order_item = self._add_to_cart(
                cart, variation, params.quantity, params.combine
            )
            result = format_success(params.quantity, variation, order_item, cart)
            log.info(
                "Added to cart",
                variation_id=variation.id,
                quantity=params.quantity,
                combine=params.combine,
                cart_id=cart.id,
                order_item_id=order_item.id,
            )
        except AddToCartError as e:
            log.warning(
                "Add to cart failed",
                error_code=e.error_code,
                error=e.message,
                details=e.details,
            )
            return format_error(e)
        except Exception as e:
            log.exception("Add to cart failed unexpectedly")
            return format_unexpected(e)

        return result

    # =========================================================================
    # Stages
    # =========================================================================

    def _resolve_variation(self, variation_id: int) -> ProductVariation:
        """Load the variation and check it can be bought.

        Raises:
            ProductNotFoundError: No variation has this ID.
            ProductNotPurchasableError: The variation is unpublished.
        """
        variation = self.catalog.get_variation(variation_id)
        if variation is None:
            raise ProductNotFoundError(variation_id)
        if not variation.is_published:
            raise ProductNotPurchasableError(variation_id)
        return variation

    def _resolve_cart(self, context: InvocationContext) -> Cart:
        """Get the cart for the active store, creating it when absent.

        Raises:
            NoStoreContextError: No store is given or current.
        """
        store = context.store
        if store is None:
            store = self.store_context.current_store()
        if store is None:
            raise NoStoreContextError()

        cart_type = self.settings.cart_type
        cart = self.cart_provider.get_cart(cart_type, store, context.customer)
        if cart is None:
            logger.debug("Creating cart", cart_type=cart_type, store_id=store.id)
            cart = self.cart_provider.create_cart(cart_type, store, context.customer)
        return cart

    def _add_to_cart(
        self,
        cart: Cart,
        variation: ProductVariation,
        quantity: str,
        combine: bool,
    ) -> OrderItem:
        """Add the variation to the cart.

        Raises:
            CartMutationError: The cart manager raised, for any reason.
        """
        try:
            return self.cart_manager.add_entity(cart, variation, quantity, combine)
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            raise CartMutationError(message, cart_id=cart.id) from e
