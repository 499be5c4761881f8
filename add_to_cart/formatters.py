"""Result formatting for the add_to_cart tool.

Every invocation ends in exactly one ``ToolResult``: a readable message for
the caller plus the structured fields a client can act on.
"""

from dataclasses import dataclass
from typing import Any

from add_to_cart.exceptions import AddToCartError, CartMutationError
from add_to_cart.ports import Cart, OrderItem, ProductVariation

SUCCESS_TEMPLATE = 'Successfully added {quantity} x "{title}" to cart. Order item ID: {item_id}'
ERROR_PREFIX = "Error: "
MUTATION_ERROR_PREFIX = "Error adding to cart: "
INTERNAL_ERROR_CODE = "INTERNAL_ERROR"


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one add_to_cart invocation.

    ``success`` is set from the stage outcome and never inferred from the
    message text.
    """

    success: bool
    message: str
    error_code: str | None = None
    order_item_id: Any = None
    product_title: str | None = None
    quantity: str | None = None
    cart_id: Any = None

    def readable_output(self) -> str:
        """Get the human-readable message."""
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to the structured record, omitting absent fields.

        Returns:
            Dictionary with camelCase keys.
        """
        record = {
            "success": self.success,
            "message": self.message,
            "errorCode": self.error_code,
            "orderItemId": self.order_item_id,
            "productTitle": self.product_title,
            "quantity": self.quantity,
            "cartId": self.cart_id,
        }
        return {key: value for key, value in record.items() if value is not None}

    def __str__(self) -> str:
        return self.message


def format_success(
    quantity: str,
    variation: ProductVariation,
    order_item: OrderItem,
    cart: Cart,
) -> ToolResult:
    """Format a successful add.

    Args:
        quantity: Quantity as passed to the cart manager.
        variation: The variation that was added.
        order_item: Line item returned by the cart manager.
        cart: Cart the item was added to.

    Returns:
        Successful result.
    """
    return ToolResult(
        success=True,
        message=SUCCESS_TEMPLATE.format(
            quantity=quantity,
            title=variation.title,
            item_id=order_item.id,
        ),
        order_item_id=order_item.id,
        product_title=variation.title,
        quantity=quantity,
        cart_id=cart.id,
    )


def format_error(error: AddToCartError) -> ToolResult:
    """Format a stage failure.

    Args:
        error: Error raised by the failing stage.

    Returns:
        Failed result carrying the error code.
    """
    prefix = MUTATION_ERROR_PREFIX if isinstance(error, CartMutationError) else ERROR_PREFIX
    cart_id = error.details.get("cart_id")
    return ToolResult(
        success=False,
        message=f"{prefix}{error.message}",
        error_code=error.error_code,
        cart_id=cart_id,
    )


def format_unexpected(error: Exception) -> ToolResult:
    """Format a failure that is not part of the error taxonomy."""
    return ToolResult(
        success=False,
        message=f"{ERROR_PREFIX}Tool execution failed: {error}",
        error_code=INTERNAL_ERROR_CODE,
    )
