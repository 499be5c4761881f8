"""Add-to-cart exceptions.

Every failure the tool can report is one of these errors. They are raised
by the stage that detects the problem and converted to a failed
``ToolResult`` before the tool returns, so none of them reach the caller.
"""

from typing import Any


class AddToCartError(Exception):
    """Base class for all add-to-cart errors.

    Attributes:
        error_code: Stable machine-readable code for the failure kind.
        message: Human-readable error message.
        details: Additional error context.
    """

    error_code: str = "ADD_TO_CART_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize add-to-cart error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Parameter Errors
# ============================================================================


class MissingParameterError(AddToCartError):
    """Raised when a required parameter is absent from the invocation."""

    error_code = "MISSING_PARAMETER"

    def __init__(self, parameter: str) -> None:
        """Initialize missing parameter error.

        Args:
            parameter: Wire name of the missing parameter.
        """
        super().__init__(
            f"Missing required parameter: {parameter}.",
            details={"parameter": parameter},
        )


class InvalidParameterError(AddToCartError):
    """Raised when a parameter value has the wrong type or range."""

    error_code = "INVALID_PARAMETER"

    def __init__(self, parameter: str, reason: str) -> None:
        """Initialize invalid parameter error.

        Args:
            parameter: Wire name of the offending parameter.
            reason: Explanation of why the value was rejected.
        """
        super().__init__(
            f"Invalid value for parameter {parameter}: {reason.rstrip('.')}.",
            details={"parameter": parameter, "reason": reason},
        )


class InvalidQuantityError(AddToCartError):
    """Raised when a quantity is not a finite decimal greater than zero."""

    error_code = "INVALID_QUANTITY"

    def __init__(self, quantity: str) -> None:
        """Initialize invalid quantity error.

        Args:
            quantity: The rejected quantity, as received.
        """
        super().__init__(
            f'Invalid quantity "{quantity}": must be a positive number.',
            details={"quantity": quantity},
        )


# ============================================================================
# Resolution Errors
# ============================================================================


class ProductNotFoundError(AddToCartError):
    """Raised when the catalog has no variation with the requested ID."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, variation_id: Any) -> None:
        super().__init__(
            f"Product variation with ID {variation_id} not found.",
            details={"variation_id": variation_id},
        )


class ProductNotPurchasableError(AddToCartError):
    """Raised when the variation exists but is not published."""

    error_code = "PRODUCT_NOT_PURCHASABLE"

    def __init__(self, variation_id: Any) -> None:
        super().__init__(
            "Product variation is not available for purchase.",
            details={"variation_id": variation_id},
        )


class NoStoreContextError(AddToCartError):
    """Raised when no store can be resolved for the invocation."""

    error_code = "NO_STORE_CONTEXT"

    def __init__(self) -> None:
        super().__init__("No store context available.")


# ============================================================================
# Mutation Errors
# ============================================================================


class CartMutationError(AddToCartError):
    """Raised when the cart manager fails to add the item.

    The message is the cart manager's own message, unchanged.
    """

    error_code = "CART_MUTATION_FAILED"

    def __init__(self, message: str, cart_id: Any = None) -> None:
        """Initialize cart mutation error.

        Args:
            message: Message of the exception raised by the cart manager.
            cart_id: ID of the cart the add was attempted on.
        """
        super().__init__(message, details={"cart_id": cart_id})
