"""Parameter schema for the add_to_cart tool.

Declares the parameters the tool accepts and turns a raw argument mapping
from a caller into a validated ``AddToCartInput``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from add_to_cart.exceptions import (
    InvalidParameterError,
    InvalidQuantityError,
    MissingParameterError,
)

DEFAULT_QUANTITY = "1"
DEFAULT_COMBINE = True


# ============================================================================
# Tool Input Schema
# ============================================================================


class AddToCartInput(BaseModel):
    """Validated arguments of one add_to_cart invocation.

    Fields are read by their camelCase wire names; the snake_case field
    names are accepted too.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    product_variation_id: int = Field(
        ...,
        alias="productVariationId",
        title="Product Variation ID",
        gt=0,
        description="The product variation ID to add to cart.",
    )
    quantity: str = Field(
        default=DEFAULT_QUANTITY,
        title="Quantity",
        description="The quantity of the product to add, as a decimal string. "
        "Example: '2' or '1.5'",
    )
    combine: bool = Field(
        default=DEFAULT_COMBINE,
        title="Combine",
        description="Whether to combine with existing cart items if matching.",
    )

    @field_validator("product_variation_id", mode="before")
    @classmethod
    def _reject_bool_id(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("Input should be a valid integer")
        return value

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_as_string(cls, value: Any) -> Any:
        # Clients often send numbers for quantity
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return str(value)
        return value


# ============================================================================
# Declarative Definition
# ============================================================================


@dataclass(frozen=True)
class ParameterDefinition:
    """Metadata for one declared tool parameter."""

    name: str
    data_type: str
    label: str
    description: str
    required: bool = False
    default: Any = None


@dataclass(frozen=True)
class FunctionDefinition:
    """Host-facing description of a callable tool."""

    id: str
    function_name: str
    name: str
    description: str
    group: str
    input_model: type[BaseModel]
    parameters: tuple[ParameterDefinition, ...] = field(default_factory=tuple)

    def input_schema(self) -> dict[str, Any]:
        """Get the JSON schema of the tool arguments.

        Returns:
            JSON schema keyed by wire parameter names.
        """
        return self.input_model.model_json_schema(by_alias=True)

    @property
    def required_parameters(self) -> list[str]:
        return [p.name for p in self.parameters if p.required]


ADD_TO_CART = FunctionDefinition(
    id="commerce:add_to_cart",
    function_name="add_to_cart",
    name="Add Product to Cart",
    description="Adds a product to the shopping cart by product variation ID.",
    group="commerce",
    input_model=AddToCartInput,
    parameters=(
        ParameterDefinition(
            name="productVariationId",
            data_type="integer",
            label="Product Variation ID",
            description="The product variation ID to add to cart.",
            required=True,
        ),
        ParameterDefinition(
            name="quantity",
            data_type="string",
            label="Quantity",
            description="The quantity of the product to add.",
            default=DEFAULT_QUANTITY,
        ),
        ParameterDefinition(
            name="combine",
            data_type="boolean",
            label="Combine",
            description="Whether to combine with existing cart items if matching.",
            default=DEFAULT_COMBINE,
        ),
    ),
)

_WIRE_NAMES = {
    name: info.alias or name for name, info in AddToCartInput.model_fields.items()
}


# ============================================================================
# Parsing
# ============================================================================


def parse_quantity(quantity: str) -> Decimal:
    """Parse a quantity string into a positive decimal.

    Args:
        quantity: Quantity as received from the caller.

    Returns:
        The parsed quantity.

    Raises:
        InvalidQuantityError: If the string is not a finite decimal > 0.
    """
    try:
        value = Decimal(str(quantity).strip())
    except InvalidOperation:
        raise InvalidQuantityError(quantity) from None

    if not value.is_finite() or value <= 0:
        raise InvalidQuantityError(quantity)
    return value


def _is_present(arguments: Mapping[str, Any], field_name: str) -> bool:
    for key in (_WIRE_NAMES[field_name], field_name):
        if arguments.get(key) is not None:
            return True
    return False


def parse_arguments(
    arguments: Mapping[str, Any] | None,
    validate_quantity: bool = True,
) -> AddToCartInput:
    """Validate raw invocation arguments.

    Required parameters are checked first, so a missing ID is reported
    even when other arguments are malformed too.

    Args:
        arguments: Raw argument mapping from the caller.
        validate_quantity: Reject unparseable quantities here instead of
            leaving them to the cart manager.

    Returns:
        Validated input.

    Raises:
        MissingParameterError: A required parameter is absent or null.
        InvalidParameterError: A parameter has the wrong type or range.
        InvalidQuantityError: The quantity is not a positive decimal.
    """
    arguments = arguments or {}
    if not isinstance(arguments, Mapping):
        raise InvalidParameterError("arguments", "expected an object")

    for name, info in AddToCartInput.model_fields.items():
        if info.is_required() and not _is_present(arguments, name):
            raise MissingParameterError(_WIRE_NAMES[name])

    # Explicit nulls for optional parameters fall back to their defaults
    cleaned = {key: value for key, value in arguments.items() if value is not None}

    try:
        params = AddToCartInput.model_validate(cleaned)
    except ValidationError as e:
        error = e.errors()[0]
        loc = str(error["loc"][0]) if error["loc"] else "arguments"
        raise InvalidParameterError(_WIRE_NAMES.get(loc, loc), error["msg"]) from None

    if validate_quantity:
        parse_quantity(params.quantity)

    return params
