"""Application configuration.

Loads settings from ``ADD_TO_CART_*`` environment variables and ``.env``
with sensible defaults.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Add-to-cart tool settings."""

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=True,
        description="Render log events as JSON instead of console output",
    )

    # Tool behaviour
    cart_type: str = Field(
        default="default",
        description="Cart type requested from the cart provider",
    )
    validate_quantity_eagerly: bool = Field(
        default=True,
        description="Reject unparseable quantities before touching the cart",
    )
    include_structured_result: bool = Field(
        default=True,
        description="Return the JSON result record alongside the message",
    )

    # In-memory backend
    store_id: str = Field(
        default="default",
        description="ID of the store served by the MCP server",
    )
    store_name: str = Field(
        default="Default store",
        description="Name of the store served by the MCP server",
    )
    catalog_file: Path | None = Field(
        default=None,
        description="JSON file to seed the in-memory catalog from",
    )

    model_config = SettingsConfigDict(
        env_prefix="ADD_TO_CART_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings()
