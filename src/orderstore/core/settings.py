"""
Centralized settings for order-store.

:class:`OrderStoreSettings` holds the process-wide defaults the mapper needs
(default currency, tax-inclusive pricing, default status, storage version)
together with the database, cache and logging knobs.  The object is built
once, validated by pydantic, and **injected** into
:class:`~orderstore.stores.order_store.OrderDataStore`; the stores never
read configuration from globals.

Resolution order: explicit constructor arguments, ``ORDERSTORE_*``
environment variables, ``.env`` file, field defaults.

Tags:
    order-store, configuration, settings, pydantic

Doc-Types:
    api-reference
"""

from __future__ import annotations

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from orderstore import __version__
from orderstore.core.errors import ConfigError


class OrderStoreSettings(BaseSettings):
    """order-store configuration.

    All fields can be set via ``ORDERSTORE_*`` environment variables (e.g.
    ``ORDERSTORE_DEFAULT_CURRENCY=EUR``) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDERSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ─────────────────────────────────────────────────
    database_url: str = Field(default="sqlite:///orderstore.db")
    database_echo: bool = Field(default=False)

    # ── Order defaults ───────────────────────────────────────────
    default_currency: str = Field(default="USD", description="Currency for orders created without one")
    prices_include_tax: bool = Field(
        default=False,
        description="Fallback when an order has no _prices_include_tax attribute",
    )
    default_status: str = Field(default="pending", description="Status for orders created without one")
    version: str = Field(default=__version__, description="Schema version stamped on every write")

    # ── Content record layout ────────────────────────────────────
    record_type: str = Field(default="shop_order")
    status_prefix: str = Field(default="wc-", description="Namespace prefix for stored lifecycle statuses")
    record_owner_id: int = Field(default=1, description="System identity owning every order record")
    timezone: str = Field(default="UTC", description="Zone for the local creation timestamp column")

    # ── Cache ────────────────────────────────────────────────────
    cache_max_size: int = Field(default=10_000)
    cache_ttl_seconds: int | None = Field(default=3600)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value!r}") from exc
        return value

    @field_validator("status_prefix", "record_type", "default_status")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_log_format(cls, value: str) -> str:
        if value not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache(maxsize=1)
def get_settings() -> OrderStoreSettings:
    """Return the cached settings singleton for application entry points.

    Raises:
        ConfigError: An environment or ``.env`` value failed validation.
    """
    try:
        return OrderStoreSettings()
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid order-store settings: {exc.error_count()} error(s)", cause=exc) from exc


def reset_settings() -> None:
    """Drop the cached settings (tests and CLI option overrides)."""
    get_settings.cache_clear()


__all__ = [
    "OrderStoreSettings",
    "get_settings",
    "reset_settings",
]
