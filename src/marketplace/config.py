"""Application settings.

All environment lookups for the application live here. The settings object is
built once at process start (``configure``) and read everywhere else through
``get_settings``. Protean infrastructure (databases, brokers, event store) is
configured separately in ``domain.toml``.
"""

import os
from collections.abc import Mapping
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CheckoutSettings(BaseModel):
    """Shipping, tax and cart lifetime policy applied at checkout."""

    model_config = ConfigDict(frozen=True)

    free_shipping_threshold: Decimal = Decimal("100.00")
    flat_shipping_cost: Decimal = Decimal("9.99")
    tax_rate: Decimal = Field(Decimal("0.08"), ge=0, le=1)
    currency: str = Field("USD", min_length=3, max_length=3)
    cart_ttl_days: int = Field(30, ge=1)


class StorageSettings(BaseModel):
    """Where uploaded blobs (product images, store logos) are written."""

    model_config = ConfigDict(frozen=True)

    backend: Literal["local", "memory"] = "local"
    root: str = "storage"
    public_base_url: str = "/uploads"


class NotificationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    email_channel: Literal["fake", "log"] = "fake"
    sender: str = "orders@marketplace.example"


class MarketplaceSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    environment: str = "development"
    log_level: str | None = None
    checkout: CheckoutSettings = CheckoutSettings()
    storage: StorageSettings = StorageSettings()
    notifications: NotificationSettings = NotificationSettings()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MarketplaceSettings":
        """Build settings from ``MARKETPLACE_*`` variables (and ``PROTEAN_ENV``)."""
        env = os.environ if environ is None else environ

        checkout = {
            key: env[f"MARKETPLACE_{key.upper()}"]
            for key in CheckoutSettings.model_fields
            if f"MARKETPLACE_{key.upper()}" in env
        }
        storage = {
            key: env[f"MARKETPLACE_STORAGE_{key.upper()}"]
            for key in StorageSettings.model_fields
            if f"MARKETPLACE_STORAGE_{key.upper()}" in env
        }
        notifications = {}
        if "MARKETPLACE_EMAIL_CHANNEL" in env:
            notifications["email_channel"] = env["MARKETPLACE_EMAIL_CHANNEL"]
        if "MARKETPLACE_EMAIL_SENDER" in env:
            notifications["sender"] = env["MARKETPLACE_EMAIL_SENDER"]

        return cls(
            environment=(env.get("PROTEAN_ENV") or env.get("ENVIRONMENT") or "development").lower(),
            log_level=env.get("LOG_LEVEL"),
            checkout=CheckoutSettings(**checkout),
            storage=StorageSettings(**storage),
            notifications=NotificationSettings(**notifications),
        )


_settings: MarketplaceSettings | None = None


def configure(settings: MarketplaceSettings | None = None) -> MarketplaceSettings:
    """Install the process-wide settings (defaults to reading the environment)."""
    global _settings
    _settings = settings if settings is not None else MarketplaceSettings.from_env()
    return _settings


def get_settings() -> MarketplaceSettings:
    """Return the active settings, building them from the environment on first use."""
    if _settings is None:
        return configure()
    return _settings
