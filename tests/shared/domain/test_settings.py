from decimal import Decimal

import pytest
from pydantic import ValidationError

from marketplace.config import MarketplaceSettings


class TestSettingsFromEnv:
    def test_defaults(self):
        settings = MarketplaceSettings.from_env({})
        assert settings.environment == "development"
        assert settings.checkout.free_shipping_threshold == Decimal("100.00")
        assert settings.checkout.flat_shipping_cost == Decimal("9.99")
        assert settings.checkout.tax_rate == Decimal("0.08")
        assert settings.checkout.cart_ttl_days == 30
        assert settings.storage.backend == "local"
        assert settings.notifications.email_channel == "fake"

    def test_overrides(self):
        settings = MarketplaceSettings.from_env(
            {
                "PROTEAN_ENV": "Production",
                "MARKETPLACE_TAX_RATE": "0.2",
                "MARKETPLACE_CART_TTL_DAYS": "7",
                "MARKETPLACE_STORAGE_BACKEND": "memory",
                "MARKETPLACE_EMAIL_CHANNEL": "log",
            }
        )
        assert settings.environment == "production"
        assert settings.checkout.tax_rate == Decimal("0.2")
        assert settings.checkout.cart_ttl_days == 7
        assert settings.storage.backend == "memory"
        assert settings.notifications.email_channel == "log"

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            MarketplaceSettings.from_env({"MARKETPLACE_TAX_RATE": "1.5"})
        with pytest.raises(ValidationError):
            MarketplaceSettings.from_env({"MARKETPLACE_STORAGE_BACKEND": "s3"})
