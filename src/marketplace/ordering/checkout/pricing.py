"""Shipping and tax for one store's order.

Shipping is free once the store subtotal reaches the threshold and a flat
fee otherwise. Tax is a single rate on the subtotal. Every figure is rounded
half-up to cents.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from marketplace.config import CheckoutSettings, get_settings
from marketplace.shared.money import CENTS, ZERO, to_money


@dataclass(frozen=True)
class PriceQuote:
    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal

    @property
    def total_amount(self) -> Decimal:
        return self.subtotal + self.shipping_cost + self.tax_amount


@dataclass(frozen=True)
class PricingPolicy:
    free_shipping_threshold: Decimal = Decimal("100.00")
    flat_shipping_cost: Decimal = Decimal("9.99")
    tax_rate: Decimal = Decimal("0.08")

    @classmethod
    def from_settings(cls, settings: CheckoutSettings | None = None) -> "PricingPolicy":
        settings = settings or get_settings().checkout
        return cls(
            free_shipping_threshold=to_money(settings.free_shipping_threshold),
            flat_shipping_cost=to_money(settings.flat_shipping_cost),
            tax_rate=Decimal(settings.tax_rate),
        )

    def shipping_for(self, subtotal) -> Decimal:
        subtotal = to_money(subtotal)
        if subtotal >= self.free_shipping_threshold:
            return ZERO
        return to_money(self.flat_shipping_cost)

    def tax_for(self, subtotal) -> Decimal:
        return (to_money(subtotal) * self.tax_rate).quantize(CENTS, rounding=ROUND_HALF_UP)

    def quote(self, subtotal) -> PriceQuote:
        subtotal = to_money(subtotal)
        return PriceQuote(
            subtotal=subtotal,
            shipping_cost=self.shipping_for(subtotal),
            tax_amount=self.tax_for(subtotal),
        )
