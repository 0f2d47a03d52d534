"""Pricing services."""

from .service import PricingResolver, check_provider_support, price_for

__all__ = ["PricingResolver", "check_provider_support", "price_for"]
