"""Map a federal credit amount to a flat-fee service tier."""

from decimal import Decimal

from .credit_rules import PRICING_BANDS, PricingBand
from .formatting import format_range
from .models import PricingTier


def _to_tier(band: PricingBand) -> PricingTier:
    return PricingTier(
        tier=band.tier,
        name=band.name,
        min_credit=band.min_credit,
        max_credit=band.max_credit,
        credit_range=format_range(band.min_credit, band.max_credit),
        price=band.price,
    )


def map_to_pricing_tier(federal_credit: Decimal) -> PricingTier:
    """Get the pricing tier whose [min, max) band contains the credit.

    Falls back to the highest tier if no band matches.

    Args:
        federal_credit: Computed federal credit in whole dollars

    Returns:
        PricingTier with display range and flat price
    """
    credit = Decimal(federal_credit)
    for band in PRICING_BANDS:
        if band.contains(credit):
            return _to_tier(band)
    return _to_tier(PRICING_BANDS[-1])


def get_all_pricing_tiers() -> list[PricingTier]:
    """Get every pricing tier in ascending order, for display."""
    return [_to_tier(band) for band in PRICING_BANDS]
