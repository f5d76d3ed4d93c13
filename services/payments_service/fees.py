"""Marketplace revenue split between the platform and the coach."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from libs.common.config import get_settings

CENT = Decimal("0.01")


@dataclass(frozen=True)
class FeeSplit:
    price: Decimal
    platform_fee: Decimal
    coach_earnings: Decimal


def split_fee(price: Decimal, fee_percent: Optional[Decimal] = None) -> FeeSplit:
    """
    Split ``price`` into the platform fee and the coach's earnings.

    The fee is rounded half-up to the cent and the coach receives the
    remainder, so the two parts always add back up to the price.
    """
    if price < 0:
        raise ValueError("price cannot be negative")
    if fee_percent is None:
        fee_percent = get_settings().PLATFORM_FEE_PERCENT

    price = Decimal(price).quantize(CENT, rounding=ROUND_HALF_UP)
    platform_fee = (price * fee_percent / Decimal(100)).quantize(
        CENT, rounding=ROUND_HALF_UP
    )
    return FeeSplit(
        price=price,
        platform_fee=platform_fee,
        coach_earnings=price - platform_fee,
    )
