"""Shipment pricing.

A package is charged by weight plus a share of the trip's passenger fare,
with a floor:

    base_price = weight_kg * PRICE_PER_KG
    premium    = ticket_price * PREMIUM_RATE
    price      = max(base_price + premium, MINIMUM_PRICE)

Weights are kilograms at two decimal places, the precision they are stored
at, and the price is computed from that stored weight. All amounts are
whole currency units (RWF). The same function serves the live booking and
the estimate shown before booking, so the two always agree.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .exceptions import ValidationError

PRICE_PER_KG = Decimal("1000")
PREMIUM_RATE = Decimal("0.30")
MINIMUM_PRICE = 2000

WEIGHT_STEP = Decimal("0.01")
MAX_WEIGHT = Decimal("999999.99")


@dataclass(frozen=True)
class PriceBreakdown:
    """Immutable result of a package price computation.

    Attributes:
        base_price: Weight charge, rounded to whole units
        premium: Share of the trip's ticket price, rounded to whole units
        price: Amount charged (never below MINIMUM_PRICE)
        minimum_applied: True when the floor replaced the raw total
    """

    base_price: int
    premium: int
    price: int
    minimum_applied: bool

    @property
    def raw_total(self) -> int:
        return self.base_price + self.premium

    def as_dict(self) -> dict:
        return {
            "basePrice": self.base_price,
            "premium": self.premium,
            "price": self.price,
            "minimumApplied": self.minimum_applied,
        }


def _to_decimal(value, field: str) -> Decimal:
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be a number, got {value!r}")


def _whole_units(amount: Decimal) -> int:
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def quantize_weight(weight_kg) -> Decimal:
    """Round a weight to the stored precision (0.01 kg, half up).

    Raises:
        ValidationError: Not a number, or outside 0.01 .. 999999.99 once rounded
    """
    weight = _to_decimal(weight_kg, "packageWeight")
    if not weight.is_finite():
        raise ValidationError(f"packageWeight must be a number, got {weight_kg!r}")

    try:
        weight = weight.quantize(WEIGHT_STEP, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"packageWeight must not exceed {MAX_WEIGHT} kg")
    if weight <= 0:
        raise ValidationError("packageWeight must be at least 0.01 kg")
    if weight > MAX_WEIGHT:
        raise ValidationError(f"packageWeight must not exceed {MAX_WEIGHT} kg")
    return weight


def compute_package_price(weight_kg, ticket_price) -> PriceBreakdown:
    """Compute the price of shipping a package on a trip.

    Args:
        weight_kg: Package weight in kilograms; rounded by quantize_weight()
        ticket_price: The trip's passenger ticket price (must be >= 0)

    Returns:
        PriceBreakdown with base, premium and final price

    Raises:
        ValidationError: If weight is out of range or ticket price is negative
    """
    weight = quantize_weight(weight_kg)
    fare = _to_decimal(ticket_price, "ticketPrice")

    if not fare.is_finite() or fare < 0:
        raise ValidationError("ticketPrice must not be negative")

    exact_base = weight * PRICE_PER_KG
    exact_premium = fare * PREMIUM_RATE
    total = _whole_units(exact_base + exact_premium)

    return PriceBreakdown(
        base_price=_whole_units(exact_base),
        premium=_whole_units(exact_premium),
        price=max(total, MINIMUM_PRICE),
        minimum_applied=total < MINIMUM_PRICE,
    )


def estimate_package_price(weight_kg, trip) -> PriceBreakdown:
    """Price estimate for a prospective package on trip.

    Uses the exact computation a booking will use.
    """
    return compute_package_price(weight_kg, trip.ticket_price)
