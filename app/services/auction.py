"""Auction fee calculation.

Fees charged on a vehicle sold at auction:

1. **Base fee** - percentage of the price, clamped to a per-vehicle-type range.
2. **Special fee** - percentage of the price, rate depends on the vehicle type.
3. **Association fee** - flat amount picked from a price band.
4. **Storage fee** - fixed amount for every vehicle.

Intermediate values keep full precision; only the presented amounts are
rounded to cents.
"""
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

from app.core.enums import VehicleType
from app.core.exceptions import InvalidFeeInput
from app.schemas.auction import FeeBreakdown, FeeConfig

# (upper price bound inclusive, fee)
ASSOCIATION_FEE_BANDS = (
    (500.0, 5),
    (1000.0, 10),
    (3000.0, 15),
)
ASSOCIATION_FEE_ABOVE_BANDS = 20

CENT = Decimal("0.01")
# Enough digits to quantize the largest double (~1.8e308) to cents
ROUNDING_PRECISION = 400


def round_amount(value: float) -> float:
    """Round to cents, half away from zero, on the shortest decimal form of value."""
    with localcontext() as ctx:
        ctx.prec = ROUNDING_PRECISION
        return float(Decimal(repr(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def calculate_base_fee(price: float, vehicle_type: VehicleType, config: FeeConfig) -> float:
    base_fee = price * config.base_fee_percentage
    if vehicle_type == VehicleType.COMMON:
        return _clamp(base_fee, config.common_base_fee_min, config.common_base_fee_max)
    if vehicle_type == VehicleType.LUXURY:
        return _clamp(base_fee, config.luxury_base_fee_min, config.luxury_base_fee_max)
    raise InvalidFeeInput(f"Unknown vehicle type: {vehicle_type}")


def calculate_special_fee(price: float, vehicle_type: VehicleType, config: FeeConfig) -> float:
    if vehicle_type == VehicleType.COMMON:
        return price * config.common_special_fee_percentage
    if vehicle_type == VehicleType.LUXURY:
        return price * config.luxury_special_fee_percentage
    raise InvalidFeeInput(f"Unknown vehicle type: {vehicle_type}")


def calculate_association_fee(price: float) -> int:
    for upper_bound, fee in ASSOCIATION_FEE_BANDS:
        if price <= upper_bound:
            return fee
    return ASSOCIATION_FEE_ABOVE_BANDS


def calculate_fees(price: float, vehicle_type: VehicleType, config: FeeConfig) -> FeeBreakdown:
    """Calculate the complete fee breakdown for a vehicle sold at `price`.

    Raises InvalidFeeInput when the price is not a positive finite number or
    the vehicle type is not a VehicleType member.
    """
    if math.isnan(price) or math.isinf(price):
        raise InvalidFeeInput("Vehicle price must be a finite number")
    if price <= 0:
        raise InvalidFeeInput("Vehicle price must be greater than zero")

    base_fee = calculate_base_fee(price, vehicle_type, config)
    special_fee = calculate_special_fee(price, vehicle_type, config)
    association_fee = calculate_association_fee(price)

    total_fees = base_fee + special_fee + association_fee + config.storage_fee
    grand_total = price + total_fees

    return FeeBreakdown(
        base_fee=round_amount(base_fee),
        special_fee=round_amount(special_fee),
        association_fee=association_fee,
        storage_fee=config.storage_fee,
        total_fees=round_amount(total_fees),
        grand_total=round_amount(grand_total),
    )
