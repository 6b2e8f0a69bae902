"""
Production Weight / Amount Calculator

The fixed industrial formula for a running-drum line:

    part1 = drum * (SPOOL_TARE - open) / GRAMS_PER_KG
    part2 = closing * CONE_RESIDUAL / GRAMS_PER_KG
    part3 = (cones - drum) * SPOOL_TARE / GRAMS_PER_KG
    weight = round(part1 + part2 + part3, 3)
    amount = round(weight * rate, 2)

The constants describe the physical packaging and must not change.

No validation: any finite input, negative included, gives a number.
"""

from decimal import ROUND_HALF_UP, Decimal

# Spool tare weight, grams
SPOOL_TARE_GRAMS = 1250
# Residual left per cone, grams
CONE_RESIDUAL_GRAMS = 30
GRAMS_PER_KG = 1000

WEIGHT_PLACES = 3
AMOUNT_PLACES = 2


def round_half_up(value: float, places: int) -> float:
    """
    Round to a fixed number of decimal places, ties away from zero.

    Works on the exact binary value of the float, so 1.005 rounds to
    1.0 (it is stored as 1.00499...) while 0.125 rounds to 0.13.
    Python's round() would give 0.12 for the latter.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def calculate_production_weight(
    running_drum: float,
    open_stock_grams: float,
    closing_stock_grams: float,
    production_cones: float,
) -> float:
    """Production weight in kg, rounded to 3 decimal places."""
    part1 = running_drum * (SPOOL_TARE_GRAMS - open_stock_grams) / GRAMS_PER_KG
    part2 = closing_stock_grams * CONE_RESIDUAL_GRAMS / GRAMS_PER_KG
    part3 = (production_cones - running_drum) * SPOOL_TARE_GRAMS / GRAMS_PER_KG
    return round_half_up(part1 + part2 + part3, WEIGHT_PLACES)


def calculate_total_amount(production_weight: float, rate_per_kg: float) -> float:
    """Monetary value of a production weight, rounded to 2 decimal places."""
    return round_half_up(production_weight * rate_per_kg, AMOUNT_PLACES)


def calculate_consumption_kg(open_stock_grams: float, closing_stock_grams: float) -> float:
    """Stock consumed in kg. Negative when stock went up."""
    return (open_stock_grams - closing_stock_grams) / GRAMS_PER_KG
