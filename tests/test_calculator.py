"""
Tests for the production weight calculator

The formula constants describe physical packaging; these tests pin
them down so an accidental edit shows up immediately.
"""

import pytest

from production_ledger.ledger.calculator import (
    CONE_RESIDUAL_GRAMS,
    SPOOL_TARE_GRAMS,
    calculate_consumption_kg,
    calculate_production_weight,
    calculate_total_amount,
    round_half_up,
)


class TestConstants:
    """Tests for the fixed packaging constants."""

    def test_packaging_constants(self):
        assert SPOOL_TARE_GRAMS == 1250
        assert CONE_RESIDUAL_GRAMS == 30


class TestProductionWeight:
    """Tests for calculate_production_weight."""

    def test_worked_example(self):
        """Test drum 5, open 200, close 100, cones 10 gives 14.5 kg."""
        assert calculate_production_weight(5, 200, 100, 10) == 14.5

    def test_all_zero(self):
        """Test zero inputs give zero weight."""
        assert calculate_production_weight(0, 0, 0, 0) == 0.0

    def test_single_drum_single_cone(self):
        """Test only the tare and residual terms contribute."""
        assert calculate_production_weight(1, 0, 1, 1) == 1.28

    def test_cones_only(self):
        """Test each cone beyond the drum count adds one tare weight."""
        assert calculate_production_weight(0, 0, 0, 4) == 5.0

    def test_rounded_to_three_places(self):
        """Test the weight carries at most three decimals."""
        weight = calculate_production_weight(3, 7, 11, 2)
        assert weight == round_half_up(weight, 3)

    def test_negative_inputs_still_compute(self):
        """Test implausible inputs are not rejected."""
        weight = calculate_production_weight(-1, -50, 0, 0)
        assert isinstance(weight, float)


class TestTotalAmount:
    """Tests for calculate_total_amount."""

    def test_worked_example(self):
        """Test 14.5 kg at 150 per kg."""
        assert calculate_total_amount(14.5, 150) == 2175.0

    def test_zero_rate(self):
        assert calculate_total_amount(14.5, 0) == 0.0

    @pytest.mark.parametrize("weight,rate", [
        (14.5, 150),
        (1.28, 37.5),
        (0.333, 3),
        (2.017, 99.99),
    ])
    def test_amount_is_rounded_product(self, weight, rate):
        """Test amount always equals weight times rate rounded to cents."""
        assert calculate_total_amount(weight, rate) == round_half_up(weight * rate, 2)


class TestConsumption:
    """Tests for calculate_consumption_kg."""

    def test_stock_used(self):
        assert calculate_consumption_kg(200, 100) == 0.1

    def test_stock_added_is_negative(self):
        """Test closing above opening gives negative consumption."""
        assert calculate_consumption_kg(100, 600) == -0.5


class TestRoundHalfUp:
    """Tests for round_half_up."""

    def test_ties_round_away_from_zero(self):
        """Test exact halves round up, unlike Python's round()."""
        assert round_half_up(0.125, 2) == 0.13
        assert round_half_up(2.5, 0) == 3.0

    def test_negative_ties(self):
        assert round_half_up(-0.125, 2) == -0.13

    def test_binary_value_is_respected(self):
        """Test 1.005 is stored below the tie and rounds down."""
        assert round_half_up(1.005, 2) == 1.0

    def test_already_rounded(self):
        assert round_half_up(14.5, 3) == 14.5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
