"""Tests for package pricing."""
from decimal import Decimal

import pytest

from django_transit.exceptions import ValidationError
from django_transit.pricing import (
    MAX_WEIGHT,
    MINIMUM_PRICE,
    PriceBreakdown,
    compute_package_price,
    estimate_package_price,
    quantize_weight,
)


class TestComputePackagePrice:
    """Test suite for compute_package_price."""

    def test_weight_and_premium(self):
        """2.5 kg on a 3000 fare: 2500 + 900 = 3400."""
        result = compute_package_price(Decimal("2.5"), 3000)

        assert result.base_price == 2500
        assert result.premium == 900
        assert result.price == 3400
        assert result.minimum_applied is False

    def test_minimum_price_floor(self):
        """0.1 kg on a 1000 fare totals 400 and is raised to the floor."""
        result = compute_package_price(Decimal("0.1"), 1000)

        assert result.base_price == 100
        assert result.premium == 300
        assert result.raw_total == 400
        assert result.price == MINIMUM_PRICE == 2000
        assert result.minimum_applied is True

    def test_accepts_strings_and_floats(self):
        assert compute_package_price("2.5", 3000).price == 3400
        assert compute_package_price(2.5, "3000").price == 3400

    def test_rounds_half_up_to_whole_units(self):
        """1 kg on a 5555 fare: 1000 + 1666.5 -> 2667."""
        result = compute_package_price("1", 5555)
        assert result.premium == 1667
        assert result.price == 2667

    def test_weight_is_rounded_to_stored_precision(self):
        """2.555 kg is priced as 2.56 kg."""
        result = compute_package_price("2.555", 3000)
        assert result.base_price == 2560
        assert result.price == 3460

    def test_total_exactly_at_floor(self):
        result = compute_package_price("2", 0)
        assert result.price == 2000
        assert result.minimum_applied is False

    @pytest.mark.parametrize("weight", [0, "0", -1, "-0.5"])
    def test_non_positive_weight_rejected(self, weight):
        with pytest.raises(ValidationError, match="packageWeight"):
            compute_package_price(weight, 3000)

    def test_non_numeric_weight_rejected(self):
        with pytest.raises(ValidationError, match="must be a number"):
            compute_package_price("heavy", 3000)

    @pytest.mark.parametrize("weight", ["0.004", "1000000", "1E+40"])
    def test_weight_out_of_range_after_rounding_rejected(self, weight):
        with pytest.raises(ValidationError, match="packageWeight"):
            compute_package_price(weight, 3000)

    def test_quantize_weight_rounds_half_up(self):
        assert quantize_weight("0.005") == Decimal("0.01")
        assert quantize_weight("999999.994") == MAX_WEIGHT

    def test_nan_weight_rejected(self):
        with pytest.raises(ValidationError):
            compute_package_price("NaN", 3000)

    def test_negative_fare_rejected(self):
        with pytest.raises(ValidationError, match="ticketPrice"):
            compute_package_price(1, -100)

    def test_breakdown_is_immutable(self):
        result = compute_package_price(1, 1000)
        with pytest.raises(Exception):
            result.price = 1

    def test_as_dict_uses_external_names(self):
        assert PriceBreakdown(2500, 900, 3400, False).as_dict() == {
            "basePrice": 2500,
            "premium": 900,
            "price": 3400,
            "minimumApplied": False,
        }


@pytest.mark.django_db
class TestEstimatePackagePrice:
    """Estimate and booking share one computation."""

    def test_estimate_matches_booked_price(self, trip, sender, receiver):
        from django_transit.services import book_package

        estimate = estimate_package_price("4", trip)
        package = book_package(trip, sender, receiver, "4", payment_method="CASH")

        assert estimate.price == package.price == 4900
