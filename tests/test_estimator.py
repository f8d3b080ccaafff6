import pytest

from sipbuddy.core.estimator import (
    estimate,
    estimate_liters,
    even_splits,
    rebalance_splits,
    total_drinks,
)
from sipbuddy.models.product import BEER, WINE, RTD


class TestEstimate:

    def test_all_beer_party(self):
        result = estimate(20, 4, {BEER: 100})
        beer = result[BEER]
        assert total_drinks(20, 4) == 160
        assert beer.quantity == 14
        assert beer.total_servings == 160
        assert beer.unit == "12-packs"
        assert beer.pack_size == 12

    def test_wine_bottles(self):
        wine = estimate(10, 3, {WINE: 100})[WINE]
        # 60 servings at 5 per bottle
        assert (wine.quantity, wine.unit, wine.size) == (12, "bottles", "750ml bottles")

    def test_split_rounds_up(self):
        result = estimate(7, 3, {BEER: 50, WINE: 30, RTD: 20})
        # 42 drinks total
        assert result[BEER].total_servings == 21
        assert result[BEER].quantity == 2
        assert result[WINE].total_servings == 13
        assert result[WINE].quantity == 3
        assert result[RTD].total_servings == 9
        assert result[RTD].quantity == 1

    def test_no_guests_is_zero_not_error(self):
        wine = estimate(0, 5, {WINE: 100})[WINE]
        assert wine.quantity == 0
        assert wine.total_servings == 0

    @pytest.mark.parametrize("guests,hours", [(None, 4), ("abc", 4), (10, ""), (-3, 4)])
    def test_bad_inputs_default_to_zero(self, guests, hours):
        assert estimate(guests, hours, {BEER: 100})[BEER].quantity == 0

    def test_unknown_category_ignored(self):
        assert estimate(10, 2, {"Spirits": 100}) == {}

    def test_to_dict(self):
        assert estimate(20, 4, {BEER: 100})[BEER].to_dict() == {
            "quantity": 14,
            "unit": "12-packs",
            "size": "12 oz cans/bottles",
            "packSize": 12,
            "totalServings": 160,
        }


class TestSplits:

    def test_even_splits_remainder_on_last(self):
        assert even_splits([BEER, WINE, RTD]) == {BEER: 33, WINE: 33, RTD: 34}
        assert even_splits([WINE]) == {WINE: 100}
        assert even_splits([]) == {}

    def test_rebalance(self):
        assert rebalance_splits([BEER, WINE, RTD], BEER, 50) == {BEER: 50, WINE: 25, RTD: 25}
        assert rebalance_splits([BEER, WINE, RTD], WINE, 41) == {WINE: 41, BEER: 29, RTD: 30}

    def test_rebalance_clamps(self):
        assert rebalance_splits([BEER, WINE], BEER, 150) == {BEER: 100, WINE: 0}


class TestLiters:

    def test_defaults(self):
        assert estimate_liters() == {"guestCount": 10, "duration": 4, "estimatedLiters": 20.0}

    def test_values(self):
        assert estimate_liters("30", "5") == {"guestCount": 30, "duration": 5, "estimatedLiters": 75.0}

    def test_unparsable_uses_defaults(self):
        assert estimate_liters("lots", "0")["estimatedLiters"] == 20.0

    @pytest.mark.parametrize("guests,hours", [("inf", "4"), ("10", "-inf"), ("nan", "nan")])
    def test_non_finite_uses_defaults(self, guests, hours):
        assert estimate_liters(guests, hours) == {"guestCount": 10, "duration": 4, "estimatedLiters": 20.0}

    def test_overflowing_product_uses_defaults(self):
        body = estimate_liters("1e200", "1e200")
        assert body == {"guestCount": 10, "duration": 4, "estimatedLiters": 20.0}
