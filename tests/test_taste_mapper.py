"""Tests for the 1-10 taste profile projection."""

import pytest

from palate.constants import WineKnowledge
from palate.mapper import default_profile
from palate.schema import validate
from palate.taste_mapper import DEFAULT_CONFIDENCE, to_body, to_scale10, to_taste_profile


class TestScales:

    @pytest.mark.parametrize("value,expected", [
        (0.0, 1), (1.0, 10), (0.5, 6), (0.3, 4), (None, 6),
    ])
    def test_to_scale10(self, value, expected):
        assert to_scale10(value) == expected

    def test_to_scale10_fallback(self):
        assert to_scale10(None, fallback=0.3) == 4

    @pytest.mark.parametrize("value,expected", [
        (0.39, "light"), (0.4, "medium"), (0.7, "medium"), (0.71, "full"), (None, "medium"),
    ])
    def test_to_body(self, value, expected):
        assert to_body(value) == expected


class TestToTasteProfile:

    def test_structure_comes_from_stable_palate(self, profile_data):
        """Category acidity, tannin and body do not override the palate."""
        profile_data["flavorMaps"]["red"]["tannin"] = 1.0
        profile_data["flavorMaps"]["red"]["body"] = 0.1
        profile_data["flavorMaps"]["white"]["acidity"] = 1.0
        taste = to_taste_profile(validate(profile_data), confidence=0.91)

        assert taste.red.tannins == 8
        assert taste.red.body == "full"
        assert taste.white.acidity == 6
        assert taste.confidence_score == 0.91

    def test_category_supplies_fruit_and_oak(self, profile_data):
        profile_data["flavorMaps"]["red"]["fruitRipeness"] = 1.0
        taste = to_taste_profile(validate(profile_data))

        assert taste.red.fruitiness == 10
        assert taste.white.fruitiness == 6
        assert taste.white.oakiness == 3
        # No oak in the sparkling map, so the style lever is used
        assert taste.sparkling.oakiness == 6

    def test_earthiness_is_neutral(self, profile_data):
        taste = to_taste_profile(validate(profile_data))
        assert {taste.red.earthiness, taste.white.earthiness, taste.sparkling.earthiness} == {6}

    def test_missing_categories_fall_back_to_palate(self):
        taste = to_taste_profile(default_profile("u-1", WineKnowledge.NOVICE))

        assert taste.sparkling.acidity == 6
        assert taste.sparkling.oakiness == 4
        assert taste.sparkling.body == "medium"
        assert taste.confidence_score == DEFAULT_CONFIDENCE

    @pytest.mark.parametrize("tier,price", [
        ("weeknight", (10, 25)), ("weekend", (20, 50)), ("celebration", (50, 150)),
    ])
    def test_price_range_from_budget(self, profile_data, tier, price):
        profile_data["preferences"]["budgetTier"] = tier
        taste = to_taste_profile(validate(profile_data))
        assert (taste.price_min, taste.price_max) == price
        assert taste.currency == "USD"

    def test_dislikes_carried_to_every_category(self, profile_data):
        profile_data["dislikes"] = ["buttery"]
        taste = to_taste_profile(validate(profile_data))
        assert taste.white.disliked_characteristics == ["buttery"]
        assert taste.red.disliked_characteristics == ["buttery"]
