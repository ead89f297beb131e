"""
Tests for the fertilizer and iron interval model.
"""

import pytest  # type: ignore
from datetime import date, timedelta

from src.lawn_tracker.algorithms import ApplicationIntervalModel, FERTILIZER_RULES, IRON_RULES
from src.lawn_tracker.algorithms.intervals import LENGTHEN, SHORTEN
from src.lawn_tracker.core import constants
from src.lawn_tracker.models import Application, ApplicationKind, SoilMeasurement


def make_application(kind, days_ago, today, product_type):
    """Build an application dated a number of days before today."""
    return Application(
        id=1,
        date=today - timedelta(days=days_ago),
        rate=3.0,
        kind=kind,
        product_type=product_type,
    )


class TestIntervalRules:
    """Test cases for interval stepping."""

    def test_fertilizer_floor_and_ceiling(self):
        assert FERTILIZER_RULES.step(4, SHORTEN) == 4
        assert FERTILIZER_RULES.step(8, LENGTHEN) == 8
        assert FERTILIZER_RULES.step(6, SHORTEN) == 5

    def test_iron_floor_and_ceiling(self):
        assert IRON_RULES.step(3, SHORTEN) == 3
        assert IRON_RULES.step(6, LENGTHEN) == 6


class TestFertilizerModel:
    """Test cases for the fertilizer program."""

    @pytest.fixture
    def model(self):
        return ApplicationIntervalModel.fertilizer()

    @pytest.fixture
    def today(self):
        return date(2024, 9, 1)

    def test_warm_season_estimate(self, model, today):
        """Test Scotts on Bermudagrass, no soil data, 100 days ago."""
        last = make_application(ApplicationKind.FERTILIZER, 100, today, "Scotts Turf Builder")
        estimate = model.next_application_estimate(last, "Scotts Turf Builder", "Bermudagrass", None, today)

        assert estimate.interval_months == 7
        assert estimate.days_until_next == 110
        assert estimate.message == "Estimated 110 days until next fertilizer application"
        assert estimate.recommendations == [constants.NO_SOIL_DATA_RECOMMENDATION]

    @pytest.mark.parametrize("product,grass,expected", [
        ("Scotts Turf Builder", "Kentucky Bluegrass", 5),
        ("Milorganite", "Zoysiagrass", 8),
        ("Milorganite", "Fine Fescue", 7),
        ("Lesco Professional", "Unknown", 6),
        ("Mystery Brand", "Unknown", 6),
        ("Mystery Brand", "Tall Fescue", 5),
    ])
    def test_grass_adjustment(self, model, product, grass, expected):
        assert model.adjusted_interval(product, grass) == expected

    def test_low_nitrogen_shortens(self, model):
        assert model.adjusted_interval("Scotts Turf Builder", "Unknown", {"nitrogen": 10}) == 5

    def test_high_nitrogen_lengthens(self, model):
        assert model.adjusted_interval("Scotts Turf Builder", "Unknown", {"nitrogen": 80}) == 7

    def test_soil_values_given_as_text(self, model):
        """Test string soil values are parsed and junk is ignored."""
        assert model.adjusted_interval("Scotts Turf Builder", "Unknown", {"nitrogen": "12 ppm"}) == 5
        assert model.adjusted_interval("Scotts Turf Builder", "Unknown", {"nitrogen": "n/a"}) == 6

    def test_soil_adjustments_respect_floor(self, model):
        """Test sequential adjustments never drop below four months."""
        soil = {"nitrogen": 10, "organicMatter": 1.0}
        assert model.adjusted_interval("Scotts Turf Builder", "Kentucky Bluegrass", soil) == 4

    def test_optimal_soil_unchanged(self, model, optimal_soil):
        assert model.adjusted_interval("Scotts Turf Builder", "Unknown", optimal_soil) == 6

    def test_recommendations_from_soil(self, model, today):
        """Test recommendations come from the soil interpreter."""
        soil = SoilMeasurement(id=1, date=today, values={"nitrogen": 10, "pH": 6.5})
        last = make_application(ApplicationKind.FERTILIZER, 30, today, "Milorganite")
        estimate = model.next_application_estimate(last, "Milorganite", "Unknown", soil, today)

        assert estimate.interval_months == 7
        assert estimate.days_until_next == 180
        assert estimate.recommendations == ["Increase nitrogen application rate or frequency"]

    def test_estimate_with_text_soil_values(self, model, today):
        last = make_application(ApplicationKind.FERTILIZER, 30, today, "Milorganite")
        estimate = model.next_application_estimate(
            last, "Milorganite", None, {"nitrogen": "12 ppm", "pH": "high"}, today
        )

        assert estimate.interval_months == 7
        assert estimate.days_until_next == 180
        assert estimate.recommendations == ["Increase nitrogen application rate or frequency"]

    def test_ready_message(self, model, today):
        last = make_application(ApplicationKind.FERTILIZER, 400, today, "Scotts Turf Builder")
        estimate = model.next_application_estimate(last, "Scotts Turf Builder", "Unknown", None, today)

        assert estimate.days_until_next == 0
        assert estimate.message == "Ready for next fertilizer application!"

    def test_missing_inputs(self, model, today):
        """Test that missing application or product yields no estimate."""
        last = make_application(ApplicationKind.FERTILIZER, 30, today, None)
        assert model.next_application_estimate(None, "Milorganite", "Unknown", None, today) is None
        assert model.next_application_estimate(last, None, "Unknown", None, today) is None
        assert model.next_application_estimate(last, "", "Unknown", None, today) is None


class TestIronModel:
    """Test cases for the iron program."""

    @pytest.fixture
    def model(self):
        return ApplicationIntervalModel.iron()

    @pytest.fixture
    def today(self):
        return date(2024, 9, 1)

    @pytest.mark.parametrize("product,grass,expected", [
        ("Ferrous Sulfate", "Kentucky Bluegrass", 3),
        ("Ferrous Sulfate", "Bermudagrass", 4),
        ("Ironite", "Perennial Ryegrass", 5),
        ("Unknown Iron", "Unknown", 4),
    ])
    def test_grass_adjustment(self, model, product, grass, expected):
        assert model.adjusted_interval(product, grass) == expected

    def test_alkaline_soil_shortens(self, model):
        assert model.adjusted_interval("Chelated Iron", "Unknown", {"pH": 7.5}) == 3
        assert model.adjusted_interval("Ferrous Sulfate", "Kentucky Bluegrass", {"pH": 7.8}) == 3

    def test_acidic_soil_lengthens(self, model):
        assert model.adjusted_interval("Ironite", "Unknown", {"pH": 5.8}) == 6
        assert model.adjusted_interval("Chelated Iron", "Bermudagrass", {"pH": 5.5}) == 5

    def test_neutral_or_missing_ph(self, model):
        assert model.adjusted_interval("Chelated Iron", "Unknown", {"pH": 6.5}) == 4
        assert model.adjusted_interval("Chelated Iron", "Unknown", {"nitrogen": 10}) == 4

    def test_estimate_has_no_recommendations(self, model, today):
        last = make_application(ApplicationKind.IRON, 20, today, "Chelated Iron")
        estimate = model.next_application_estimate(last, "Chelated Iron", "Unknown", None, today)

        assert estimate.interval_months == 4
        assert estimate.days_until_next == 100
        assert estimate.message == "Estimated 100 days until next iron application"
        assert estimate.recommendations is None

    def test_ready_message(self, model, today):
        last = make_application(ApplicationKind.IRON, 200, today, "Chelated Iron")
        estimate = model.next_application_estimate(last, "Chelated Iron", "Unknown", None, today)

        assert estimate.message == "Ready for next iron application!"
