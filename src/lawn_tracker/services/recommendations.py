"""
Recommendation orchestration service.

Combines the GDD model, the fertilizer and iron interval models and the soil
interpreter into one RecommendationBundle. The bundle is a pure projection of
its inputs: nothing is cached or mutated between calls.
"""

import logging
from typing import Optional, Sequence

from ..algorithms import (
    FERTILIZER_RULES,
    IRON_RULES,
    ApplicationIntervalModel,
    GDDCalculator,
    SoilInterpreter,
)
from ..core.date_utils import DateLike, DateUtils
from ..models.application import Application, ApplicationKind
from ..models.recommendation import GDDInfo, RecommendationBundle
from ..models.settings import Settings
from ..models.soil import SoilMeasurement
from ..models.weather import WeatherSnapshot
from ..processing.history import HistoryAggregator


class RecommendationOrchestrator:
    """Build recommendation bundles from application and soil history."""

    def __init__(
        self,
        interpreter: Optional[SoilInterpreter] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize orchestrator.

        Args:
            interpreter: Soil interpreter shared by the interval models
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.interpreter = interpreter or SoilInterpreter(logger=self.logger)
        self.fertilizer_model = ApplicationIntervalModel(FERTILIZER_RULES, self.interpreter, self.logger)
        self.iron_model = ApplicationIntervalModel(IRON_RULES, self.interpreter, self.logger)
        self.history = HistoryAggregator(logger=self.logger)

    def gdd_info(
        self,
        last_pgr: Optional[Application],
        settings: Settings,
        weather: Optional[WeatherSnapshot],
        today: DateLike
    ) -> Optional[GDDInfo]:
        """
        Compute the GDD summary and PGR estimate.

        Args:
            last_pgr: Most recent PGR application
            settings: Lawn settings (grass type required)
            weather: Current weather snapshot
            today: Reference date

        Returns:
            GDDInfo, or None without weather or grass type
        """
        if weather is None or not settings.grass_type:
            self.logger.info("Skipping GDD: weather or grass type not available")
            return None

        base_temp = GDDCalculator.base_temp_for(settings.grass_type)
        current_gdd = GDDCalculator.daily_gdd(
            weather.forecast_avg_max_temp,
            weather.forecast_avg_min_temp,
            base_temp
        )

        next_estimate = None
        if last_pgr is not None:
            next_estimate = GDDCalculator.estimate_next_pgr_application(
                last_pgr.date, current_gdd, today
            )

        self.logger.info(f"GDD: {current_gdd:.1f} (base {base_temp:g}°F)")
        return GDDInfo(
            current_gdd=current_gdd,
            base_temp=base_temp,
            next_estimate=next_estimate,
            weather=weather,
        )

    def build_recommendations(
        self,
        applications: Sequence[Application],
        soil_history: Sequence[SoilMeasurement],
        settings: Optional[Settings],
        weather: Optional[WeatherSnapshot],
        today: DateLike
    ) -> RecommendationBundle:
        """
        Build the recommendation bundle.

        Args:
            applications: Application log of every kind, in insertion order
            soil_history: Soil measurements, in insertion order
            settings: Lawn settings
            weather: Current weather snapshot, or None if unavailable
            today: Reference date

        Returns:
            RecommendationBundle with absent fields where data is missing
        """
        settings = settings or Settings()
        today = DateUtils.to_date(today)
        if today is None:
            raise ValueError("A valid reference date is required")

        last_pgr = self.history.most_recent(applications, ApplicationKind.PGR)
        last_fertilizer = self.history.most_recent(applications, ApplicationKind.FERTILIZER)
        last_iron = self.history.most_recent(applications, ApplicationKind.IRON)
        latest_soil = self.history.latest_measurement(soil_history)

        bundle = RecommendationBundle(
            gdd_info=self.gdd_info(last_pgr, settings, weather, today),
            fertilizer=self.fertilizer_model.next_application_estimate(
                last_fertilizer,
                last_fertilizer.product_type if last_fertilizer else None,
                settings.grass_type,
                latest_soil,
                today
            ),
            iron=self.iron_model.next_application_estimate(
                last_iron,
                last_iron.product_type if last_iron else None,
                settings.grass_type,
                latest_soil,
                today
            ),
            soil_analysis=self.interpreter.analyze(latest_soil),
        )

        self.logger.info(
            "Recommendations built: "
            f"gdd={'yes' if bundle.gdd_info else 'no'}, "
            f"fertilizer={'yes' if bundle.fertilizer else 'no'}, "
            f"iron={'yes' if bundle.iron else 'no'}, "
            f"soil={'yes' if bundle.soil_analysis else 'no'}"
        )
        return bundle

    def build_from_repository(
        self,
        repository,
        weather: Optional[WeatherSnapshot],
        today: DateLike
    ) -> RecommendationBundle:
        """
        Build the recommendation bundle from a LawnRepository.

        Args:
            repository: Repository holding applications, soil history and settings
            weather: Current weather snapshot, or None if unavailable
            today: Reference date

        Returns:
            RecommendationBundle
        """
        return self.build_recommendations(
            repository.applications(),
            repository.soil_measurements(),
            repository.settings(),
            weather,
            today
        )
