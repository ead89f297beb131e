"""
Fertilizer and iron application interval model.

Both programs share one algorithm: start from the product's base interval
(months), adjust for the grass class, adjust for soil conditions, then convert
to days with a flat 30-day month and subtract the days already elapsed.
Each program supplies its own IntervalRules.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Union

from ..core import constants
from ..core.date_utils import DateUtils, DateLike
from ..models.application import Application
from ..models.catalog import FERTILIZER_PRODUCTS, IRON_PRODUCTS, ProductCatalog
from ..models.grass import GrassClass, GrassType, classify_grass
from ..models.recommendation import ApplicationEstimate
from ..models.soil import SOIL_RANGES
from .soil import SoilInput, SoilInterpreter, soil_values

SHORTEN = -1
LENGTHEN = 1


@dataclass(frozen=True)
class IntervalRules:
    """Parameters of one application program."""

    label: str  # used in messages, e.g. 'fertilizer'
    catalog: ProductCatalog
    default_interval: int  # months, for products missing from the catalog
    min_interval: int
    max_interval: int
    grass_adjustments: Dict[GrassClass, int] = field(default_factory=dict)
    soil_adjustment: Optional[Callable[["IntervalRules", int, Dict[str, float]], int]] = None
    include_recommendations: bool = False

    def step(self, interval: int, direction: int) -> int:
        """Move an interval one month, respecting the floor or ceiling."""
        if direction == SHORTEN:
            return max(self.min_interval, interval - 1)
        if direction == LENGTHEN:
            return min(self.max_interval, interval + 1)
        return interval


def fertilizer_soil_adjustment(
    rules: IntervalRules,
    interval: int,
    values: Dict[str, float]
) -> int:
    """Feed more often when nitrogen or organic matter is low, less when nitrogen is high."""
    nitrogen = values.get("nitrogen")
    if nitrogen is not None:
        if nitrogen < SOIL_RANGES["nitrogen"].low:
            interval = rules.step(interval, SHORTEN)
        elif nitrogen > SOIL_RANGES["nitrogen"].high:
            interval = rules.step(interval, LENGTHEN)

    organic_matter = values.get("organicMatter")
    if organic_matter is not None and organic_matter < SOIL_RANGES["organicMatter"].low:
        interval = rules.step(interval, SHORTEN)

    return interval


def iron_soil_adjustment(
    rules: IntervalRules,
    interval: int,
    values: Dict[str, float]
) -> int:
    """Apply iron more often on alkaline soil, where it is less available."""
    ph = values.get("pH")
    if not ph:
        return interval
    if ph > constants.IRON_HIGH_PH:
        return rules.step(interval, SHORTEN)
    if ph < constants.IRON_LOW_PH:
        return rules.step(interval, LENGTHEN)
    return interval


FERTILIZER_RULES = IntervalRules(
    label="fertilizer",
    catalog=FERTILIZER_PRODUCTS,
    default_interval=constants.FERTILIZER_DEFAULT_INTERVAL,
    min_interval=constants.FERTILIZER_MIN_INTERVAL,
    max_interval=constants.FERTILIZER_MAX_INTERVAL,
    grass_adjustments={
        GrassClass.COOL_SEASON: SHORTEN,
        GrassClass.WARM_SEASON: LENGTHEN,
    },
    soil_adjustment=fertilizer_soil_adjustment,
    include_recommendations=True,
)

IRON_RULES = IntervalRules(
    label="iron",
    catalog=IRON_PRODUCTS,
    default_interval=constants.IRON_DEFAULT_INTERVAL,
    min_interval=constants.IRON_MIN_INTERVAL,
    max_interval=constants.IRON_MAX_INTERVAL,
    grass_adjustments={
        GrassClass.COOL_SEASON: SHORTEN,
    },
    soil_adjustment=iron_soil_adjustment,
)


class ApplicationIntervalModel:
    """
    Estimate the next application date for a fertilizer or iron program.
    """

    def __init__(
        self,
        rules: IntervalRules,
        interpreter: Optional[SoilInterpreter] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize interval model.

        Args:
            rules: Program rules (FERTILIZER_RULES or IRON_RULES)
            interpreter: Soil interpreter used for fertilizer recommendations
            logger: Logger instance
        """
        self.rules = rules
        self.logger = logger or logging.getLogger(__name__)
        self.interpreter = interpreter or SoilInterpreter(logger=self.logger)

    @classmethod
    def fertilizer(cls, logger: Optional[logging.Logger] = None) -> "ApplicationIntervalModel":
        """Create a model for the fertilizer program."""
        return cls(FERTILIZER_RULES, logger=logger)

    @classmethod
    def iron(cls, logger: Optional[logging.Logger] = None) -> "ApplicationIntervalModel":
        """Create a model for the iron program."""
        return cls(IRON_RULES, logger=logger)

    def base_interval(self, product_type: str) -> int:
        """
        Look up a product's base interval in months.

        Args:
            product_type: Catalog key

        Returns:
            Catalog interval, or the program default for unknown products
        """
        entry = self.rules.catalog.get(product_type)
        if entry is None:
            self.logger.warning(
                f"Unknown {self.rules.label} product '{product_type}', "
                f"using default interval of {self.rules.default_interval} months"
            )
            return self.rules.default_interval
        return entry.interval_months

    def adjusted_interval(
        self,
        product_type: str,
        grass_type: Optional[Union[GrassType, str]],
        soil: Optional[SoilInput] = None
    ) -> int:
        """
        Calculate the re-application interval in months.

        Args:
            product_type: Catalog key
            grass_type: Grass type name
            soil: Latest soil measurement, if any

        Returns:
            Interval in months after grass and soil adjustments
        """
        interval = self.base_interval(product_type)

        direction = self.rules.grass_adjustments.get(classify_grass(grass_type))
        if direction is not None:
            interval = self.rules.step(interval, direction)

        if soil is not None and self.rules.soil_adjustment is not None:
            interval = self.rules.soil_adjustment(self.rules, interval, soil_values(soil))

        return interval

    def next_application_estimate(
        self,
        last_application: Optional[Application],
        product_type: Optional[str],
        grass_type: Optional[Union[GrassType, str]],
        soil: Optional[SoilInput],
        today: DateLike
    ) -> Optional[ApplicationEstimate]:
        """
        Estimate when the next application is due.

        Args:
            last_application: Most recent application of this program
            product_type: Product used (catalog key)
            grass_type: Grass type name
            soil: Latest soil measurement, if any
            today: Reference date

        Returns:
            ApplicationEstimate, or None without a last application or product
        """
        if last_application is None or not product_type:
            return None

        interval = self.adjusted_interval(product_type, grass_type, soil)
        days_since = DateUtils.days_between(last_application.date, today)
        days_until_next = max(0, interval * constants.DAYS_PER_MONTH - days_since)

        label = self.rules.label
        if days_until_next == 0:
            message = f"Ready for next {label} application!"
        else:
            message = f"Estimated {days_until_next} days until next {label} application"

        self.logger.debug(
            f"{label.capitalize()} estimate for '{product_type}': interval {interval} months, "
            f"{days_since} days since last application"
        )

        recommendations = None
        if self.rules.include_recommendations:
            recommendations = self.interpreter.generate_recommendations(soil)

        return ApplicationEstimate(
            days_until_next=days_until_next,
            interval_months=interval,
            message=message,
            recommendations=recommendations,
        )
