"""
Main entry point for the lawn tracker.

Wires configuration, storage, providers and services together and exposes
them through a command-line interface with JSON output.
"""

import json
import sys
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List, Optional

from .api import OpenAISoilAnalyzer, OpenWeatherMapAPI, ProviderError
from .core import Config, DateUtils
from .logger import setup_logger, LoggerContext
from .models import (
    SOIL_PARAMETERS,
    Application,
    ApplicationKind,
    RecommendationBundle,
    Settings,
    WeatherSnapshot,
)
from .processing import DataValidator, HistoryAggregator
from .services import RecommendationOrchestrator, SoilReportService
from .storage import JSONFileStore, LawnRepository


class LawnTrackerApp:
    """Main application for the lawn tracker."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
        """
        self.config = Config(config_file)

        self.logger = setup_logger(
            log_file=self.config.get("logging.file"),
            log_level=self.config.get("logging.level", "INFO"),
            console_level=self.config.get("logging.console_level")
        )
        self.logger.info("=" * 60)
        self.logger.info("Lawn Tracker")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}")

        self.date_utils = DateUtils(logger=self.logger)
        self.validator = DataValidator(logger=self.logger)
        self.history = HistoryAggregator(logger=self.logger)
        self.repository = LawnRepository(
            JSONFileStore(self.config.storage_path, logger=self.logger),
            validator=self.validator,
            today=self.today,
            logger=self.logger
        )
        self.orchestrator = RecommendationOrchestrator(logger=self.logger)

        self.weather_client = OpenWeatherMapAPI(
            api_key=self.config.weather_api_key,
            base_url=self.config.weather_base_url,
            timeout=self.config.weather_timeout,
            max_retries=self.config.weather_max_retries,
            logger=self.logger
        )
        self.soil_analyzer = OpenAISoilAnalyzer(
            api_key=self.config.analyzer_api_key,
            base_url=self.config.analyzer_base_url,
            model=self.config.analyzer_model,
            max_tokens=self.config.analyzer_max_tokens,
            temperature=self.config.analyzer_temperature,
            timeout=self.config.analyzer_timeout,
            validator=self.validator,
            logger=self.logger
        )
        self.soil_reports = SoilReportService(
            self.repository,
            analyzer=self.soil_analyzer,
            validator=self.validator,
            logger=self.logger
        )

    def today(self) -> date:
        """Current day in the configured timezone."""
        return self.date_utils.today(self.config.timezone)

    def fetch_weather(self, settings: Settings) -> Optional[WeatherSnapshot]:
        """
        Fetch weather for the configured zip code.

        Provider failures are logged and leave the snapshot absent.

        Args:
            settings: Lawn settings

        Returns:
            Weather snapshot, or None if unavailable
        """
        if not settings.zip_code:
            self.logger.warning("No zip code configured, skipping weather")
            return None

        try:
            with LoggerContext(self.logger, "weather fetch", expected=(ProviderError,)):
                return self.weather_client.fetch(
                    settings.zip_code,
                    self.config.weather_country_code
                )
        except ProviderError:
            self.logger.info("Continuing without weather data")
            return None

    def recommend(self, today: Optional[date] = None) -> RecommendationBundle:
        """
        Build recommendations for the stored lawn state.

        Args:
            today: Reference date (defaults to today in the configured timezone)

        Returns:
            Recommendation bundle
        """
        today = today or self.today()
        weather = self.fetch_weather(self.repository.settings())

        with LoggerContext(self.logger, "recommendation build"):
            return self.orchestrator.build_from_repository(self.repository, weather, today)

    def application_summary(self, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Summarize the application log.

        Args:
            today: Reference date

        Returns:
            Per-kind count, days since last application and total product used
        """
        today = today or self.today()
        applications = self.repository.applications()
        settings = self.repository.settings()

        summary = {}
        for kind in ApplicationKind:
            summary[kind.value] = {
                "count": sum(1 for app in applications if app.kind == kind),
                "days_since_last": self.history.days_since_last(applications, kind, today),
                "total_used": self.history.total_product_used(
                    applications, settings.square_footage, kind
                ),
            }
        return summary

    def close(self) -> None:
        """Release HTTP sessions."""
        self.weather_client.close()
        self.soil_analyzer.close()


def to_json(value: Any) -> str:
    """Serialize dataclasses, lists of dataclasses and dates to JSON."""
    if isinstance(value, list):
        value = [asdict(item) if hasattr(item, "__dataclass_fields__") else item for item in value]
    elif hasattr(value, "__dataclass_fields__"):
        value = asdict(value)
    return json.dumps(value, indent=2, default=str)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    parsed = DateUtils.to_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date format: {value}. Use YYYY-MM-DD")
    return parsed


def build_parser():
    """Build the command-line argument parser."""
    import argparse

    parser = argparse.ArgumentParser(description="Lawn care tracking and recommendations")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    recommend = subparsers.add_parser("recommend", help="Show recommendations")
    recommend.add_argument("--date", type=str, default=None, help="Reference date (YYYY-MM-DD)")

    for name in ("add-application", "edit-application"):
        sub = subparsers.add_parser(name, help=f"{name.split('-')[0].capitalize()} an application")
        if name == "edit-application":
            sub.add_argument("id", type=int, help="Application id")
        sub.add_argument("kind", choices=[k.value for k in ApplicationKind])
        sub.add_argument("--date", type=str, required=True, help="Application date (YYYY-MM-DD)")
        sub.add_argument("--rate", type=str, required=True, help="Rate per 1000 sq ft")
        sub.add_argument("--product", type=str, default=None, help="Product type")
        sub.add_argument("--npk", type=str, default=None, help="NPK analysis (fertilizer only)")
        sub.add_argument("--notes", type=str, default=None)

    delete = subparsers.add_parser("delete-application", help="Delete an application")
    delete.add_argument("id", type=int, help="Application id")

    list_apps = subparsers.add_parser("list-applications", help="List applications")
    list_apps.add_argument("--kind", choices=[k.value for k in ApplicationKind], default=None)
    list_apps.add_argument("--summary", action="store_true", help="Show totals per kind")

    add_soil = subparsers.add_parser("add-soil", help="Enter soil test values")
    add_soil.add_argument("--date", type=str, default=None, help="Test date (YYYY-MM-DD)")
    for parameter in SOIL_PARAMETERS:
        add_soil.add_argument(f"--{parameter}", type=str, default=None)

    import_soil = subparsers.add_parser("import-soil", help="Import a soil report file")
    import_soil.add_argument("path", type=str, help="Report image or text file")
    import_soil.add_argument("--date", type=str, default=None, help="Test date (YYYY-MM-DD)")

    soil_history = subparsers.add_parser("soil-history", help="Show soil history")
    soil_history.add_argument(
        "--range",
        choices=["3months", "6months", "1year", "all"],
        default="all"
    )
    soil_history.add_argument("--parameter", type=str, default=None, help="Show one parameter as a series")

    settings = subparsers.add_parser("settings", help="Show or update lawn settings")
    settings.add_argument("--grass-type", type=str, default=None)
    settings.add_argument("--zip-code", type=str, default=None)
    settings.add_argument("--square-footage", type=float, default=None)

    return parser


def run_command(app: LawnTrackerApp, args) -> Any:
    """
    Execute a parsed command.

    Returns:
        Result to print as JSON
    """
    repo = app.repository

    if args.command == "recommend":
        return app.recommend(_parse_date(args.date))

    if args.command == "add-application":
        return repo.add_application(
            ApplicationKind(args.kind), args.date, args.rate,
            product_type=args.product, npk=args.npk, notes=args.notes
        )

    if args.command == "edit-application":
        return repo.edit_application(
            args.id, ApplicationKind(args.kind), args.date, args.rate,
            product_type=args.product, npk=args.npk, notes=args.notes
        )

    if args.command == "delete-application":
        return {"deleted": repo.delete_application(args.id)}

    if args.command == "list-applications":
        if args.summary:
            return app.application_summary()
        kind = ApplicationKind(args.kind) if args.kind else None
        applications: List[Application] = repo.applications(kind)
        return sorted(applications, key=lambda a: a.date, reverse=True)

    if args.command == "add-soil":
        values = {
            p: getattr(args, p)
            for p in SOIL_PARAMETERS
            if getattr(args, p) is not None
        }
        return app.soil_reports.add_manual(values, _parse_date(args.date))

    if args.command == "import-soil":
        with LoggerContext(
            app.logger,
            f"soil report import from {args.path}",
            expected=(ProviderError, ValueError)
        ):
            return app.soil_reports.import_document(args.path, _parse_date(args.date))

    if args.command == "soil-history":
        history = repo.soil_measurements()
        if args.parameter:
            series = app.history.parameter_series(history, args.parameter, args.range, app.today())
            return [{"date": day.isoformat(), "value": value} for day, value in series]
        return app.history.filter_soil_history(history, args.range, app.today())

    if args.command == "settings":
        current = repo.settings()
        if args.grass_type is None and args.zip_code is None and args.square_footage is None:
            return current
        updated = Settings(
            grass_type=args.grass_type if args.grass_type is not None else current.grass_type,
            zip_code=args.zip_code if args.zip_code is not None else current.zip_code,
            square_footage=(
                args.square_footage if args.square_footage is not None else current.square_footage
            ),
            use_geolocation=current.use_geolocation,
        )
        return repo.save_settings(updated)

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    app = None
    try:
        app = LawnTrackerApp(config_file=args.config)
        result = run_command(app, args)
        print(to_json(result))
    except (KeyError, ValueError, ProviderError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Application failed: {e}")
        sys.exit(1)
    finally:
        if app is not None:
            app.close()


if __name__ == "__main__":
    main()
