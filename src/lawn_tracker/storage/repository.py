"""
Lawn repository.

Owns the application log, soil history and settings on top of an injected
key-value store. Each application kind is persisted under its own key
('applications:pgr', 'applications:fertilizer', 'applications:iron'), but all
kinds share one CRUD path.
"""

import logging
import time
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..core.date_utils import DateLike, DateUtils
from ..models.application import Application, ApplicationKind
from ..models.settings import Settings
from ..models.soil import SoilMeasurement
from ..processing.history import HistoryAggregator
from ..processing.validator import DataValidator
from .store import KeyValueStore

SOIL_KEY = "soil:measurements"
SETTINGS_KEY = "settings"


class LawnRepository:
    """Persistent state of a single lawn profile."""

    def __init__(
        self,
        store: KeyValueStore,
        validator: Optional[DataValidator] = None,
        clock: Callable[[], float] = time.time,
        today: Callable[[], date] = date.today,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize repository.

        Args:
            store: Key-value store holding the state
            validator: Validator for application input
            clock: Time source (seconds since epoch) used for new ids
            today: Source of the current day for undated soil tests
            logger: Logger instance
        """
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.validator = validator or DataValidator(logger=self.logger)
        self.clock = clock
        self.today = today
        self.history = HistoryAggregator(logger=self.logger)

    # Applications

    def _load_kind(self, kind: ApplicationKind) -> List[Application]:
        records = self.store.get(kind.storage_key, []) or []
        applications = []
        for record in records:
            record = dict(record)
            record.setdefault("kind", kind.value)
            try:
                applications.append(Application.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning(f"Skipping unreadable {kind.value} record {record.get('id')}: {e}")
        return applications

    def _save_kind(self, kind: ApplicationKind, applications: Sequence[Application]) -> None:
        self.store.set(kind.storage_key, [app.to_dict() for app in applications])

    def _next_id(self) -> int:
        existing = [app.id for app in self.applications()]
        existing.extend(m.id for m in self.soil_measurements())
        candidate = int(self.clock() * 1000)
        if existing:
            candidate = max(candidate, max(existing) + 1)
        return candidate

    def _build_application(self, app_id: int, fields: Dict[str, Any]) -> Application:
        is_valid, errors = self.validator.validate_application(fields)
        if not is_valid:
            raise ValueError(f"Invalid application: {'; '.join(errors)}")

        kind = ApplicationKind(fields["kind"])
        return Application(
            id=app_id,
            date=DateUtils.to_date(fields["date"]),
            rate=self.validator.parse_number(fields["rate"]),
            kind=kind,
            product_type=fields.get("product_type") or None,
            npk=(fields.get("npk") or None) if kind == ApplicationKind.FERTILIZER else None,
            notes=fields.get("notes") or None,
        )

    def applications(self, kind: Optional[ApplicationKind] = None) -> List[Application]:
        """
        Load the application log.

        Args:
            kind: Restrict to one kind; None returns every kind

        Returns:
            Applications in insertion order (grouped by kind when unfiltered)
        """
        kinds = [kind] if kind is not None else list(ApplicationKind)
        result: List[Application] = []
        for k in kinds:
            result.extend(self._load_kind(k))
        return result

    def add_application(
        self,
        kind: ApplicationKind,
        date: DateLike,
        rate: float,
        product_type: Optional[str] = None,
        npk: Optional[str] = None,
        notes: Optional[str] = None
    ) -> Application:
        """
        Record a new application.

        Raises:
            ValueError: If the input is invalid
        """
        application = self._build_application(self._next_id(), {
            "kind": kind,
            "date": date,
            "rate": rate,
            "product_type": product_type,
            "npk": npk,
            "notes": notes,
        })

        history = self._load_kind(application.kind)
        history.append(application)
        self._save_kind(application.kind, history)

        self.logger.info(
            f"Recorded {application.kind.value} application {application.id} "
            f"on {application.date.isoformat()}"
        )
        return application

    def edit_application(
        self,
        app_id: int,
        kind: ApplicationKind,
        date: DateLike,
        rate: float,
        product_type: Optional[str] = None,
        npk: Optional[str] = None,
        notes: Optional[str] = None
    ) -> Application:
        """
        Replace every field of an application except its id.

        The record keeps its position in the log unless its kind changes,
        in which case it is appended to the new kind's history.

        Raises:
            KeyError: If no application has this id
            ValueError: If the input is invalid
        """
        existing = self.get_application(app_id)
        if existing is None:
            raise KeyError(f"Application {app_id} not found")

        updated = self._build_application(app_id, {
            "kind": kind,
            "date": date,
            "rate": rate,
            "product_type": product_type,
            "npk": npk,
            "notes": notes,
        })

        if updated.kind == existing.kind:
            history = [updated if app.id == app_id else app for app in self._load_kind(existing.kind)]
            self._save_kind(existing.kind, history)
        else:
            old_history = [app for app in self._load_kind(existing.kind) if app.id != app_id]
            self._save_kind(existing.kind, old_history)
            new_history = self._load_kind(updated.kind)
            new_history.append(updated)
            self._save_kind(updated.kind, new_history)

        self.logger.info(f"Updated {updated.kind.value} application {app_id}")
        return updated

    def delete_application(self, app_id: int) -> bool:
        """
        Delete an application by id.

        Returns:
            True if a record was removed
        """
        for kind in ApplicationKind:
            history = self._load_kind(kind)
            remaining = [app for app in history if app.id != app_id]
            if len(remaining) != len(history):
                self._save_kind(kind, remaining)
                self.logger.info(f"Deleted {kind.value} application {app_id}")
                return True

        self.logger.warning(f"Application {app_id} not found, nothing deleted")
        return False

    def get_application(self, app_id: int) -> Optional[Application]:
        """Find an application by id."""
        for app in self.applications():
            if app.id == app_id:
                return app
        return None

    def most_recent(self, kind: ApplicationKind) -> Optional[Application]:
        """Most recent application of a kind."""
        return self.history.most_recent(self._load_kind(kind))

    # Soil

    def soil_measurements(self) -> List[SoilMeasurement]:
        """Load the soil history in insertion order."""
        measurements = []
        for record in self.store.get(SOIL_KEY, []) or []:
            try:
                measurements.append(SoilMeasurement.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning(f"Skipping unreadable soil record {record.get('id')}: {e}")
        return measurements

    def add_soil_measurement(
        self,
        values: Dict[str, float],
        measured_on: Optional[date] = None,
        recommendations: Optional[List[str]] = None,
        priority_actions: Optional[List[str]] = None,
        overall_assessment: Optional[str] = None,
        source: str = "manual"
    ) -> SoilMeasurement:
        """
        Record a soil test snapshot.

        Args:
            values: Already validated soil values
            measured_on: Test date (defaults to today)
            recommendations: Narrative recommendations from the analyzer
            priority_actions: Priority actions from the analyzer
            overall_assessment: Overall assessment from the analyzer
            source: 'manual', 'ai' or 'text'

        Returns:
            The stored measurement
        """
        measurement = SoilMeasurement(
            id=self._next_id(),
            date=measured_on or self.today(),
            values=dict(values),
            recommendations=list(recommendations or []),
            priority_actions=list(priority_actions or []),
            overall_assessment=overall_assessment,
            source=source,
        )

        history = self.soil_measurements()
        history.append(measurement)
        self.store.set(SOIL_KEY, [m.to_dict() for m in history])

        self.logger.info(
            f"Recorded soil measurement {measurement.id} ({source}) with "
            f"{len(measurement.values)} value(s)"
        )
        return measurement

    def latest_soil_measurement(self) -> Optional[SoilMeasurement]:
        """Most recent soil measurement by date."""
        return self.history.latest_measurement(self.soil_measurements())

    # Settings

    def settings(self) -> Settings:
        """Load lawn settings (defaults when none are stored)."""
        return Settings.from_dict(self.store.get(SETTINGS_KEY))

    def save_settings(self, settings: Settings) -> Settings:
        """
        Persist lawn settings.

        Raises:
            ValueError: If the settings are invalid
        """
        is_valid, errors = self.validator.validate_settings(settings.to_dict())
        if not is_valid:
            raise ValueError(f"Invalid settings: {'; '.join(errors)}")

        self.store.set(SETTINGS_KEY, settings.to_dict())
        self.logger.info(f"Saved settings: {settings}")
        return settings
