from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Mapping, Optional

from ..common.logger import get_logger
from ..core.enums import PenaltyType
from ..core.exceptions import InvalidCoordinate
from ..geo.geofence import GeoPoint
from .model import AppSettings, GeofenceSettings, RateTable
from .repository import SettingsRepository

logger = get_logger(__name__)

_TRUE = {"1", "true", "yes", "on"}


def _to_bool(value: str) -> bool:
    return str(value).strip().lower() in _TRUE


class SettingsProvider:
    """Loads AppSettings from the settings collaborator.

    Stored values override deployment defaults key by key. A missing table, an
    unreachable database or a malformed value falls back to the default.
    """

    def __init__(self, repository: Optional[SettingsRepository], *, defaults: Optional[AppSettings] = None):
        self._repository = repository
        self._defaults = defaults or AppSettings()

    @property
    def defaults(self) -> AppSettings:
        return self._defaults

    def load(self) -> AppSettings:
        raw: Mapping[str, str] = {}
        if self._repository is not None:
            try:
                raw = self._repository.get_all()
            except Exception as exc:
                logger.warning("Settings unavailable, using defaults: %s", exc)
                raw = {}
        return self._merge(raw)

    def _merge(self, raw: Mapping[str, str]) -> AppSettings:
        d = self._defaults

        def pick(key: str, parse: Callable[[str], Any], default: Any) -> Any:
            if key not in raw or raw[key] in (None, ""):
                return default
            try:
                return parse(raw[key])
            except (TypeError, ValueError) as exc:
                logger.warning("Ignoring malformed setting %s=%r: %s", key, raw[key], exc)
                return default

        center = d.geofence.center
        if "geofence.latitude" in raw and "geofence.longitude" in raw:
            try:
                center = GeoPoint(float(raw["geofence.latitude"]), float(raw["geofence.longitude"]))
            except (TypeError, ValueError, InvalidCoordinate) as exc:
                logger.warning("Ignoring malformed geofence center: %s", exc)

        geofence = GeofenceSettings(
            enabled=pick("geofence.enabled", _to_bool, d.geofence.enabled),
            center=center,
            radius_meters=pick("geofence.radius", float, d.geofence.radius_meters),
        )
        rates = RateTable(
            late_penalty_per_minute=pick("rates.late_penalty_per_minute", float, d.rates.late_penalty_per_minute),
            early_leave_penalty_per_minute=pick(
                "rates.early_leave_penalty_per_minute", float, d.rates.early_leave_penalty_per_minute
            ),
            overtime_bonus_per_minute=pick("rates.overtime_bonus_per_minute", float, d.rates.overtime_bonus_per_minute),
            penalty_type=pick("rates.penalty_type", PenaltyType, d.rates.penalty_type),
            no_show_penalty=pick("rates.no_show_penalty", float, d.rates.no_show_penalty),
        )
        return replace(
            d,
            geofence=geofence,
            rates=rates,
            late_grace_minutes=pick("attendance.late_grace_minutes", int, d.late_grace_minutes),
            child_payment_default_amount=pick(
                "child_payments.default_amount", float, d.child_payment_default_amount
            ),
        )


def defaults_from_config(settings_module: Any) -> AppSettings:
    """Deployment defaults taken from the active config module."""
    center = getattr(settings_module, "GEOFENCE_CENTER", None)
    return AppSettings(
        geofence=GeofenceSettings(
            enabled=bool(getattr(settings_module, "GEOFENCE_ENABLED", center is not None)),
            center=GeoPoint(*center) if center else None,
            radius_meters=float(getattr(settings_module, "GEOFENCE_RADIUS_METERS", GeofenceSettings.radius_meters)),
        ),
        rates=RateTable(
            late_penalty_per_minute=float(
                getattr(settings_module, "LATE_PENALTY_PER_MINUTE", RateTable.late_penalty_per_minute)
            ),
            early_leave_penalty_per_minute=float(
                getattr(settings_module, "EARLY_LEAVE_PENALTY_PER_MINUTE", RateTable.early_leave_penalty_per_minute)
            ),
            overtime_bonus_per_minute=float(
                getattr(settings_module, "OVERTIME_BONUS_PER_MINUTE", RateTable.overtime_bonus_per_minute)
            ),
        ),
        late_grace_minutes=int(getattr(settings_module, "LATE_GRACE_MINUTES", AppSettings.late_grace_minutes)),
        child_payment_default_amount=float(
            getattr(settings_module, "CHILD_PAYMENT_DEFAULT_AMOUNT", AppSettings.child_payment_default_amount)
        ),
        generator_max_workers=int(getattr(settings_module, "GENERATOR_MAX_WORKERS", AppSettings.generator_max_workers)),
    )
