from types import SimpleNamespace

from src.kindergarten_payroll.kindergarten_payroll.core.enums import PenaltyType
from src.kindergarten_payroll.kindergarten_payroll.geo.geofence import GeoPoint
from src.kindergarten_payroll.kindergarten_payroll.settings.model import AppSettings
from src.kindergarten_payroll.kindergarten_payroll.settings.provider import SettingsProvider, defaults_from_config
from tests.fakes import InMemorySettings


def test_no_repository_means_defaults():
    settings = SettingsProvider(None).load()
    assert settings == AppSettings()
    assert settings.rates.late_penalty_per_minute == 500
    assert settings.rates.overtime_bonus_per_minute == 750
    assert settings.late_grace_minutes == 15
    assert not settings.geofence.active


def test_stored_values_override_defaults():
    repo = InMemorySettings(
        {
            "geofence.enabled": "true",
            "geofence.latitude": "21.0285",
            "geofence.longitude": "105.8542",
            "geofence.radius": "150",
            "rates.late_penalty_per_minute": "600",
            "rates.penalty_type": "per_5_minutes",
            "rates.no_show_penalty": "2000",
            "attendance.late_grace_minutes": "10",
            "child_payments.default_amount": "45000",
        }
    )
    settings = SettingsProvider(repo).load()

    assert settings.geofence.active
    assert settings.geofence.center == GeoPoint(21.0285, 105.8542)
    assert settings.geofence.radius_meters == 150
    assert settings.rates.late_penalty_per_minute == 600
    assert settings.rates.penalty_type == PenaltyType.PER_5_MINUTES
    assert settings.rates.no_show_penalty == 2000
    assert settings.rates.early_leave_penalty_per_minute == 500
    assert settings.late_grace_minutes == 10
    assert settings.child_payment_default_amount == 45000


def test_malformed_values_fall_back():
    repo = InMemorySettings(
        {
            "rates.overtime_bonus_per_minute": "lots",
            "rates.penalty_type": "percent",
            "geofence.latitude": "123",
            "geofence.longitude": "0",
        }
    )
    settings = SettingsProvider(repo).load()

    assert settings.rates.overtime_bonus_per_minute == 750
    assert settings.rates.penalty_type == PenaltyType.PER_MINUTE
    assert settings.geofence.center is None


def test_unreachable_store_falls_back_to_defaults():
    defaults = AppSettings(late_grace_minutes=5)
    settings = SettingsProvider(InMemorySettings(fail=True), defaults=defaults).load()
    assert settings == defaults


def test_defaults_from_config_module():
    module = SimpleNamespace(
        GEOFENCE_CENTER=(21.0285, 105.8542),
        GEOFENCE_RADIUS_METERS=120,
        LATE_PENALTY_PER_MINUTE=400,
        CHILD_PAYMENT_DEFAULT_AMOUNT=35000,
        GENERATOR_MAX_WORKERS=4,
    )
    d = defaults_from_config(module)

    assert d.geofence.active
    assert d.geofence.radius_meters == 120
    assert d.rates.late_penalty_per_minute == 400
    assert d.rates.overtime_bonus_per_minute == 750
    assert d.child_payment_default_amount == 35000
    assert d.generator_max_workers == 4


def test_defaults_from_config_without_center_disables_geofence():
    assert not defaults_from_config(SimpleNamespace()).geofence.active
