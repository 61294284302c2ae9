"""Shared settings; development/testing/production override what differs."""

import os


def _float_pair(raw):
    if not raw:
        return None
    lat, lon = (part.strip() for part in raw.split(","))
    return float(lat), float(lon)


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "change-me"

    # Database
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "kindergarten_db")

    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Geofence: "lat,lon" of the kindergarten; unset disables the check.
    GEOFENCE_CENTER = _float_pair(os.environ.get("GEOFENCE_CENTER"))
    GEOFENCE_RADIUS_METERS = float(os.environ.get("GEOFENCE_RADIUS_METERS", "100"))

    # Money per minute, whole-month child fee
    LATE_GRACE_MINUTES = int(os.environ.get("LATE_GRACE_MINUTES", "15"))
    LATE_PENALTY_PER_MINUTE = float(os.environ.get("LATE_PENALTY_PER_MINUTE", "500"))
    EARLY_LEAVE_PENALTY_PER_MINUTE = float(os.environ.get("EARLY_LEAVE_PENALTY_PER_MINUTE", "500"))
    OVERTIME_BONUS_PER_MINUTE = float(os.environ.get("OVERTIME_BONUS_PER_MINUTE", "750"))
    CHILD_PAYMENT_DEFAULT_AMOUNT = float(os.environ.get("CHILD_PAYMENT_DEFAULT_AMOUNT", "40000"))

    GENERATOR_MAX_WORKERS = int(os.environ.get("GENERATOR_MAX_WORKERS", "1"))


DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

SECRET_KEY = Config.SECRET_KEY
AUTO_INIT_DB = Config.AUTO_INIT_DB
LOG_LEVEL = Config.LOG_LEVEL
GEOFENCE_CENTER = Config.GEOFENCE_CENTER
GEOFENCE_RADIUS_METERS = Config.GEOFENCE_RADIUS_METERS
LATE_GRACE_MINUTES = Config.LATE_GRACE_MINUTES
LATE_PENALTY_PER_MINUTE = Config.LATE_PENALTY_PER_MINUTE
EARLY_LEAVE_PENALTY_PER_MINUTE = Config.EARLY_LEAVE_PENALTY_PER_MINUTE
OVERTIME_BONUS_PER_MINUTE = Config.OVERTIME_BONUS_PER_MINUTE
CHILD_PAYMENT_DEFAULT_AMOUNT = Config.CHILD_PAYMENT_DEFAULT_AMOUNT
GENERATOR_MAX_WORKERS = Config.GENERATOR_MAX_WORKERS
