import os


def _env_bool(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "")

    # DB
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "staff_attendance")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Civil time of the residence, minutes east of UTC (420 = UTC+7).
    CIVIL_UTC_OFFSET_MINUTES = int(os.environ.get("CIVIL_UTC_OFFSET_MINUTES", "420"))

    # Used until an administrator stores a geofence in system_config.
    GEOFENCE_DEFAULT = {
        "center_lat": float(os.environ.get("GEOFENCE_CENTER_LAT", "-6.200000")),
        "center_lon": float(os.environ.get("GEOFENCE_CENTER_LON", "106.816666")),
        "radius_meters": int(os.environ.get("GEOFENCE_RADIUS_METERS", "100")),
    }
    GEOFENCE_CACHE_TTL_SECONDS = int(os.environ.get("GEOFENCE_CACHE_TTL_SECONDS", "300"))

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }
