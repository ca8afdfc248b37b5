from config.config import Config, _env_bool

SECRET_KEY = "test-secret"
DB_CONFIG = {**Config.db_config(), "database": "staff_attendance_test"}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

CIVIL_UTC_OFFSET_MINUTES = Config.CIVIL_UTC_OFFSET_MINUTES
GEOFENCE_DEFAULT = Config.GEOFENCE_DEFAULT
GEOFENCE_CACHE_TTL_SECONDS = 0

AUTO_INIT_DB = _env_bool("AUTO_INIT_DB", "0")
