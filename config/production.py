from config.config import Config, _env_bool

SECRET_KEY = Config.SECRET_KEY or "please-set-SECRET_KEY"
DB_CONFIG = Config.db_config()

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

CIVIL_UTC_OFFSET_MINUTES = Config.CIVIL_UTC_OFFSET_MINUTES
GEOFENCE_DEFAULT = Config.GEOFENCE_DEFAULT
GEOFENCE_CACHE_TTL_SECONDS = Config.GEOFENCE_CACHE_TTL_SECONDS

AUTO_INIT_DB = _env_bool("AUTO_INIT_DB", "0")
