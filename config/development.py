import os

from config.config import Config, _env_bool

SECRET_KEY = Config.SECRET_KEY or "dev-secret-key"
DB_CONFIG = Config.db_config()

DEBUG = True
LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG").upper()

CIVIL_UTC_OFFSET_MINUTES = Config.CIVIL_UTC_OFFSET_MINUTES
GEOFENCE_DEFAULT = Config.GEOFENCE_DEFAULT
GEOFENCE_CACHE_TTL_SECONDS = Config.GEOFENCE_CACHE_TTL_SECONDS

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = _env_bool("AUTO_INIT_DB", "1")
