import os

from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_test"),
}

CLOCK_SKEW_THRESHOLD_MINUTES = 2.0
SYNC_TIMEOUT_SECONDS = 2.0

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
