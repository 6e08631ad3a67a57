import os

from .config import *  # noqa: F401,F403

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo employees/terminals on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
