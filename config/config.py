"""Settings shared by every environment.

Server keys (DB_CONFIG, CLOCK_SKEW_THRESHOLD_MINUTES, ...) and terminal keys
(SYNC_SERVER_URL, OFFLINE_DB_PATH, cache settings, ...) all come from the
environment; environment modules override what differs.
"""
import os


def env_list(name: str, default: tuple) -> tuple:
    raw = os.getenv(name)
    if not raw:
        return tuple(default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_db"),
}

# Reconciliation: entries captured further than this from server time are flagged.
CLOCK_SKEW_THRESHOLD_MINUTES = float(os.getenv("CLOCK_SKEW_THRESHOLD_MINUTES", "2"))

# Terminal (client) side
SYNC_SERVER_URL = os.getenv("SYNC_SERVER_URL", "http://localhost:5000")
SYNC_TIMEOUT_SECONDS = float(os.getenv("SYNC_TIMEOUT_SECONDS", "15"))
OFFLINE_DB_PATH = os.getenv("OFFLINE_DB_PATH", "./data/terminal.db")
TERMINAL_CODE = os.getenv("TERMINAL_CODE") or None
CONNECTIVITY_CHECK_INTERVAL = float(os.getenv("CONNECTIVITY_CHECK_INTERVAL", "30"))
CONNECTIVITY_PROBE_TIMEOUT = float(os.getenv("CONNECTIVITY_PROBE_TIMEOUT", "5"))

CACHE_GENERATION = os.getenv("CACHE_GENERATION", "time-tracker-v1")
OFFLINE_FALLBACK_PATH = os.getenv("OFFLINE_FALLBACK_PATH", "/")
PRECACHE_PATHS = env_list("PRECACHE_PATHS", ("/", "/manifest.json", "/icon-192.png", "/icon-512.png"))
CACHEABLE_PREFIXES = env_list(
    "CACHEABLE_PREFIXES",
    ("/static/", "/api/employees", "/api/terminals", "/manifest.json", "/icon-"),
)

DEBUG = bool(int(os.getenv("DEBUG", "1")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
