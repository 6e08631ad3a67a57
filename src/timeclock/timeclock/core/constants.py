"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CLOCK_SKEW_THRESHOLD_MINUTES = 2
DEFAULT_SYNC_TIMEOUT_SECONDS = 15
DEFAULT_CONNECTIVITY_CHECK_INTERVAL = 30
DEFAULT_CONNECTIVITY_PROBE_TIMEOUT = 5
DEFAULT_OFFLINE_DB_PATH = "./data/terminal.db"

DEFAULT_CACHE_GENERATION = "time-tracker-v1"
DEFAULT_OFFLINE_FALLBACK_PATH = "/"
DEFAULT_PRECACHE_PATHS = ("/", "/manifest.json", "/icon-192.png", "/icon-512.png")
DEFAULT_CACHEABLE_PREFIXES = ("/static/", "/api/employees", "/api/terminals", "/manifest.json", "/icon-")

SYNC_ENDPOINT = "/sync"
CLOCK_ENTRIES_ENDPOINT = "/clock-entries"
HEALTH_ENDPOINT = "/health"

# MySQL ER_DUP_ENTRY
MYSQL_DUPLICATE_KEY_ERRNO = 1062
