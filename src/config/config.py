# src/config/config.py
import os
from dotenv import load_dotenv
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


APPNAME = "Chunav Analytics API"
VERSION = "v1"
ENVIRONMENT = os.getenv("ENVIRONMENT", "production")
# error detail (driver messages) is only returned to clients when DEBUG is set explicitly
DEBUG = _env_bool("DEBUG", False)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DB_USERNAME = os.getenv("DB_USERNAME", "postgres")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_HOST     = os.getenv("DB_HOST", "localhost")
DB_PORT     = int(os.getenv("DB_PORT", "5432"))
DB_NAME     = os.getenv("DB_NAME", "chunavmantra")
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{DB_USERNAME}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# Pool / timeouts
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
DB_POOL_TIMEOUT = float(os.getenv("DB_POOL_TIMEOUT", "2"))  # seconds
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "1800"))
DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "15000"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000",
    ).split(",")
    if origin.strip()
]

# Election scope used when a request does not pick one
DEFAULT_ELECTION_ID = int(os.getenv("DEFAULT_ELECTION_ID", "1"))

# Booth analytics thresholds
HIGH_TURNOUT_THRESHOLD = float(os.getenv("HIGH_TURNOUT_THRESHOLD", "70"))
MEDIUM_TURNOUT_THRESHOLD = float(os.getenv("MEDIUM_TURNOUT_THRESHOLD", "50"))
LARGE_BOOTH_ELECTORS = int(os.getenv("LARGE_BOOTH_ELECTORS", "800"))
HIGH_DENSITY_ELECTORS = int(os.getenv("HIGH_DENSITY_ELECTORS", "1000"))
COMPETITIVE_WIN_PERCENTAGE = float(os.getenv("COMPETITIVE_WIN_PERCENTAGE", "55"))

# Pagination defaults
CONSTITUENCY_PAGE_LIMIT = 50
BOOTH_PAGE_LIMIT = 100
MAX_PAGE_LIMIT = 500
