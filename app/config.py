"""Service configuration loaded from environment variables"""
import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    """Read an integer environment variable, failing loudly on bad values"""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}")


# Server Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = _int_env("API_PORT", 8000)
# Comma-separated list; "*" allows any origin
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Sudden change detection
# A decline must reach SUDDEN_CHANGE_MIN_DROP points below the trailing
# average before it is reported at all.
SUDDEN_CHANGE_MIN_DROP = _int_env("SUDDEN_CHANGE_MIN_DROP", 10)
SEVERITY_CRITICAL_DROP = _int_env("SEVERITY_CRITICAL_DROP", 30)
SEVERITY_SIGNIFICANT_DROP = _int_env("SEVERITY_SIGNIFICANT_DROP", 20)
SEVERITY_NOTABLE_DROP = _int_env("SEVERITY_NOTABLE_DROP", 10)

# Trailing average window (days before the reference date, today excluded)
TRAILING_WINDOW_DAYS = _int_env("TRAILING_WINDOW_DAYS", 7)
MIN_HISTORY_CHECKINS = _int_env("MIN_HISTORY_CHECKINS", 3)

# Team score trend: change needed to count as up/down
TREND_THRESHOLD = _int_env("TREND_THRESHOLD", 3)
