import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# "development" or "production" - devOtp is only exposed outside production
APP_ENV = os.getenv("APP_ENV", "development").lower()
IS_PRODUCTION = APP_ENV == "production"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./kisandecks.db")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
DB_LOG_SLOW_QUERIES = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
DB_SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# Sessions
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "kisandecks_session")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(7 * 24 * 60 * 60)))
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "true" if IS_PRODUCTION else "false").lower() == "true"

# Expiring store for OTPs and sessions: "memory" (single process) or "redis"
OTP_STORE_BACKEND = os.getenv("OTP_STORE_BACKEND", "memory").lower()
OTP_EXPIRY_MINUTES = int(os.getenv("OTP_EXPIRY_MINUTES", "10"))
# Records outlive their expiry by this long so verify can still report "expired"
OTP_RETENTION_GRACE_SECONDS = int(os.getenv("OTP_RETENTION_GRACE_SECONDS", "600"))
OTP_SEND_RATE_LIMIT = int(os.getenv("OTP_SEND_RATE_LIMIT", "10"))
OTP_SEND_RATE_WINDOW_SECONDS = int(os.getenv("OTP_SEND_RATE_WINDOW_SECONDS", "3600"))

# Redis (optional): REDIS_URL wins over the host settings
REDIS_URL = os.getenv("REDIS_URL")
REDIS_HOST = os.getenv("REDIS_HOST")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
REDIS_SSL = os.getenv("REDIS_SSL", "false").lower() == "true"

# Peers whose X-Forwarded-For header is believed (comma-separated IPs of the reverse proxies)
TRUSTED_PROXY_IPS = {ip.strip() for ip in os.getenv("TRUSTED_PROXY_IPS", "").split(",") if ip.strip()}

# Frontend origins allowed to call the API with cookies
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:5000")

# OpenAI-compatible chat completions provider for advisory
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1")
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "60"))

# Open-Meteo (no API key required)
OPEN_METEO_GEOCODING_URL = os.getenv(
    "OPEN_METEO_GEOCODING_URL", "https://geocoding-api.open-meteo.com/v1/search"
)
OPEN_METEO_FORECAST_URL = os.getenv("OPEN_METEO_FORECAST_URL", "https://api.open-meteo.com/v1/forecast")

# Nominatim location search
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org")
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT", "KisanDecks/1.0 (farming-app)")
LOCATION_SEARCH_RPM = int(os.getenv("LOCATION_SEARCH_RPM", "60"))
LOCATION_SEARCH_CACHE_SECONDS = int(os.getenv("LOCATION_SEARCH_CACHE_SECONDS", "3600"))

# Twilio SMS for OTP delivery (logged only when unset)
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_FROM_NUMBER = os.getenv("TWILIO_FROM_NUMBER")

# Local media storage for uploads and learning content (UPLOAD_DIR must sit inside MEDIA_ROOT)
MEDIA_ROOT = Path(os.getenv("MEDIA_ROOT", str(Path.cwd())))
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(MEDIA_ROOT / "uploads")))
MAX_MEDIA_UPLOAD_BYTES = int(os.getenv("MAX_MEDIA_UPLOAD_BYTES", str(500 * 1024 * 1024)))
MAX_IMAGE_UPLOAD_BYTES = int(os.getenv("MAX_IMAGE_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# Agmarknet daily mandi prices via data.gov.in (refresh is skipped when no key is set)
DATA_GOV_API_KEY = os.getenv("DATA_GOV_API_KEY")
MARKET_PRICES_API_URL = os.getenv(
    "MARKET_PRICES_API_URL",
    "https://api.data.gov.in/resource/9ef84268-d588-465a-a308-a864a43d0070",
)
MARKET_PRICES_FETCH_LIMIT = int(os.getenv("MARKET_PRICES_FETCH_LIMIT", "1000"))
