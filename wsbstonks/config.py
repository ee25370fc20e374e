# wsbstonks/config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Loads variables from a local .env file into environment variables (dev only).
load_dotenv()


@dataclass(frozen=True)
class Settings:
    # App config
    app_env: str
    log_level: str
    port: int

    # Provider config (Finnhub)
    # api_key: profile / metric / candle endpoints
    # sandbox_key: quote / forex endpoints (needed for ETF quotes)
    finnhub_base_url: str
    finnhub_api_key: str
    finnhub_sandbox_key: str
    finnhub_timeout_seconds: float

    # Store
    database_path: str

    # Background sync
    sync_interval_ms: int = 300_000
    candle_window_days: int = 91
    startup_wait_seconds: float = 5.0


def get_settings() -> Settings:
    """
    Reads env vars and returns a Settings object.
    """
    api_key = os.getenv("FINNHUB_KEY", "").strip()
    if not api_key:
        raise RuntimeError("FINNHUB_KEY is missing. Add it to .env")

    sandbox_key = os.getenv("FINNHUB_SANDBOX_KEY", "").strip()
    if not sandbox_key:
        raise RuntimeError("FINNHUB_SANDBOX_KEY is missing. Add it to .env")

    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        port=int(os.getenv("PORT", "8080")),
        finnhub_base_url=os.getenv("FINNHUB_BASE_URL", "https://finnhub.io/api/v1").rstrip("/"),
        finnhub_api_key=api_key,
        finnhub_sandbox_key=sandbox_key,
        finnhub_timeout_seconds=float(os.getenv("FINNHUB_TIMEOUT_SECONDS", "20")),
        database_path=os.getenv("STONKS_DB_PATH", "data/wsbstonks.db"),
        sync_interval_ms=int(os.getenv("SYNC_INTERVAL_MS", "300000")),
        candle_window_days=int(os.getenv("CANDLE_WINDOW_DAYS", "91")),
        startup_wait_seconds=float(os.getenv("STARTUP_WAIT_SECONDS", "5")),
    )
