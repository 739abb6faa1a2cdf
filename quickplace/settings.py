# quickplace/settings.py
import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    APP_VERSION: str = "1.1.0"
    ENGINE_VERSION: str = "qp-1.1"

    # --- CONFIG ---
    ENV = os.getenv("QUICKPLACE_ENV", "production")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- FEATURES ---
    FEATURE_QUICK_PLACEMENT = _env_flag("FEATURE_QUICK_PLACEMENT", "true")

    # "ignore" drops unknown scene tags with a warning flag, "reject" fails the call
    UNKNOWN_TAG_POLICY = os.getenv("UNKNOWN_TAG_POLICY", "ignore")


@lru_cache
def get_settings():
    return Settings()
