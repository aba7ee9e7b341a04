import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class AppConfig:
    # ===== GEMINI =====
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # ===== SESSIONS =====
    SESSION_TIMEOUT_MINUTES: int = int(os.getenv("SESSION_TIMEOUT_MINUTES", "30"))
    SESSION_SWEEP_INTERVAL_SECONDS: int = int(
        os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "300")
    )

    # ===== RUNTIME =====
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None


def get_api_key() -> Optional[str]:
    """Read the Gemini credential at call time so key rotation needs no restart."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
