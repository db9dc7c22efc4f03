from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


_DEFAULT_DB_PATH = Path(
    os.getenv("DATABASE_FILE", Path(__file__).resolve().parents[1] / "data.db")
)

DATABASE_URL = os.getenv("DATABASE_URL")
if DATABASE_URL is None:
    _DEFAULT_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    DATABASE_URL = f"sqlite+aiosqlite:///{_DEFAULT_DB_PATH}"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

EXECUTION_MIN_DELAY_MS = _float_env("EXECUTION_MIN_DELAY_MS", 2000)
EXECUTION_MAX_DELAY_MS = _float_env("EXECUTION_MAX_DELAY_MS", 10000)
EXECUTION_PASS_PROBABILITY = _float_env("EXECUTION_PASS_PROBABILITY", 0.8)

AI_BASE_URL = os.getenv("AI_BASE_URL", "https://api.deepseek.com/v1")
AI_MODEL = os.getenv("AI_MODEL", "deepseek-chat")
AI_TIMEOUT_SECONDS = _float_env("AI_TIMEOUT_SECONDS", 30)


def get_ai_api_key() -> str | None:
    return os.getenv("DEEPSEEK_API_KEY") or os.getenv("AI_API_KEY")
