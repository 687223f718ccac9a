import os
import logging
from pathlib import Path
from typing import Tuple

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except ImportError:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = Path(__file__).parent / "catalog" / "data"


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception as e:
            logger.debug("Streamlit secrets unavailable for %s: %s", name, e)
    # Fallback to environment variables
    return os.environ.get(name, default)


def _get_int(name: str, default: int) -> int:
    raw = get_secret(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer; using %d", name, raw, default)
        return default


def _get_float(name: str, default: float) -> float:
    raw = get_secret(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("%s=%r is not a number; using %s", name, raw, default)
        return default


class Settings:
    @property
    def catalog_path(self) -> str:
        return get_secret("REMEDY_CATALOG_PATH") or str(DATA_DIR / "remedies.json")

    @property
    def allergens_path(self) -> str:
        return get_secret("REMEDY_ALLERGENS_PATH") or str(DATA_DIR / "allergens.json")

    @property
    def history_storage(self) -> str:
        """
        "session" keeps history per browser session; "file" shares one JSON
        file between every session, for single-user local runs only.
        """
        value = (get_secret("HISTORY_STORAGE", "session") or "session").strip().lower()
        if value not in ("session", "file"):
            logger.warning("HISTORY_STORAGE=%r is not session or file; using session", value)
            return "session"
        return value

    @property
    def history_path(self) -> str:
        return get_secret("REMEDY_HISTORY_PATH") or str(PROJECT_ROOT / ".streamlit" / "history.json")

    @property
    def history_capacity(self) -> int:
        return max(1, _get_int("HISTORY_CAPACITY", 5))

    @property
    def search_delay(self) -> Tuple[float, float]:
        low = _get_float("SEARCH_DELAY_MIN", 0.3)
        high = _get_float("SEARCH_DELAY_MAX", 0.5)
        if high < low:
            low, high = high, low
        return low, high

    @property
    def log_level(self) -> str:
        return get_secret("LOG_LEVEL", "INFO") or "INFO"
