# settings.py
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from domain.models import NotificationSettings

load_dotenv()


@dataclass
class StoreInfo:
    name: str
    address: str
    phone: str


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SCHEMA = os.getenv("SCHEMA", "public")

USER_LEVEL = os.getenv("USER_LEVEL", "Admin")
LOW_STOCK_THRESHOLD = _int_env("LOW_STOCK_THRESHOLD", 10)
DEFAULT_DUE_DATE_DAYS = _int_env("DEFAULT_DUE_DATE_DAYS", 7)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# used when app_settings has no "notificationSettings" row
DEFAULT_NOTIFICATION_SETTINGS = NotificationSettings(
    low_stock_threshold=LOW_STOCK_THRESHOLD,
    default_due_date_days=DEFAULT_DUE_DATE_DAYS,
)

STORE_INFO = StoreInfo(
    name=os.getenv("STORE_NAME", "Nala Media Digital Printing"),
    address=os.getenv("STORE_ADDRESS", ""),
    phone=os.getenv("STORE_PHONE", ""),
)


def configure_logging() -> None:
    """Install a root handler once; repeated Streamlit reruns are no-ops."""
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
