import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")

# -------------------------------
# Store
# -------------------------------
STORE_KEY = "recruit-ai-store"
STORE_PATH = os.getenv("STORE_PATH", str(BASE_DIR / "data" / "recruit_store.json"))
ENFORCE_UNIQUE_EMAILS = os.getenv("ENFORCE_UNIQUE_EMAILS", "true").strip().lower() not in ("0", "false", "no", "off")

# -------------------------------
# Webhooks
# -------------------------------
DEFAULT_CALENDAR_ID = "primary"

# -------------------------------
# Uploads
# -------------------------------
MAX_RESUME_SIZE_MB = 5

# -------------------------------
# Logging
# -------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def pipeline_webhook_url() -> Optional[str]:
    return os.getenv("N8N_PIPELINE_WEBHOOK") or None


def scheduling_webhook_url() -> Optional[str]:
    return os.getenv("N8N_SCHEDULING_WEBHOOK") or None


def webhook_timeout() -> Optional[float]:
    raw = os.getenv("WEBHOOK_TIMEOUT_SECONDS", "").strip()
    if not raw:
        return None
    return float(raw)
