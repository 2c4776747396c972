"""Configuration: env, data paths, playback and persistence tuning."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of audioshelf package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so AUDIOSHELF_* overrides are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("AUDIOSHELF_DATA_DIR", str(BASE_DIR / "data")))
STORAGE_PATH = DATA_DIR / "preferences.json"

# API
API_HOST = os.getenv("AUDIOSHELF_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("AUDIOSHELF_API_PORT", "8000"))
# Auto-reload on code changes; development only
API_RELOAD = os.getenv("AUDIOSHELF_API_RELOAD", "0").lower() in ("1", "true", "yes")

# Storage keys
LIBRARY_KEY = "library"
PLAYBACKS_KEY = "playbacks"

# Simulated playback
TICK_INTERVAL_SEC = float(os.getenv("AUDIOSHELF_TICK_INTERVAL", "1.0"))
TICK_ADVANCE_SEC = 1.0
SKIP_SECONDS = 15.0

# Persistence writer
# Writes arriving within this window are coalesced into one write per key
PERSIST_DEBOUNCE_SEC = float(os.getenv("AUDIOSHELF_PERSIST_DEBOUNCE", "0.25"))
PERSIST_RETRIES = int(os.getenv("AUDIOSHELF_PERSIST_RETRIES", "3"))
PERSIST_RETRY_DELAY_SEC = float(os.getenv("AUDIOSHELF_PERSIST_RETRY_DELAY", "0.2"))


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
