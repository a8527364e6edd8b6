"""
Configuration constants for the engine.
Values come from the environment (optionally a .env file at the project root).
"""
import os
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Daily caps, counted from local midnight
DAILY_CHECKIN_CAP = _env_int("DAILY_CHECKIN_CAP", 3)
DAILY_TASK_CAP = _env_int("DAILY_TASK_CAP", 3)

ENTRIES_PAGE_SIZE = _env_int("ENTRIES_PAGE_SIZE", 10)

# How long a conversation may wait for the user's next answer
FLOW_TIMEOUT_SECONDS = _env_int("FLOW_TIMEOUT_SECONDS", 300)

# Seed the default rank ladders and task catalog on startup when tables are empty
SEED_DEFAULT_CATALOG = os.getenv("SEED_DEFAULT_CATALOG", "1") == "1"

# Scoring weights
POINTS_PER_DAY = 2
POINTS_PER_ENTRY = 1

# Check-in self rating bounds (inclusive)
NOTE_MIN = 1
NOTE_MAX = 10
