# config.py
# ------------------------------------------------------------
# Daily Coding Challenge — settings
# Edit the knobs below, or override via environment variables:
#   DAILY_CHALLENGE_STORE      path of the JSON key/value file
#   DAILY_CHALLENGE_TZ         zone used to decide "today"
#   DAILY_CHALLENGE_LOG_LEVEL  DEBUG / INFO / WARNING ...
# ------------------------------------------------------------

import datetime as dt
import logging
import os

STORE_PATH = os.environ.get("DAILY_CHALLENGE_STORE", "daily_challenge_store.json")
TIMEZONE = os.environ.get("DAILY_CHALLENGE_TZ", "UTC")
LOG_LEVEL = os.environ.get("DAILY_CHALLENGE_LOG_LEVEL", "INFO")

APP_TITLE = "Daily Coding Challenge"
SEED_DATE = dt.date(2025, 9, 9)  # demo challenges are dated here

# Scoring knobs
POINTS_MCQ_CORRECT = 10
POINTS_CODE_CORRECT = 20
POINTS_CODE_ATTEMPT = 5

# Share of regular users reported as "active today" (simulated, not measured)
ACTIVE_RATIO = 0.6

MIN_PASSWORD_LENGTH = 6

DEMO_CREDENTIALS = (
    ("Admin", "admin@dailychallenge.com", "admin123"),
    ("User", "user@example.com", "user123"),
)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def store_path() -> str:
    # read on every call so a changed environment is picked up without a re-import
    return os.environ.get("DAILY_CHALLENGE_STORE", STORE_PATH)


def configure_logging(level=None):
    """Set up root logging once; later calls are no-ops (Streamlit reruns the script)."""
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=_LOG_FORMAT)
