"""
config.py
Runtime settings (env-driven) + logging setup.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

DB_FILE = Path(os.getenv("POCKET_BUDGET_DB", str(Path(__file__).with_name("pocket_budget.db"))))

# Subscription rules
TRIAL_DAYS = int(os.getenv("TRIAL_DAYS", "15"))
TRIAL_ITEM_LIMIT = int(os.getenv("TRIAL_ITEM_LIMIT", "3"))

# Outstanding dues older than this count as potential loss on the dashboard
STALE_DUES_DAYS = int(os.getenv("STALE_DUES_DAYS", "30"))

SUPER_ADMIN_EMAIL = os.getenv("SUPER_ADMIN_EMAIL", "admin@pocketbudget.local")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

CURRENCY = os.getenv("CURRENCY_SYMBOL", "₹")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO), format=LOG_FORMAT)
