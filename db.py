"""
db.py
SQLite helpers + initialization (creates DB/tables, settings table).
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager

import config

logger = logging.getLogger(__name__)

DB_FILE = config.DB_FILE


@contextmanager
def get_conn():
    conn = sqlite3.connect(DB_FILE, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def execute(sql: str, params: tuple = ()) -> int:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.lastrowid


def fetch_one(sql: str, params: tuple = ()):
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchone()


def fetch_all(sql: str, params: tuple = ()) -> list[sqlite3.Row]:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchall()


SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS users (
        uid TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        display_name TEXT,
        password_hash TEXT NOT NULL,
        created_at TEXT,
        subscription_status TEXT NOT NULL DEFAULT 'none'
            CHECK(subscription_status IN ('trial','active','expired','cancelled','none','pending_confirmation')),
        plan_type TEXT NOT NULL DEFAULT 'none' CHECK(plan_type IN ('monthly','yearly','none')),
        requested_plan_type TEXT CHECK(requested_plan_type IN ('monthly','yearly')),
        trial_end_date TEXT,
        subscription_end_date TEXT,
        subscribed_at TEXT,
        is_admin INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS clients (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        number TEXT,
        address TEXT,
        FOREIGN KEY(user_id) REFERENCES users(uid) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS income_categories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        description TEXT,
        has_project_tracking INTEGER NOT NULL DEFAULT 0,
        is_daily_fixed_income INTEGER NOT NULL DEFAULT 0,
        daily_fixed_amount REAL,
        FOREIGN KEY(user_id) REFERENCES users(uid) ON DELETE CASCADE
    )
    """,
    # Freelance columns are all NULL for plain incomes
    """
    CREATE TABLE IF NOT EXISTS incomes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        description TEXT NOT NULL,
        amount REAL NOT NULL,
        date TEXT NOT NULL,
        category_id TEXT NOT NULL,
        client_id INTEGER,
        client_name TEXT,
        client_number TEXT,
        client_address TEXT,
        project_cost REAL,
        number_of_workers INTEGER,
        dues_cleared_at TEXT,
        FOREIGN KEY(user_id) REFERENCES users(uid) ON DELETE CASCADE,
        FOREIGN KEY(client_id) REFERENCES clients(id) ON DELETE SET NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS expense_categories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        description TEXT,
        FOREIGN KEY(user_id) REFERENCES users(uid) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS expenses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        description TEXT NOT NULL,
        amount REAL NOT NULL,
        date TEXT NOT NULL,
        category_id TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(uid) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS budget_goals (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        target_amount REAL NOT NULL,
        current_amount REAL NOT NULL DEFAULT 0,
        description TEXT,
        FOREIGN KEY(user_id) REFERENCES users(uid) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS app_settings (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
    """,
]


def _create_tables() -> None:
    with get_conn() as conn:
        for ddl in SCHEMA:
            conn.execute(ddl)


def get_setting(key: str, default: str | None = None) -> str | None:
    row = fetch_one("SELECT value FROM app_settings WHERE key = ?", (key,))
    if row:
        return str(row["value"])
    return default


def set_setting(key: str, value: str) -> None:
    execute(
        """
        INSERT INTO app_settings(key, value) VALUES(?, ?)
        ON CONFLICT(key) DO UPDATE SET value=excluded.value
        """,
        (key, value),
    )


def init_db() -> None:
    """Create tables if missing. Seeding the admin account lives in auth.ensure_admin."""
    logger.info("Initializing database at %s", DB_FILE)
    _create_tables()


def is_force_password_change() -> bool:
    return get_setting("force_password_change") == "1"


def clear_force_password_change() -> None:
    set_setting("force_password_change", "0")
