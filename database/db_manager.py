import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

import structlog

from utils.constants import DB_FILE, DEFAULT_CATEGORIES, DEFAULT_SETTINGS

log = structlog.get_logger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit everything written inside the block, or nothing."""
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS transactions (
                id          TEXT PRIMARY KEY,
                amount      REAL NOT NULL,
                category    TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                date        TEXT NOT NULL,
                type        TEXT NOT NULL CHECK(type IN ('income','expense')),
                position    INTEGER NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS recurring_definitions (
                id            TEXT PRIMARY KEY,
                amount        REAL NOT NULL,
                category      TEXT NOT NULL,
                description   TEXT NOT NULL DEFAULT '',
                type          TEXT NOT NULL CHECK(type IN ('income','expense')),
                frequency     TEXT NOT NULL,
                start_date    TEXT NOT NULL,
                next_due_date TEXT NOT NULL,
                position      INTEGER NOT NULL DEFAULT 0
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date ON transactions(date);

            CREATE TABLE IF NOT EXISTS budget_limits (
                category     TEXT PRIMARY KEY,
                limit_amount REAL NOT NULL CHECK(limit_amount > 0)
            );

            CREATE TABLE IF NOT EXISTS overall_budget (
                id      INTEGER PRIMARY KEY CHECK(id = 1),
                daily   REAL NOT NULL DEFAULT 0,
                monthly REAL NOT NULL DEFAULT 0,
                yearly  REAL NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS categories (
                name     TEXT PRIMARY KEY,
                position INTEGER NOT NULL
            );

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        for key, value in DEFAULT_SETTINGS.items():
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

        conn.execute("INSERT OR IGNORE INTO overall_budget(id) VALUES (1)")

        # Categories are only seeded into an empty registry so user deletions stick.
        has_categories = conn.execute("SELECT 1 FROM categories LIMIT 1").fetchone()
        if not has_categories:
            for position, name in enumerate(DEFAULT_CATEGORIES):
                conn.execute(
                    "INSERT INTO categories(name, position) VALUES (?, ?)",
                    (name, position),
                )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the ledger DB.

        db_folder: if provided, the DB file is stored there instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        db = DatabaseManager(path)
        db.initialize()
        log.debug("database_opened", path=path)
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
