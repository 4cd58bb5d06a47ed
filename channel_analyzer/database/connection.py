import sqlite3
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

IN_MEMORY_DB = ":memory:"


def get_connection(db_path: str = IN_MEMORY_DB) -> sqlite3.Connection:
    """Create a SQLite connection shared across request threads.

    ``:memory:`` (the default) keeps the store in-process only; a file path
    gets WAL mode.
    """
    if db_path != IN_MEMORY_DB:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, timeout=30, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    if db_path != IN_MEMORY_DB:
        conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_database(db_path: str = IN_MEMORY_DB) -> sqlite3.Connection:
    """Initialize the database: create tables and indexes."""
    conn = get_connection(db_path)
    conn.executescript(SCHEMA_PATH.read_text())
    logger.info(f"Database initialized at {db_path}")
    return conn
