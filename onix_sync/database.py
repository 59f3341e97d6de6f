"""
ONIX Books Sync - Books Database
DB-API handler for the books table (SQLite or PostgreSQL).
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set

import psycopg2

from .models import BOOK_COLUMNS, BookRow, ProductRecord
from .exceptions import ConfigurationError, DatabaseError, StoreConnectionError

logger = logging.getLogger(__name__)


class BookDatabase:
    """
    Books table keyed by the ONIX record reference.

    Three write statements, one per notification type:
    - insert_new: insert, existing key is left untouched
    - upsert: insert or overwrite every column
    - delete: remove by key, missing key is a no-op

    Every statement is committed on its own. Connection problems and
    missing tables (OperationalError, InterfaceError, ProgrammingError) raise
    StoreConnectionError; constraint and data problems raise DatabaseError.
    """

    TABLE = "books"
    BACKENDS = ("sqlite", "postgresql")

    TABLE_SCHEMA = {
        "sqlite": """
        CREATE TABLE IF NOT EXISTS books (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            record_reference TEXT UNIQUE NOT NULL,
            isbn TEXT,
            title TEXT,
            price TEXT,
            author TEXT,
            coverlink TEXT,
            zusatztext TEXT,
            inhalt TEXT,
            autorenportrait TEXT,
            language TEXT
        )
        """,
        "postgresql": """
        CREATE TABLE IF NOT EXISTS books (
            id SERIAL PRIMARY KEY,
            record_reference VARCHAR(255) UNIQUE NOT NULL,
            isbn VARCHAR(32),
            title VARCHAR(255),
            price VARCHAR(32),
            author VARCHAR(255),
            coverlink VARCHAR(512),
            zusatztext TEXT,
            inhalt TEXT,
            autorenportrait TEXT,
            language VARCHAR(16)
        )
        """,
    }

    def __init__(self, conn, backend: str = "sqlite"):
        """Wrap an open DB-API connection of the given backend."""
        if backend not in self.BACKENDS:
            raise ConfigurationError(f"Unknown database backend: {backend}", setting="db_backend")
        self.conn = conn
        self.backend = backend
        self._driver = sqlite3 if backend == "sqlite" else psycopg2
        self._placeholder = "?" if backend == "sqlite" else "%s"
        # a missing table or a closed connection aborts the run on both backends
        self._fatal_errors = (
            self._driver.OperationalError,
            self._driver.InterfaceError,
            self._driver.ProgrammingError,
        )

        columns = ", ".join(BOOK_COLUMNS)
        values = ", ".join([self._placeholder] * len(BOOK_COLUMNS))
        updates = ", ".join(
            f"{col} = excluded.{col}" for col in BOOK_COLUMNS if col != "record_reference"
        )
        self._insert_sql = (
            f"INSERT INTO books ({columns}) VALUES ({values}) "
            f"ON CONFLICT (record_reference) DO NOTHING"
        )
        self._upsert_sql = (
            f"INSERT INTO books ({columns}) VALUES ({values}) "
            f"ON CONFLICT (record_reference) DO UPDATE SET {updates}"
        )
        self._delete_sql = f"DELETE FROM books WHERE record_reference = {self._placeholder}"

    @classmethod
    def connect_sqlite(cls, db_path: Path) -> "BookDatabase":
        """Open (or create) a SQLite database file."""
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(str(db_path))
        except sqlite3.Error as e:
            raise StoreConnectionError(f"Cannot open {db_path}: {e}", backend="sqlite")
        logger.info(f"Database initialized: {db_path}")
        return cls(conn, backend="sqlite")

    @classmethod
    def connect_postgres(
        cls,
        host: str,
        dbname: str,
        user: str,
        password: str,
        port: int = 5432,
    ) -> "BookDatabase":
        """Connect to a PostgreSQL server."""
        try:
            conn = psycopg2.connect(
                host=host,
                dbname=dbname,
                user=user,
                password=password,
                port=port,
            )
            conn.set_client_encoding("UTF8")
        except psycopg2.Error as e:
            raise StoreConnectionError(
                f"Cannot connect to {user}@{host}:{port}/{dbname}: {e}",
                backend="postgresql",
            )
        logger.info(f"Database connected: {host}:{port}/{dbname}")
        return cls(conn, backend="postgresql")

    def ensure_schema(self):
        """Create the books table if it does not exist."""
        self._execute(self.TABLE_SCHEMA[self.backend], ())

    # =========================================================================
    # WRITE STATEMENTS
    # =========================================================================

    def insert_new(self, record: ProductRecord) -> bool:
        """Insert record; returns False if the key already existed."""
        return self._execute(self._insert_sql, self._params(record), record.record_reference) > 0

    def upsert(self, record: ProductRecord) -> bool:
        """Insert record or overwrite every column of the existing row."""
        return self._execute(self._upsert_sql, self._params(record), record.record_reference) > 0

    def delete(self, record_reference: str) -> bool:
        """Delete by key; returns False if no row matched."""
        return self._execute(self._delete_sql, (record_reference,), record_reference) > 0

    def _params(self, record: ProductRecord) -> tuple:
        row = record.as_row()
        return tuple(row[col] for col in BOOK_COLUMNS)

    def _execute(self, sql: str, params: tuple, record_reference: str = None) -> int:
        """Run one statement and commit it. Returns the affected row count."""
        try:
            cursor = self.conn.cursor()
            try:
                cursor.execute(sql, params)
                rowcount = cursor.rowcount
            finally:
                cursor.close()
            self.conn.commit()
        except self._fatal_errors as e:
            self._rollback()
            raise StoreConnectionError(f"Store unavailable: {e}", backend=self.backend)
        except self._driver.DatabaseError as e:
            self._rollback()
            raise DatabaseError(
                f"Statement failed: {e}",
                table=self.TABLE,
                record_reference=record_reference,
            )
        return rowcount

    def _rollback(self):
        try:
            self.conn.rollback()
        except self._driver.Error as e:
            logger.debug(f"Rollback failed: {e}")

    # =========================================================================
    # READ HELPERS
    # =========================================================================

    def get_book(self, record_reference: str) -> Optional[BookRow]:
        """Get the row for a record reference."""
        rows = self._query(
            f"SELECT * FROM books WHERE record_reference = {self._placeholder}",
            (record_reference,),
        )
        return BookRow(**rows[0]) if rows else None

    def get_all_references(self) -> Set[str]:
        """Get all record references in the table."""
        return {row["record_reference"] for row in self._query("SELECT record_reference FROM books")}

    def count(self) -> int:
        return self._query("SELECT COUNT(*) AS total FROM books")[0]["total"]

    def _query(self, sql: str, params: tuple = ()) -> List[Dict]:
        try:
            cursor = self.conn.cursor()
            try:
                cursor.execute(sql, params)
                names = [col[0] for col in cursor.description]
                return [dict(zip(names, row)) for row in cursor.fetchall()]
            finally:
                cursor.close()
        except self._fatal_errors as e:
            raise StoreConnectionError(f"Store unavailable: {e}", backend=self.backend)

    def close(self):
        """Close database connection."""
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


@contextmanager
def open_database(settings) -> Iterator[BookDatabase]:
    """
    Open the configured store and close it when the block exits,
    on success and on failure alike.
    """
    if settings.db_backend == "sqlite":
        db = BookDatabase.connect_sqlite(settings.db_path)
    elif settings.db_backend == "postgresql":
        db = BookDatabase.connect_postgres(
            host=settings.db_host,
            dbname=settings.db_name,
            user=settings.db_user,
            password=settings.db_password,
            port=settings.db_port,
        )
    else:
        raise ConfigurationError(
            f"Unknown database backend: {settings.db_backend}",
            setting="db_backend",
        )

    with db:
        if settings.create_schema:
            db.ensure_schema()
        yield db
