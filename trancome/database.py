"""Database connections, initialisation and transaction helpers."""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import Config

logger = logging.getLogger(__name__)

_DIRECTION_INDEX = 1

_USERS_TABLE = """CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT
  )"""


class DatabaseError(Exception):
    """Raised when a database operation fails."""


class DatabaseManager:
    """Opens connections and prepares databases from migration files."""

    def __init__(self, migrations_dir: str | os.PathLike[str] | None = None) -> None:
        self.migrations_dir = Path(migrations_dir) if migrations_dir is not None else None

    def get_connection(self, db_path: str | os.PathLike[str]) -> sqlite3.Connection:
        """Open a connection in autocommit mode with WAL, full sync and foreign keys."""
        try:
            connection = sqlite3.connect(str(db_path), isolation_level=None)
        except sqlite3.Error as exc:
            raise DatabaseError(f"Failed to open database: {exc}") from exc
        try:
            connection.execute("PRAGMA journal_mode=WAL")
            connection.execute("PRAGMA synchronous=FULL")
            connection.execute("PRAGMA foreign_keys=ON")
        except sqlite3.Error as exc:
            connection.close()
            raise DatabaseError(f"Failed to connect to the database: {exc}") from exc
        return connection

    def _up_migrations(self) -> list[Path]:
        if self.migrations_dir is None:
            return []
        try:
            entries = sorted(self.migrations_dir.iterdir(), key=lambda entry: entry.name)
        except OSError as exc:
            raise DatabaseError(f"Failed to read migration files: {exc}") from exc

        migrations = []
        for entry in entries:
            if entry.is_dir():
                continue
            sections = entry.name.split(".")
            if len(sections) <= _DIRECTION_INDEX:
                raise DatabaseError(f"Malformed migration file name: {entry.name}")
            if sections[_DIRECTION_INDEX] == "up":
                migrations.append(entry)
        return migrations

    def initialize_database(self, config: Config) -> None:
        """Create the database directories and apply the "up" migrations to the shared database."""
        database_dir = Path(config.database_dir)
        try:
            database_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DatabaseError(f"Failed to create database directory: {exc}") from exc

        try:
            (database_dir / config.user_db_dir).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DatabaseError(f"Failed to create user database directory: {exc}") from exc

        shared_path = database_dir / config.shared_db
        try:
            shared_path.touch(exist_ok=True)
        except OSError as exc:
            raise DatabaseError(
                f"Failed to initialize shared database: failed to create shared database file: {exc}"
            ) from exc

        with with_database(self, shared_path) as connection:
            for migration in self._up_migrations():
                try:
                    script = migration.read_text(encoding="utf-8")
                except OSError as exc:
                    raise DatabaseError(
                        f"Failed to read migration file {migration.name}: {exc}"
                    ) from exc
                try:
                    connection.executescript(script)
                except sqlite3.Error as exc:
                    raise DatabaseError(
                        f"Failed to execute migration {migration.name}: {exc}"
                    ) from exc

    def create_user_database(
        self, db_path: str | os.PathLike[str], user_id: str, username: str
    ) -> Path:
        """Create a user's own database holding a users table and return its path."""
        print("dbPath", db_path)
        user_db_path = Path(db_path) / f"{user_id}_{username}.db"
        try:
            user_db_path.touch(exist_ok=True)
        except OSError as exc:
            raise DatabaseError(f"Failed to create user database file: {exc}") from exc

        print("userDBPath", user_db_path)

        with with_database(self, user_db_path) as connection:
            try:
                connection.execute(_USERS_TABLE)
            except sqlite3.Error as exc:
                raise DatabaseError(f"Failed to create users table: {exc}") from exc

        print(f"User database for '{username}' created successfully at {user_db_path}")
        return user_db_path


class TransactionManager:
    """A transaction under manual control that owns its connection."""

    def __init__(self, manager: DatabaseManager, db_path: str | os.PathLike[str]) -> None:
        self._connection = manager.get_connection(db_path)
        try:
            self._connection.execute("BEGIN")
        except sqlite3.Error as exc:
            self._connection.close()
            raise DatabaseError(f"failed to begin transaction: {exc}") from exc
        self._done = False

    @property
    def connection(self) -> sqlite3.Connection:
        """The connection the transaction runs on."""
        return self._connection

    def _finish(self, statement: str, verb: str) -> None:
        try:
            if self._done:
                raise DatabaseError(
                    f"failed to {verb} transaction: "
                    "transaction has already been committed or rolled back"
                )
            self._done = True
            try:
                self._connection.execute(statement)
            except sqlite3.Error as exc:
                raise DatabaseError(f"failed to {verb} transaction: {exc}") from exc
        finally:
            self._connection.close()

    def commit(self) -> None:
        """Commit the transaction and close the connection."""
        self._finish("COMMIT", "commit")

    def rollback(self) -> None:
        """Roll the transaction back and close the connection."""
        self._finish("ROLLBACK", "rollback")

    def close(self) -> None:
        """Roll back if still open, then close the connection."""
        try:
            if not self._done:
                self._done = True
                try:
                    self._connection.execute("ROLLBACK")
                except sqlite3.Error as exc:
                    logger.error("Error during transaction cleanup: %s", exc)
        finally:
            self._connection.close()

    def __enter__(self) -> TransactionManager:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@contextmanager
def with_database(
    manager: DatabaseManager, db_path: str | os.PathLike[str]
) -> Iterator[sqlite3.Connection]:
    """Yield a connection that is closed afterwards."""
    connection = manager.get_connection(db_path)
    try:
        yield connection
    finally:
        try:
            connection.close()
        except sqlite3.Error as exc:
            logger.error("Error closing database: %s", exc)


@contextmanager
def with_transaction(
    manager: DatabaseManager, db_path: str | os.PathLike[str]
) -> Iterator[sqlite3.Connection]:
    """Yield a connection inside a transaction.

    The transaction is committed when the block finishes and rolled back
    when it raises; the exception is then raised again.
    """
    with with_database(manager, db_path) as connection:
        try:
            connection.execute("BEGIN")
        except sqlite3.Error as exc:
            raise DatabaseError(f"failed to begin transaction: {exc}") from exc

        try:
            yield connection
        except BaseException as failure:
            try:
                connection.execute("ROLLBACK")
            except sqlite3.Error as rollback_error:
                if isinstance(failure, Exception):
                    raise DatabaseError(
                        f"transaction failed and rollback failed: {rollback_error} "
                        f"(original error: {failure})"
                    ) from failure
                logger.error("Failed to rollback transaction after panic: %s", rollback_error)
            raise

        try:
            connection.execute("COMMIT")
        except sqlite3.Error as exc:
            raise DatabaseError(f"failed to commit transaction: {exc}") from exc