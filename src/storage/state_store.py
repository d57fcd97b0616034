"""
State store: per-name rolling state in a single SQLite file.

Each row holds the JSON form of a RollState. Reads and writes of one name go
through transact(), which runs the read, the caller's update function and the
write inside a single BEGIN IMMEDIATE transaction so two processes rolling the
same name cannot interleave.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator
import json
import logging
import sqlite3

from src.data_models import NotFoundError, PersistenceError, RollState

logger = logging.getLogger(__name__)

STATE_DB_NAME = "roll.db"

# Seconds a writer waits for another process's transaction to finish
BUSY_TIMEOUT = 5.0


class StateStore:
    """
    SQLite-backed key-value store of RollState records.

    Usage:
        store = StateStore(data_dir / STATE_DB_NAME)
        store.initialize("coffee")
        new_state = store.transact("coffee", lambda s: RollState(s.pity_counter + 1, 0))
    """

    def __init__(self, db_path: Path):
        """
        Initialize the store and its schema.

        Args:
            db_path: Path to the SQLite database file

        Raises:
            PersistenceError: If the database cannot be opened
        """
        self.db_path = Path(db_path)
        self._init_database()
        logger.debug(f"StateStore initialized with database: {self.db_path}")

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection in autocommit mode; transactions are explicit."""
        try:
            conn = sqlite3.connect(str(self.db_path), timeout=BUSY_TIMEOUT, isolation_level=None)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to open state database {self.db_path}: {e}") from e
        try:
            yield conn
        finally:
            conn.close()

    def _init_database(self) -> None:
        with self._connect() as conn:
            try:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS states (
                        name TEXT PRIMARY KEY,
                        data_json TEXT NOT NULL
                    )
                """)
            except sqlite3.Error as e:
                raise PersistenceError(f"Failed to initialize state database {self.db_path}: {e}") from e

    @staticmethod
    def _decode(name: str, data_json: str) -> RollState:
        try:
            return RollState.from_dict(json.loads(data_json))
        except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
            raise PersistenceError(f"Corrupt state record for '{name}': {e}") from e

    @staticmethod
    def _encode(state: RollState) -> str:
        return json.dumps(state.to_dict())

    def initialize(self, name: str) -> RollState:
        """
        Write a zeroed state for name unless one already exists.

        Returns:
            The state now stored for name
        """
        with self._connect() as conn:
            try:
                conn.execute(
                    "INSERT OR IGNORE INTO states (name, data_json) VALUES (?, ?)",
                    (name, self._encode(RollState())),
                )
                row = conn.execute("SELECT data_json FROM states WHERE name = ?", (name,)).fetchone()
            except sqlite3.Error as e:
                raise PersistenceError(f"Failed to initialize state for '{name}': {e}") from e
        return self._decode(name, row[0])

    def read(self, name: str) -> RollState:
        """
        Read the state for name.

        Raises:
            NotFoundError: If no state exists for name
        """
        with self._connect() as conn:
            try:
                row = conn.execute("SELECT data_json FROM states WHERE name = ?", (name,)).fetchone()
            except sqlite3.Error as e:
                raise PersistenceError(f"Failed to read state for '{name}': {e}") from e
        if row is None:
            raise NotFoundError(name, what="state")
        return self._decode(name, row[0])

    def transact(self, name: str, fn: Callable[[RollState], RollState]) -> RollState:
        """
        Atomically read, update and write the state for name.

        The write lock is taken before the read, so no other writer can
        observe or change the row until this transaction commits. If fn
        raises, the transaction is rolled back and the error propagates.

        Args:
            name: Configuration name
            fn: Function from the current state to the new state

        Returns:
            The new state as committed

        Raises:
            NotFoundError: If no state exists for name
            PersistenceError: On any SQLite failure, including commit
        """
        with self._connect() as conn:
            # The lock is database-wide: transactions on different names wait
            # for each other (up to BUSY_TIMEOUT) but never interleave. Each one
            # spans a single read and write, so the wait is milliseconds.
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise PersistenceError(f"Failed to start transaction for '{name}': {e}") from e

            try:
                row = conn.execute("SELECT data_json FROM states WHERE name = ?", (name,)).fetchone()
                if row is None:
                    raise NotFoundError(name, what="state")
                new_state = fn(self._decode(name, row[0]))
                conn.execute(
                    "UPDATE states SET data_json = ? WHERE name = ?",
                    (self._encode(new_state), name),
                )
                conn.execute("COMMIT")
            except sqlite3.Error as e:
                self._rollback(conn)
                raise PersistenceError(f"Failed to update state for '{name}': {e}") from e
            except BaseException:
                self._rollback(conn)
                raise

        logger.debug(f"Committed state for '{name}': {new_state}")
        return new_state

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        if conn.in_transaction:
            conn.execute("ROLLBACK")

    def delete(self, name: str) -> bool:
        """
        Delete the state for name.

        Returns:
            True if a row was removed
        """
        with self._connect() as conn:
            try:
                deleted = conn.execute("DELETE FROM states WHERE name = ?", (name,)).rowcount
            except sqlite3.Error as e:
                raise PersistenceError(f"Failed to delete state for '{name}': {e}") from e
        if deleted:
            logger.info(f"Deleted state for '{name}'")
        return deleted > 0
