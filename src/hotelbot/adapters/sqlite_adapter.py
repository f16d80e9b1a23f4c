from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from hotelbot.exceptions import DatabaseError
from hotelbot.models import Guest

logger = logging.getLogger(__name__)

ROOM_POOL_KEY = "room_pool"


class SQLiteRegistryAdapter:
    """SQLite storage for guests and the room pool."""

    def __init__(self, db_url: str):
        # Format: sqlite:///path
        if db_url.startswith("sqlite:///"):
            self.db_path = db_url.replace("sqlite:///", "")
        else:
            self.db_path = db_url

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._tx: Optional[sqlite3.Connection] = None
        logger.info(f"SQLiteRegistryAdapter ready. Database path: {self.db_path}")

    def _conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            return conn
        except sqlite3.Error as e:
            logger.error(f"Database connection error: {e}")
            raise DatabaseError(f"Could not connect to database: {e}") from e

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        """Connection of the open transaction, or a short-lived one that commits on exit."""
        if self._tx is not None:
            yield self._tx
            return

        conn = self._conn()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    # ------------------------------------
    # Lifecycle
    # ------------------------------------
    def init(self) -> None:
        """Creates the tables when missing."""
        logger.info("Checking/creating registry tables...")
        try:
            with self._session() as conn:
                cur = conn.cursor()
                cur.execute(
                    """
                    CREATE TABLE IF NOT EXISTS guests (
                        id INTEGER PRIMARY KEY,
                        name TEXT NOT NULL,
                        email TEXT NOT NULL,
                        room INTEGER NOT NULL,
                        payment_method TEXT NOT NULL DEFAULT 'Credit',
                        checkin_time INTEGER NOT NULL
                    )
                    """
                )
                cur.execute(
                    """
                    CREATE TABLE IF NOT EXISTS registry_state (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                    """
                )
        except sqlite3.Error as e:
            logger.error(f"SQLite error while creating tables: {e}")
            raise DatabaseError(f"Table initialisation failed: {e}") from e

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._tx is not None:
            yield
            return

        conn = self._conn()
        self._tx = conn
        try:
            with conn:
                yield
        except sqlite3.Error as e:
            logger.error(f"Transaction rolled back: {e}")
            raise DatabaseError(f"Transaction failed: {e}") from e
        finally:
            self._tx = None
            conn.close()

    # ------------------------------------
    # Guests
    # ------------------------------------
    def get_guest(self, guest_id: int) -> Optional[Guest]:
        try:
            with self._session() as conn:
                row = conn.execute("SELECT * FROM guests WHERE id = ?", (guest_id,)).fetchone()
                return Guest.from_dict(dict(row)) if row else None
        except sqlite3.Error as e:
            logger.error(f"Error reading guest {guest_id}: {e}")
            raise DatabaseError(f"Could not read guest {guest_id}: {e}") from e

    def put_guest(self, guest: Guest) -> None:
        data = guest.to_dict()
        fields = ", ".join(data.keys())
        placeholders = ", ".join("?" * len(data))
        try:
            with self._session() as conn:
                conn.execute(
                    f"INSERT OR REPLACE INTO guests ({fields}) VALUES ({placeholders})",
                    tuple(data.values()),
                )
        except sqlite3.Error as e:
            logger.error(f"Error storing guest {guest.id}: {e}")
            raise DatabaseError(f"Could not store guest {guest.id}: {e}") from e

    def remove_guest(self, guest_id: int) -> bool:
        try:
            with self._session() as conn:
                cur = conn.execute("DELETE FROM guests WHERE id = ?", (guest_id,))
                return cur.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Error removing guest {guest_id}: {e}")
            raise DatabaseError(f"Could not remove guest {guest_id}: {e}") from e

    def list_guests(self) -> List[Guest]:
        try:
            with self._session() as conn:
                rows = conn.execute("SELECT * FROM guests ORDER BY id").fetchall()
                return [Guest.from_dict(dict(r)) for r in rows]
        except sqlite3.Error as e:
            logger.error(f"Error listing guests: {e}")
            raise DatabaseError(f"Could not list guests: {e}") from e

    # ------------------------------------
    # Room pool
    # ------------------------------------
    def load_room_pool(self) -> Optional[List[int]]:
        try:
            with self._session() as conn:
                row = conn.execute(
                    "SELECT value FROM registry_state WHERE key = ?", (ROOM_POOL_KEY,)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Error reading room pool: {e}")
            raise DatabaseError(f"Could not read room pool: {e}") from e

        if row is None:
            return None
        return [int(room) for room in json.loads(row["value"])]

    def replace_room_pool(self, rooms: List[int]) -> None:
        try:
            with self._session() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO registry_state (key, value) VALUES (?, ?)",
                    (ROOM_POOL_KEY, json.dumps(list(rooms))),
                )
        except sqlite3.Error as e:
            logger.error(f"Error storing room pool: {e}")
            raise DatabaseError(f"Could not store room pool: {e}") from e
