"""Channel pair persistence.

Stores channel pairs in an SQLite database with WAL mode. Blocking sqlite calls run in a worker
thread through ``asyncio.to_thread`` so the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from models.pair_models import ChannelPair
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable

    from models.config_models import Config

__all__: list[str] = ["PairStore", "PersistenceError"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class PersistenceError(Exception):
    """A channel pair could not be read from or written to the store."""


class PairStore:
    """SQLite-backed store for channel pairs, partitioned by guild.

    Attributes:
        DB_SCHEMA_VERSION (ClassVar[int]): Pair database schema version.
    """

    DB_SCHEMA_VERSION: ClassVar[int] = 1

    def __init__(self, config: Config) -> None:
        self._db_path: Path = Path(config.STORAGE.DB_PATH)
        self._db_conn: sqlite3.Connection | None = None
        self._lock: threading.Lock = threading.Lock()
        logger.debug("PairStore instance created (%s)", self._db_path)

    @property
    def is_initialized(self) -> bool:
        return self._db_conn is not None

    async def component_load(self) -> None:
        """Open the database and create the schema.

        Raises:
            PersistenceError: If the database cannot be opened.
        """
        logger.info("PairStore initialization started")
        await asyncio.to_thread(self._initialize_database)
        logger.info("PairStore initialized successfully")

    async def component_teardown(self) -> None:
        """Close the database connection."""
        logger.info("PairStore shutdown started")
        with self._lock:
            if self._db_conn is not None:
                try:
                    self._db_conn.close()
                except sqlite3.Error as err:
                    logger.error("Error closing database connection: %s", err)
                self._db_conn = None
        logger.info("PairStore shutdown completed")

    def _initialize_database(self) -> None:
        try:
            if not self._db_path.parent.exists():
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn: sqlite3.Connection = sqlite3.connect(str(self._db_path), check_same_thread=False)
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS channel_pairs (
                    guild_id INTEGER NOT NULL,
                    pair_id TEXT NOT NULL,
                    source_channel_id INTEGER NOT NULL,
                    target_channel_id INTEGER NOT NULL,
                    source_lang TEXT NOT NULL,
                    target_lang TEXT NOT NULL,
                    created_at INTEGER NOT NULL,
                    PRIMARY KEY (guild_id, pair_id)
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_pairs_guild ON channel_pairs(guild_id)")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS store_metadata (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "INSERT OR IGNORE INTO store_metadata (key, value) VALUES (?, ?)",
                ("schema_version", str(self.DB_SCHEMA_VERSION)),
            )
            row = conn.execute("SELECT value FROM store_metadata WHERE key = ?", ("schema_version",)).fetchone()
            if row is not None and row[0] != str(self.DB_SCHEMA_VERSION):
                logger.warning(
                    "Pair DB schema version mismatch (db: %s, expected: %s)", row[0], self.DB_SCHEMA_VERSION
                )
            conn.commit()
        except (sqlite3.Error, OSError) as err:
            msg: str = f"Database initialization failed: {err}"
            logger.critical(msg)
            raise PersistenceError(msg) from err

        with self._lock:
            self._db_conn = conn
        logger.info("Database initialized with WAL mode")

    def _connection(self) -> sqlite3.Connection:
        if self._db_conn is None:
            msg = "PairStore is not initialized"
            raise PersistenceError(msg)
        return self._db_conn

    async def load_pairs(self, guild_id: int) -> list[ChannelPair]:
        """Load every pair of one guild, oldest first.

        Raises:
            PersistenceError: If the query fails.
        """
        return await asyncio.to_thread(self._load_pairs, guild_id)

    def _load_pairs(self, guild_id: int) -> list[ChannelPair]:
        with self._lock:
            try:
                rows = (
                    self._connection()
                    .execute(
                        """
                        SELECT source_channel_id, target_channel_id, source_lang, target_lang, created_at
                        FROM channel_pairs
                        WHERE guild_id = ?
                        ORDER BY created_at ASC, pair_id ASC
                        """,
                        (guild_id,),
                    )
                    .fetchall()
                )
            except sqlite3.Error as err:
                msg: str = f"Failed to load pairs for guild {guild_id}: {err}"
                raise PersistenceError(msg) from err

        pairs: list[ChannelPair] = [
            ChannelPair(
                guild_id=guild_id,
                source_channel_id=row[0],
                target_channel_id=row[1],
                source_lang=row[2],
                target_lang=row[3],
                created_at=datetime.fromtimestamp(row[4], tz=UTC),
            )
            for row in rows
        ]
        logger.debug("Loaded %d pairs for guild %s", len(pairs), guild_id)
        return pairs

    async def upsert_pairs(self, guild_id: int, pairs: Iterable[ChannelPair]) -> None:
        """Insert or replace pairs of one guild.

        Raises:
            PersistenceError: If the write fails.
        """
        await asyncio.to_thread(self._upsert_pairs, guild_id, list(pairs))

    def _upsert_pairs(self, guild_id: int, pairs: list[ChannelPair]) -> None:
        with self._lock:
            conn: sqlite3.Connection = self._connection()
            try:
                conn.executemany(
                    """
                    INSERT OR REPLACE INTO channel_pairs
                    (guild_id, pair_id, source_channel_id, target_channel_id, source_lang, target_lang, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            guild_id,
                            pair.id,
                            pair.source_channel_id,
                            pair.target_channel_id,
                            pair.source_lang,
                            pair.target_lang,
                            int(pair.created_at.timestamp()),
                        )
                        for pair in pairs
                    ],
                )
                conn.commit()
            except sqlite3.Error as err:
                conn.rollback()
                msg: str = f"Failed to upsert pairs for guild {guild_id}: {err}"
                raise PersistenceError(msg) from err
        logger.debug("Upserted %d pairs for guild %s", len(pairs), guild_id)

    async def delete_pairs(self, guild_id: int, pair_ids: Iterable[str] | None = None) -> None:
        """Delete pairs of one guild by id. ``None`` deletes every pair of the guild.

        Raises:
            PersistenceError: If the write fails.
        """
        ids: list[str] | None = None if pair_ids is None else list(pair_ids)
        await asyncio.to_thread(self._delete_pairs, guild_id, ids)

    def _delete_pairs(self, guild_id: int, pair_ids: list[str] | None) -> None:
        with self._lock:
            conn: sqlite3.Connection = self._connection()
            try:
                if pair_ids is None:
                    cursor: sqlite3.Cursor = conn.execute("DELETE FROM channel_pairs WHERE guild_id = ?", (guild_id,))
                    deleted: int = cursor.rowcount
                else:
                    deleted = 0
                    for pair_id in pair_ids:
                        cursor = conn.execute(
                            "DELETE FROM channel_pairs WHERE guild_id = ? AND pair_id = ?", (guild_id, pair_id)
                        )
                        deleted += cursor.rowcount
                conn.commit()
            except sqlite3.Error as err:
                conn.rollback()
                msg: str = f"Failed to delete pairs for guild {guild_id}: {err}"
                raise PersistenceError(msg) from err
        logger.debug("Deleted %d pairs for guild %s", deleted, guild_id)
