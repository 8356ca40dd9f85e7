"""SQLite database initialization and repository implementations.

Each aggregate is stored as one camelCase JSON document in a ``data``
column, next to the handful of columns the repositories filter and sort on.
"""

import json
import logging
import shutil
import sqlite3
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Optional

from config.exceptions import DatabaseError
from models.enums import OutboxStatus
from models.party import Party
from models.records import Note, OutboxEvent, SaveSlot, TimelineEvent
from models.schema import from_document, to_document

logger = logging.getLogger(__name__)

# SQL for creating all tables
_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS parties (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    status TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    data TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    party_id TEXT NOT NULL,
    created_at TEXT NOT NULL,
    data TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS save_slots (
    id TEXT PRIMARY KEY,
    party_id TEXT NOT NULL,
    slot INTEGER NOT NULL,
    created_at TEXT NOT NULL,
    data TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS timeline (
    id TEXT PRIMARY KEY,
    party_id TEXT NOT NULL,
    type TEXT NOT NULL,
    created_at TEXT NOT NULL,
    data TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS outbox (
    id TEXT PRIMARY KEY,
    party_id TEXT NOT NULL,
    type TEXT NOT NULL,
    status TEXT NOT NULL,
    created_at TEXT NOT NULL,
    sent_at TEXT,
    data TEXT NOT NULL
);
"""

# Indexes added via migration (idempotent)
_MIGRATION_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_parties_updated ON parties(updated_at)",
    "CREATE INDEX IF NOT EXISTS idx_notes_party ON notes(party_id, created_at)",
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_save_slots_party_slot ON save_slots(party_id, slot)",
    "CREATE INDEX IF NOT EXISTS idx_timeline_party ON timeline(party_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_outbox_status ON outbox(status, created_at)",
]


def _dump(obj) -> str:
    return json.dumps(to_document(obj), ensure_ascii=False)


class Database:
    """SQLite database manager; exposes one repository per collection."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

        self.parties = PartyRepository(self)
        self.notes = NoteRepository(self)
        self.save_slots = SaveSlotRepository(self)
        self.timeline = EventLogRepository(self)
        self.outbox = OutboxRepository(self)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection whose work commits as one transaction."""
        conn = self._get_conn()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self):
        with self.connect() as conn:
            conn.executescript(_CREATE_TABLES_SQL)
        self._migrate()

    def _migrate(self):
        """Apply idempotent schema migrations (indexes, constraints)."""
        with self.connect() as conn:
            for sql in _MIGRATION_SQL:
                try:
                    conn.execute(sql)
                except sqlite3.OperationalError as e:
                    logger.debug("Migration skipped (already applied): %s", e)

    def backup_database(self, target_path: str | Path) -> Path:
        """Create a backup copy of the database.

        Args:
            target_path: Path for the backup file.

        Returns:
            Path to the backup file.
        """
        target = Path(target_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(str(self.db_path), str(target))
        logger.info("Database backed up to %s", target)
        return target

    def delete_party_cascade(self, party_id: str) -> None:
        """Delete a party and every record that references it, all or nothing."""
        try:
            with self.connect() as conn:
                conn.execute("DELETE FROM outbox WHERE party_id = ?", (party_id,))
                conn.execute("DELETE FROM timeline WHERE party_id = ?", (party_id,))
                conn.execute("DELETE FROM save_slots WHERE party_id = ?", (party_id,))
                conn.execute("DELETE FROM notes WHERE party_id = ?", (party_id,))
                conn.execute("DELETE FROM parties WHERE id = ?", (party_id,))
        except sqlite3.Error as e:
            raise DatabaseError("Cascade delete failed", {"party_id": party_id, "error": str(e)}) from e
        logger.info("Party %s and all associated data deleted", party_id)


class PartyRepository:
    def __init__(self, db: Database):
        self._db = db

    def find_all(self) -> list[Party]:
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT data FROM parties ORDER BY updated_at DESC, rowid DESC"
            ).fetchall()
        return [from_document(Party, json.loads(r["data"])) for r in rows]

    def find_by_id(self, party_id: str) -> Optional[Party]:
        with self._db.connect() as conn:
            row = conn.execute("SELECT data FROM parties WHERE id = ?", (party_id,)).fetchone()
        if not row:
            return None
        return from_document(Party, json.loads(row["data"]))

    def save(self, party: Party) -> None:
        with self._db.connect() as conn:
            conn.execute(
                "INSERT INTO parties (id, name, status, updated_at, data) VALUES (?, ?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET name=excluded.name, status=excluded.status, "
                "updated_at=excluded.updated_at, data=excluded.data",
                (party.id, party.name, party.status.value, party.updated_at, _dump(party)),
            )

    def delete(self, party_id: str) -> None:
        self._db.delete_party_cascade(party_id)


class NoteRepository:
    def __init__(self, db: Database):
        self._db = db

    def find_by_party(self, party_id: str) -> list[Note]:
        """Notes of a party, most recent first."""
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT data FROM notes WHERE party_id = ? ORDER BY created_at DESC, rowid DESC",
                (party_id,),
            ).fetchall()
        return [from_document(Note, json.loads(r["data"])) for r in rows]

    def save(self, note: Note) -> None:
        with self._db.connect() as conn:
            conn.execute(
                "INSERT INTO notes (id, party_id, created_at, data) VALUES (?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET party_id=excluded.party_id, "
                "created_at=excluded.created_at, data=excluded.data",
                (note.id, note.party_id, note.created_at, _dump(note)),
            )


class SaveSlotRepository:
    def __init__(self, db: Database):
        self._db = db

    def find_by_party(self, party_id: str) -> list[SaveSlot]:
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT data FROM save_slots WHERE party_id = ? ORDER BY slot",
                (party_id,),
            ).fetchall()
        return [from_document(SaveSlot, json.loads(r["data"])) for r in rows]

    def save(self, slot: SaveSlot) -> None:
        with self._db.connect() as conn:
            conn.execute(
                "INSERT INTO save_slots (id, party_id, slot, created_at, data) VALUES (?, ?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET party_id=excluded.party_id, slot=excluded.slot, "
                "created_at=excluded.created_at, data=excluded.data",
                (slot.id, slot.party_id, slot.slot, slot.created_at, _dump(slot)),
            )

    def delete(self, slot_id: str) -> None:
        with self._db.connect() as conn:
            conn.execute("DELETE FROM save_slots WHERE id = ?", (slot_id,))


class EventLogRepository:
    """Append-only timeline."""

    def __init__(self, db: Database):
        self._db = db

    def find_by_party(self, party_id: str) -> list[TimelineEvent]:
        """Events of a party, most recent first."""
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT data FROM timeline WHERE party_id = ? ORDER BY created_at DESC, rowid DESC",
                (party_id,),
            ).fetchall()
        return [from_document(TimelineEvent, json.loads(r["data"])) for r in rows]

    def append(self, event: TimelineEvent) -> None:
        with self._db.connect() as conn:
            conn.execute(
                "INSERT INTO timeline (id, party_id, type, created_at, data) VALUES (?, ?, ?, ?, ?)",
                (event.id, event.party_id, event.type.value, event.created_at, _dump(event)),
            )


class OutboxRepository:
    """Append-only staging log for a future sync consumer."""

    def __init__(self, db: Database):
        self._db = db

    def find_pending(self) -> list[OutboxEvent]:
        """Pending entries, oldest first."""
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT data FROM outbox WHERE status = ? ORDER BY created_at, rowid",
                (OutboxStatus.PENDING.value,),
            ).fetchall()
        return [from_document(OutboxEvent, json.loads(r["data"])) for r in rows]

    def find_by_party(self, party_id: str) -> list[OutboxEvent]:
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT data FROM outbox WHERE party_id = ? ORDER BY created_at, rowid",
                (party_id,),
            ).fetchall()
        return [from_document(OutboxEvent, json.loads(r["data"])) for r in rows]

    def append(self, event: OutboxEvent) -> None:
        with self._db.connect() as conn:
            conn.execute(
                "INSERT INTO outbox (id, party_id, type, status, created_at, sent_at, data) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (event.id, event.party_id, event.type.value, event.status.value,
                 event.created_at, event.sent_at, _dump(event)),
            )

    def update_status(self, event_id: str, status: OutboxStatus, sent_at: Optional[str] = None) -> None:
        with self._db.connect() as conn:
            row = conn.execute("SELECT data FROM outbox WHERE id = ?", (event_id,)).fetchone()
            if not row:
                logger.warning("Outbox entry %s not found, status unchanged", event_id)
                return
            event = from_document(OutboxEvent, json.loads(row["data"]))
            event = replace(event, status=status, sent_at=sent_at or event.sent_at)
            conn.execute(
                "UPDATE outbox SET status=?, sent_at=?, data=? WHERE id=?",
                (event.status.value, event.sent_at, _dump(event), event_id),
            )
