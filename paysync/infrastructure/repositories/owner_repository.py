"""Repository for billable Owner persistence."""

import sqlite3
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from paysync.domain.models.owner import Owner


def _value(processor) -> str:
    return processor.value if isinstance(processor, Enum) else processor


class OwnerRepository:
    """Repository for managing Owner entities in SQLite."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._initialize_table()

    def _initialize_table(self) -> None:
        """Create owners table if it doesn't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS owners (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT NOT NULL,
                    processor TEXT NOT NULL,
                    processor_id TEXT NOT NULL,
                    stripe_account TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    UNIQUE(processor, processor_id)
                )
            """)
            conn.commit()

    def create(
        self,
        email: str,
        processor: str,
        processor_id: str,
        stripe_account: Optional[str] = None,
    ) -> Owner:
        """Create a new owner linked to a processor customer."""
        now = datetime.now(timezone.utc).isoformat()

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                INSERT INTO owners (
                    email, processor, processor_id, stripe_account, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (email, _value(processor), processor_id, stripe_account, now, now),
            )
            conn.commit()
            owner_id = cursor.lastrowid

        return Owner(
            id=owner_id,
            email=email,
            processor=_value(processor),
            processor_id=processor_id,
            stripe_account=stripe_account,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
        )

    def get_by_id(self, owner_id: int) -> Optional[Owner]:
        """Get owner by ID."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute("SELECT * FROM owners WHERE id = ?", (owner_id,))
            row = cursor.fetchone()

        if not row:
            return None

        return self._row_to_owner(row)

    def find_billable(self, processor: str, processor_id: Optional[str]) -> Optional[Owner]:
        """Find the owner of a processor customer, or None if it is unknown."""
        if not processor_id:
            return None

        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(
                "SELECT * FROM owners WHERE processor = ? AND processor_id = ?",
                (_value(processor), processor_id),
            )
            row = cursor.fetchone()

        if not row:
            return None

        return self._row_to_owner(row)

    def _row_to_owner(self, row: sqlite3.Row) -> Owner:
        """Convert database row to Owner entity."""
        return Owner(
            id=row["id"],
            email=row["email"],
            processor=row["processor"],
            processor_id=row["processor_id"],
            stripe_account=row["stripe_account"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
