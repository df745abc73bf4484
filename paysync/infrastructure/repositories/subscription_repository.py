"""Repository for Subscription and SubscriptionItem persistence."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from paysync.domain.errors import SubscriptionValidationError
from paysync.domain.models.owner import Owner
from paysync.domain.models.subscription import Subscription, SubscriptionItem

if TYPE_CHECKING:
    from paysync.services.subscription_items import ItemReplacementPlan

logger = logging.getLogger(__name__)


def _value(value):
    return value.value if isinstance(value, Enum) else value


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class SubscriptionRepository:
    """Repository for managing Subscription entities and their items in SQLite."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._initialize_table()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _initialize_table(self) -> None:
        """Create subscription tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS subscriptions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id INTEGER NOT NULL,
                    processor TEXT NOT NULL,
                    processor_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    processor_plan TEXT,
                    quantity INTEGER NOT NULL DEFAULT 1,
                    status TEXT NOT NULL,
                    trial_ends_at TEXT,
                    ends_at TEXT,
                    application_fee_percent REAL,
                    stripe_account TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    UNIQUE(processor, processor_id)
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS subscription_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    subscription_id INTEGER NOT NULL,
                    processor_id TEXT NOT NULL,
                    processor_price TEXT,
                    quantity INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (subscription_id) REFERENCES subscriptions(id) ON DELETE CASCADE
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_subscriptions_owner_id ON subscriptions(owner_id)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_subscription_items_subscription_id "
                "ON subscription_items(subscription_id)"
            )
            conn.commit()

    def find_or_initialize(self, owner: Owner, processor: str, processor_id: str) -> Subscription:
        """Return the owner's stored subscription, or a new one that is not saved yet."""
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT * FROM subscriptions
                WHERE owner_id = ? AND processor = ? AND processor_id = ?
                """,
                (owner.id, _value(processor), processor_id),
            ).fetchone()
            if row:
                return self._row_to_subscription(conn, row)

        return Subscription(owner_id=owner.id, processor=_value(processor), processor_id=processor_id)

    def save(self, subscription: Subscription) -> Subscription:
        """
        Insert or update a subscription.

        Raises:
            SubscriptionValidationError: If the record is invalid
        """
        subscription.processor = _value(subscription.processor)
        subscription.status = _value(subscription.status)
        subscription.validate()

        if subscription.id is None:
            try:
                return self._insert(subscription)
            except sqlite3.IntegrityError as exc:
                # Another writer created the same (processor, processor_id) first
                existing = self.get_by_processor_id(subscription.processor, subscription.processor_id)
                if existing is None:
                    raise SubscriptionValidationError(str(exc)) from exc
                logger.info(
                    "Subscription %s was created concurrently, updating row %s",
                    subscription.processor_id,
                    existing.id,
                )
                subscription.id = existing.id
                subscription.created_at = existing.created_at
                subscription.items = existing.items

        return self._update(subscription)

    def _insert(self, subscription: Subscription) -> Subscription:
        now = datetime.now(timezone.utc)
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO subscriptions (
                    owner_id, processor, processor_id, name, processor_plan, quantity,
                    status, trial_ends_at, ends_at, application_fee_percent,
                    stripe_account, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    subscription.owner_id,
                    subscription.processor,
                    subscription.processor_id,
                    subscription.name,
                    subscription.processor_plan,
                    subscription.quantity,
                    subscription.status,
                    _iso(subscription.trial_ends_at),
                    _iso(subscription.ends_at),
                    subscription.application_fee_percent,
                    subscription.stripe_account,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            subscription.id = cursor.lastrowid

        subscription.created_at = now
        subscription.updated_at = now
        return subscription

    def _update(self, subscription: Subscription) -> Subscription:
        now = datetime.now(timezone.utc)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    UPDATE subscriptions
                    SET owner_id = ?, name = ?, processor_plan = ?, quantity = ?, status = ?,
                        trial_ends_at = ?, ends_at = ?, application_fee_percent = ?,
                        stripe_account = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        subscription.owner_id,
                        subscription.name,
                        subscription.processor_plan,
                        subscription.quantity,
                        subscription.status,
                        _iso(subscription.trial_ends_at),
                        _iso(subscription.ends_at),
                        subscription.application_fee_percent,
                        subscription.stripe_account,
                        now.isoformat(),
                        subscription.id,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise SubscriptionValidationError(str(exc)) from exc

        subscription.updated_at = now
        return subscription

    def apply_item_plan(self, subscription: Subscription, plan: ItemReplacementPlan) -> List[SubscriptionItem]:
        """Delete and insert subscription items in a single transaction."""
        if subscription.id is None:
            raise SubscriptionValidationError("Subscription must be saved before its items")

        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            if plan.removals:
                conn.executemany(
                    "DELETE FROM subscription_items WHERE id = ? AND subscription_id = ?",
                    [(item_id, subscription.id) for item_id in plan.removals],
                )
            for item in plan.inserts:
                cursor = conn.execute(
                    """
                    INSERT INTO subscription_items (
                        subscription_id, processor_id, processor_price, quantity, created_at
                    )
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (subscription.id, item.processor_id, item.processor_price, item.quantity, now),
                )
                item.id = cursor.lastrowid
                item.subscription_id = subscription.id

            subscription.items = self._load_items(conn, subscription.id)

        return subscription.items

    def get_by_id(self, subscription_id: int) -> Optional[Subscription]:
        """Get subscription by local ID."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM subscriptions WHERE id = ?", (subscription_id,)
            ).fetchone()
            if not row:
                return None
            return self._row_to_subscription(conn, row)

    def get_by_processor_id(self, processor: str, processor_id: str) -> Optional[Subscription]:
        """Get subscription by its processor key."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM subscriptions WHERE processor = ? AND processor_id = ?",
                (_value(processor), processor_id),
            ).fetchone()
            if not row:
                return None
            return self._row_to_subscription(conn, row)

    def list_by_owner_id(self, owner_id: int) -> List[Subscription]:
        """List all subscriptions for an owner."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM subscriptions
                WHERE owner_id = ?
                ORDER BY created_at DESC, id DESC
                """,
                (owner_id,),
            ).fetchall()
            return [self._row_to_subscription(conn, row) for row in rows]

    def count(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM subscriptions").fetchone()[0]

    def _load_items(self, conn: sqlite3.Connection, subscription_id: int) -> List[SubscriptionItem]:
        rows = conn.execute(
            "SELECT * FROM subscription_items WHERE subscription_id = ? ORDER BY id",
            (subscription_id,),
        ).fetchall()
        return [
            SubscriptionItem(
                id=row["id"],
                subscription_id=row["subscription_id"],
                processor_id=row["processor_id"],
                processor_price=row["processor_price"],
                quantity=row["quantity"],
            )
            for row in rows
        ]

    def _row_to_subscription(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Subscription:
        """Convert database row to Subscription entity."""
        return Subscription(
            id=row["id"],
            owner_id=row["owner_id"],
            processor=row["processor"],
            processor_id=row["processor_id"],
            name=row["name"],
            processor_plan=row["processor_plan"],
            quantity=row["quantity"],
            status=row["status"],
            trial_ends_at=_parse(row["trial_ends_at"]),
            ends_at=_parse(row["ends_at"]),
            application_fee_percent=row["application_fee_percent"],
            stripe_account=row["stripe_account"],
            created_at=_parse(row["created_at"]),
            updated_at=_parse(row["updated_at"]),
            items=self._load_items(conn, row["id"]),
        )
