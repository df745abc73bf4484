"""Outcome of reconciling a remote subscription into local state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .subscription import Subscription


class SyncStatus(str, Enum):
    RECONCILED = "reconciled"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncResult:
    """Tagged result: exactly one of ``subscription``, ``reason`` or ``error`` is set."""

    status: SyncStatus
    processor_id: str
    subscription: Optional[Subscription] = None
    reason: Optional[str] = None
    error: Optional[BaseException] = None

    @classmethod
    def reconciled(cls, subscription: Subscription) -> "SyncResult":
        return cls(SyncStatus.RECONCILED, subscription.processor_id, subscription=subscription)

    @classmethod
    def skipped(cls, processor_id: str, reason: str) -> "SyncResult":
        return cls(SyncStatus.SKIPPED, processor_id, reason=reason)

    @classmethod
    def failed(cls, processor_id: str, error: BaseException) -> "SyncResult":
        return cls(SyncStatus.FAILED, processor_id, error=error)

    @property
    def is_reconciled(self) -> bool:
        return self.status is SyncStatus.RECONCILED

    def __bool__(self) -> bool:
        return self.is_reconciled
