"""Billable owner domain model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Owner:
    """Local account that holds processor customers and their subscriptions."""

    id: int
    email: str
    processor: str
    processor_id: str
    stripe_account: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
