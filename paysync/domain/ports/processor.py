from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from ..models import Subscription


class SubscriptionProcessorClient(Protocol):
    """Remote calls against a processor's subscription API."""

    def retrieve_subscription(
        self,
        subscription_id: str,
        expand: Optional[List[str]] = None,
        stripe_account: Optional[str] = None,
    ) -> Any:
        ...

    def update_subscription(
        self,
        subscription_id: str,
        params: Dict[str, Any],
        stripe_account: Optional[str] = None,
    ) -> Any:
        ...

    def cancel_subscription(self, subscription_id: str, stripe_account: Optional[str] = None) -> Any:
        ...


class SubscriptionCommands(Protocol):
    """Lifecycle commands shared by every processor variant."""

    subscription: Subscription

    def cancel(self) -> Subscription:
        ...

    def cancel_now(self) -> Subscription:
        ...

    def change_quantity(self, quantity: int) -> None:
        ...

    def resume(self) -> None:
        ...

    def swap(self, plan: str) -> None:
        ...

    def pause(self) -> None:
        ...

    def is_paused(self) -> bool:
        ...

    def on_grace_period(self, now: Optional[datetime] = None) -> bool:
        ...
