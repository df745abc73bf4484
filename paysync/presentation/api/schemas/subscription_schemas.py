"""Pydantic schemas for subscription API endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ....domain.models import Subscription, SyncResult


class ChangeQuantityRequest(BaseModel):
    """Request schema for changing the subscription quantity."""

    quantity: int = Field(..., ge=0)


class SwapPlanRequest(BaseModel):
    """Request schema for moving a subscription to another plan."""

    plan: str = Field(..., min_length=1)
    prorate: Optional[bool] = Field(None, description="Create prorations for the change")


class SubscriptionItemResponse(BaseModel):
    id: int
    processor_id: str
    processor_price: Optional[str]
    quantity: int


class SubscriptionResponse(BaseModel):
    """Response schema for subscription data."""

    id: int
    owner_id: int
    processor: str
    processor_id: str
    name: str
    processor_plan: Optional[str]
    quantity: int
    status: str
    trial_ends_at: Optional[datetime]
    ends_at: Optional[datetime]
    application_fee_percent: Optional[float]
    stripe_account: Optional[str]
    is_active: bool
    on_trial: bool
    on_grace_period: bool
    is_canceled: bool
    is_paused: bool = False
    items: List[SubscriptionItemResponse]

    @classmethod
    def from_subscription(cls, subscription: Subscription) -> "SubscriptionResponse":
        return cls(
            id=subscription.id,
            owner_id=subscription.owner_id,
            processor=subscription.processor,
            processor_id=subscription.processor_id,
            name=subscription.name,
            processor_plan=subscription.processor_plan,
            quantity=subscription.quantity,
            status=subscription.status,
            trial_ends_at=subscription.trial_ends_at,
            ends_at=subscription.ends_at,
            application_fee_percent=subscription.application_fee_percent,
            stripe_account=subscription.stripe_account,
            is_active=subscription.is_active(),
            on_trial=subscription.on_trial(),
            on_grace_period=subscription.on_grace_period(),
            is_canceled=subscription.is_canceled(),
            items=[
                SubscriptionItemResponse(
                    id=item.id,
                    processor_id=item.processor_id,
                    processor_price=item.processor_price,
                    quantity=item.quantity,
                )
                for item in subscription.items
            ],
        )


class SyncResponse(BaseModel):
    """Response schema for a manual resync."""

    status: str
    processor_id: str
    reason: Optional[str] = None
    subscription: Optional[SubscriptionResponse] = None

    @classmethod
    def from_result(cls, result: SyncResult) -> "SyncResponse":
        return cls(
            status=result.status.value,
            processor_id=result.processor_id,
            reason=result.reason,
            subscription=(
                SubscriptionResponse.from_subscription(result.subscription)
                if result.subscription
                else None
            ),
        )
