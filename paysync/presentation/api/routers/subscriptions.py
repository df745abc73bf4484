"""Subscription lookup and lifecycle command endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ....core.dependencies import get_subscription_service
from ....domain.errors import (
    PaysyncError,
    PreconditionError,
    ProcessorError,
    SubscriptionNotFoundError,
    SubscriptionValidationError,
    UnsupportedProcessorError,
)
from ....services.subscription_service import SubscriptionService
from ..dependencies import require_admin
from ..schemas.subscription_schemas import (
    ChangeQuantityRequest,
    SubscriptionResponse,
    SwapPlanRequest,
    SyncResponse,
)

router = APIRouter(prefix="/api", tags=["subscriptions"])


def _http_error(exc: PaysyncError) -> HTTPException:
    if isinstance(exc, SubscriptionNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PreconditionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, (SubscriptionValidationError, UnsupportedProcessorError)):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, ProcessorError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"{exc.processor} error: {exc}",
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/subscriptions/{subscription_id}", response_model=SubscriptionResponse)
async def get_subscription(
    subscription_id: int,
    _: str = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    try:
        return SubscriptionResponse.from_subscription(service.get_subscription(subscription_id))
    except PaysyncError as exc:
        raise _http_error(exc) from exc


@router.get("/owners/{owner_id}/subscriptions", response_model=List[SubscriptionResponse])
async def list_owner_subscriptions(
    owner_id: int,
    _: str = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> List[SubscriptionResponse]:
    return [
        SubscriptionResponse.from_subscription(subscription)
        for subscription in service.list_owner_subscriptions(owner_id)
    ]


@router.post("/subscriptions/{subscription_id}/cancel", response_model=SubscriptionResponse)
async def cancel_subscription(
    subscription_id: int,
    _: str = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    """Cancel at the end of the trial or current billing period."""
    try:
        return SubscriptionResponse.from_subscription(service.cancel(subscription_id))
    except PaysyncError as exc:
        raise _http_error(exc) from exc


@router.post("/subscriptions/{subscription_id}/cancel-now", response_model=SubscriptionResponse)
async def cancel_subscription_now(
    subscription_id: int,
    _: str = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    try:
        return SubscriptionResponse.from_subscription(service.cancel_now(subscription_id))
    except PaysyncError as exc:
        raise _http_error(exc) from exc


@router.post(
    "/subscriptions/{subscription_id}/quantity",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def change_subscription_quantity(
    subscription_id: int,
    payload: ChangeQuantityRequest,
    _: str = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    """Request a quantity change. Local state updates on the next sync."""
    try:
        subscription = service.change_quantity(subscription_id, payload.quantity)
        return SubscriptionResponse.from_subscription(subscription)
    except PaysyncError as exc:
        raise _http_error(exc) from exc


@router.post(
    "/subscriptions/{subscription_id}/resume",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def resume_subscription(
    subscription_id: int,
    _: str = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    try:
        return SubscriptionResponse.from_subscription(service.resume(subscription_id))
    except PaysyncError as exc:
        raise _http_error(exc) from exc


@router.post(
    "/subscriptions/{subscription_id}/swap",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def swap_subscription_plan(
    subscription_id: int,
    payload: SwapPlanRequest,
    _: str = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    """Swap plans. Local state updates on the next sync."""
    try:
        subscription = service.swap(subscription_id, payload.plan, prorate=payload.prorate)
        return SubscriptionResponse.from_subscription(subscription)
    except PaysyncError as exc:
        raise _http_error(exc) from exc


@router.post("/subscriptions/{subscription_id}/pause", status_code=status.HTTP_204_NO_CONTENT)
async def pause_subscription(
    subscription_id: int,
    _: str = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> None:
    try:
        service.pause(subscription_id)
    except PaysyncError as exc:
        raise _http_error(exc) from exc


@router.post("/subscriptions/{subscription_id}/sync", response_model=SyncResponse)
async def sync_subscription(
    subscription_id: int,
    _: str = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SyncResponse:
    """Fetch the subscription from Stripe and reconcile it now."""
    try:
        return SyncResponse.from_result(service.resync(subscription_id))
    except PaysyncError as exc:
        raise _http_error(exc) from exc
