"""Stripe webhook endpoint."""

import json
import logging
from typing import Dict

import stripe
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from ....core.config import Settings
from ....core.dependencies import get_settings, get_stripe_service, get_webhook_handler
from ....domain.models import SyncStatus
from ....services.stripe_service import StripeService
from ....services.stripe_webhooks import StripeWebhookHandler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stripe", tags=["Stripe Webhooks"])


@router.post("/webhook", include_in_schema=False)
async def stripe_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    stripe_service: StripeService = Depends(get_stripe_service),
    handler: StripeWebhookHandler = Depends(get_webhook_handler),
):
    """Handle Stripe webhook events."""
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature", "")

    if not settings.stripe_webhook_secret:
        # Without a secret the payload cannot be trusted, so nothing is synced
        try:
            event_type = json.loads(payload).get("type")
        except ValueError:
            event_type = None
        logger.warning("Stripe webhook secret not configured; ignoring event %s", event_type)
        return {"status": "ignored"}

    try:
        event = stripe_service.construct_event(payload, sig_header, settings.stripe_webhook_secret)
    except stripe.SignatureVerificationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid signature") from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload") from exc

    result = handler.handle(event)
    if result is None:
        return {"status": "ignored"}

    body: Dict[str, str] = {"status": result.status.value, "subscription": result.processor_id}
    if result.status is SyncStatus.FAILED:
        # Non-2xx makes Stripe redeliver the event later
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
    return body
