"""Identity provider webhook receiver"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
import json
import logging

from svix.webhooks import Webhook, WebhookVerificationError

from api.dependencies import get_db
from api.responses import SuccessResponse
from app.config import settings
from app.exceptions import ServiceValidationError
from services.user_service import UserService

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])
logger = logging.getLogger("foodops.api.webhooks")

SIGNATURE_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


@router.post("/identity", response_model=SuccessResponse)
async def identity_webhook(request: Request, db: Session = Depends(get_db)):
    """
    Keep the user mirror in step with the identity provider.

    The payload is verified against ``webhook_secret`` before it is read.
    Unknown event types are acknowledged and ignored.
    """
    if not settings.webhook_secret:
        raise ServiceValidationError("Webhook secret is not configured")

    headers = {name: request.headers.get(name) for name in SIGNATURE_HEADERS}
    missing = [name for name, value in headers.items() if not value]
    if missing:
        raise ServiceValidationError(
            "Missing webhook signature headers", details={"missing": missing}
        )

    body = await request.body()
    try:
        Webhook(settings.webhook_secret).verify(body, headers)
    except WebhookVerificationError as e:
        logger.warning(f"Rejected identity webhook {headers['svix-id']}: {e}")
        raise ServiceValidationError("Invalid webhook signature")

    try:
        event = json.loads(body)
    except ValueError:
        raise ServiceValidationError("Webhook payload is not valid JSON")
    if not isinstance(event, dict):
        raise ServiceValidationError("Webhook payload must be a JSON object")

    event_type = event.get("type")
    data = event.get("data") or {}
    logger.info(f"Identity webhook {headers['svix-id']}: {event_type}")

    if event_type == "user.created":
        UserService.sync_identity_user(db, data, created=True)
    elif event_type == "user.updated":
        UserService.sync_identity_user(db, data, created=False)
    elif event_type == "user.deleted":
        if data.get("id"):
            UserService.delete_identity_user(db, data["id"])
    else:
        logger.debug(f"Ignoring identity event {event_type}")

    return SuccessResponse()
