from datetime import datetime, timezone

from fastapi import APIRouter, Body, Depends, HTTPException

from .. import schemas
from ..exceptions import StorageError
from ..utils.logging import WebhookLogger
from ..worker.dispatcher import Dispatcher
from .dependencies import get_dispatcher

router = APIRouter()


@router.post("/api/events", response_model=schemas.TriggerResponse)
def trigger_event(event: schemas.EventTrigger, dispatcher: Dispatcher = Depends(get_dispatcher)):
    if not event.event_type.strip():
        raise HTTPException(status_code=400, detail="event_type required")
    try:
        result = dispatcher.trigger(event.event_type.strip(), event.payload)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return schemas.TriggerResponse(
        message=f"Event triggered to {result.targets_attempted} webhooks",
        **result.model_dump(),
    )


@router.post("/webhook-receiver")
def receive_webhook(body: dict = Body(...)):
    """Test endpoint: register its URL to see deliveries arrive."""
    WebhookLogger.webhook_received("/webhook-receiver", body.get("eventType"))
    return {
        "success": True,
        "message": "Webhook received and processed",
        "receivedAt": datetime.now(timezone.utc).isoformat(),
    }
