import logging

from fastapi import HTTPException, status

from broker_backend.models.events import DocumentEvent, EventDispatchResponse
from broker_backend.triggers import TriggerRegistry

logger = logging.getLogger(__name__)


async def dispatch_event_controller(event: DocumentEvent, registry: TriggerRegistry) -> EventDispatchResponse:
    try:
        trigger = await registry.dispatch(event)
    except Exception:
        # Surfaces to the forwarder as a failed invocation; nothing is retried here.
        logger.exception("Trigger failed for %s %s", event.event_type.value, event.document)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        )
    return EventDispatchResponse(handled=trigger is not None, trigger=trigger)
