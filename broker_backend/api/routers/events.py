from fastapi import APIRouter, Depends

from broker_backend.api.deps import get_trigger_registry, verify_trigger_secret
from broker_backend.controllers.events import dispatch_event_controller
from broker_backend.models.events import DocumentEvent, EventDispatchResponse
from broker_backend.triggers import TriggerRegistry

router = APIRouter()

@router.post(
    "",
    response_model=EventDispatchResponse,
    dependencies=[Depends(verify_trigger_secret)],
    summary="Receive a Firestore document event",
)
async def receive_document_event(
    event: DocumentEvent,
    registry: TriggerRegistry = Depends(get_trigger_registry),
):
    """
    Entry point for the event forwarder: runs the trigger registered for the
    event type and document path, if any.
    """
    return await dispatch_event_controller(event, registry)
