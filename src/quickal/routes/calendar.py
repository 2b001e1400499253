import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from quickal.auth import require_session
from quickal.calendar.calendar_client import GoogleCalendarClient
from quickal.calendar.dto import EventMutationRequest, EventPatch
from quickal.constants import CALENDAR_SETTINGS
from quickal.errors import AuthError, NotFoundError
from quickal.routes.deps import get_calendar_client
from quickal.routes.dto import (
    DeleteResponse,
    ErrorResponse,
    EventListResponse,
    EventResponse,
)

# Set up logging
logger = logging.getLogger(__name__)

# Session is checked before any endpoint dependency builds a Google client
router = APIRouter(
    dependencies=[Depends(require_session)],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def _error_response(error: Exception, fallback: str) -> JSONResponse:
    """Collapse any adapter failure into the {error} envelope."""
    message = getattr(error, "message", None) or str(error) or fallback

    if isinstance(error, AuthError):
        status_code = 401
    elif isinstance(error, NotFoundError):
        status_code = 404
    else:
        status_code = 500

    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("", response_model=EventListResponse)
async def list_events(
    q: Optional[str] = Query(default=None, description="Free-text search"),
    max_results: int = Query(default=CALENDAR_SETTINGS.DEFAULT_MAX_RESULTS, gt=0),
    days_ahead: int = Query(default=CALENDAR_SETTINGS.DEFAULT_DAYS_AHEAD, gt=0),
    client: GoogleCalendarClient = Depends(get_calendar_client),
):
    """List upcoming events in the lookahead window, ordered by start time."""
    try:
        events = await asyncio.to_thread(client.list_events, q, max_results, days_ahead)
        return {"events": [event.to_payload() for event in events]}
    except Exception as e:
        logger.error(f"Listing events failed: {e}")
        return _error_response(e, "Failed to fetch events")


@router.post("", response_model=EventResponse)
async def create_event(
    request: EventMutationRequest,
    client: GoogleCalendarClient = Depends(get_calendar_client),
):
    """Create an event; addMeet attaches a Google Meet link."""
    try:
        event = await asyncio.to_thread(client.create_event, request)
        return {"event": event.to_payload()}
    except Exception as e:
        logger.error(f"Creating event failed: {e}")
        return _error_response(e, "Failed to create event")


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    patch: EventPatch,
    client: GoogleCalendarClient = Depends(get_calendar_client),
):
    """Update only the fields present in the body; the rest are preserved."""
    try:
        event = await asyncio.to_thread(client.update_event, event_id, patch)
        return {"event": event.to_payload()}
    except Exception as e:
        logger.error(f"Updating event {event_id} failed: {e}")
        return _error_response(e, "Failed to update event")


@router.delete("/{event_id}", response_model=DeleteResponse)
async def delete_event(
    event_id: str,
    client: GoogleCalendarClient = Depends(get_calendar_client),
):
    try:
        await asyncio.to_thread(client.delete_event, event_id)
        return {"success": True}
    except Exception as e:
        logger.error(f"Deleting event {event_id} failed: {e}")
        return _error_response(e, "Failed to delete event")
