import asyncio
import logging
from datetime import datetime
from typing import AsyncIterator, List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from quickal.assistant.dto import ChatMessage, StreamEvent
from quickal.assistant.tools import CalendarToolbox
from quickal.assistant.workflow import CalendarAssistant
from quickal.auth import require_session
from quickal.calendar.calendar_client import GoogleCalendarClient
from quickal.constants import ASSISTANT_SETTINGS
from quickal.routes.deps import get_calendar_client, get_chat_model, get_reference_time
from quickal.routes.dto import ChatRequest, ErrorResponse

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(
    dependencies=[Depends(require_session)],
    responses={401: {"model": ErrorResponse}},
)


async def _event_stream(
    request: Request,
    assistant: CalendarAssistant,
    messages: List[ChatMessage],
    now: datetime,
    max_duration: float,
) -> AsyncIterator[str]:
    """Forward assistant events as SSE until done, timed out or disconnected."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + max_duration
    events = assistant.stream(messages, now=now)

    try:
        while True:
            if await request.is_disconnected():
                # Mutations already applied by earlier tool calls stay applied
                logger.info("Client disconnected, abandoning assistant response")
                break

            remaining = deadline - loop.time()
            if remaining <= 0:
                raise asyncio.TimeoutError()

            try:
                event = await asyncio.wait_for(events.__anext__(), timeout=remaining)
            except StopAsyncIteration:
                break

            yield event.to_sse()

    except asyncio.TimeoutError:
        logger.warning("Assistant response exceeded %.1f seconds, aborting", max_duration)
        yield StreamEvent("error", {"error": "The assistant took too long to respond"}).to_sse()
    except Exception as e:
        logger.error(f"Assistant stream failed: {e}")
        yield StreamEvent("error", {"error": str(e) or "Assistant failed"}).to_sse()
    finally:
        await events.aclose()


@router.post("")
async def chat(
    payload: ChatRequest,
    request: Request,
    client: GoogleCalendarClient = Depends(get_calendar_client),
    model=Depends(get_chat_model),
    now: datetime = Depends(get_reference_time),
):
    """
    Stream the assistant's answer to the supplied conversation.

    Events: text-delta, tool-call, tool-result, error, finish.
    """
    assistant = CalendarAssistant(model=model, toolbox=CalendarToolbox(client))

    return StreamingResponse(
        _event_stream(
            request,
            assistant,
            payload.messages,
            now,
            ASSISTANT_SETTINGS.MAX_DURATION_SECONDS,
        ),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
