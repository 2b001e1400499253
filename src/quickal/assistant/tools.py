"""
Calendar Assistant Tools Module

The four calendar operations the assistant may invoke. The set is closed:
CalendarOperation names every tool, each bound to the pydantic schema its
arguments are validated against before the adapter is called.

Any failure while validating or executing a call is folded into that call's
result payload instead of being raised, so the model can explain it.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type

from langchain_core.utils.function_calling import convert_to_openai_tool
from pydantic import BaseModel, Field

from quickal.calendar.calendar_client import GoogleCalendarClient
from quickal.calendar.dto import CalendarEvent, EventMutationRequest, EventPatch
from quickal.constants import ASSISTANT_SETTINGS, CALENDAR_SETTINGS
from quickal.errors import ToolExecutionError

# Set up logging
logger = logging.getLogger(__name__)


class CalendarOperation(str, Enum):
    CREATE_EVENT = "createEvent"
    UPDATE_EVENT = "updateEvent"
    DELETE_EVENT = "deleteEvent"
    LIST_EVENTS = "listEvents"


class UpdateEventArgs(EventPatch):
    """Arguments of the updateEvent tool."""
    eventId: str = Field(description="Event ID to update")


class DeleteEventArgs(BaseModel):
    """Arguments of the deleteEvent tool."""
    eventId: str = Field(description="Event ID to delete")


class ListEventsArgs(BaseModel):
    """Arguments of the listEvents tool."""
    query: Optional[str] = Field(default=None, description="Search query")
    daysAhead: Optional[int] = Field(default=None, gt=0, description="Days to look ahead")


TOOL_ARGS_SCHEMAS: Dict[CalendarOperation, Type[BaseModel]] = {
    CalendarOperation.CREATE_EVENT: EventMutationRequest,
    CalendarOperation.UPDATE_EVENT: UpdateEventArgs,
    CalendarOperation.DELETE_EVENT: DeleteEventArgs,
    CalendarOperation.LIST_EVENTS: ListEventsArgs,
}

TOOL_DESCRIPTIONS: Dict[CalendarOperation, str] = {
    CalendarOperation.CREATE_EVENT: "Create a new Google Calendar event.",
    CalendarOperation.UPDATE_EVENT: "Update an existing Google Calendar event.",
    CalendarOperation.DELETE_EVENT: "Delete a Google Calendar event.",
    CalendarOperation.LIST_EVENTS: (
        "List or search upcoming calendar events. Use when user asks about schedule."
    ),
}


def _pick(event: CalendarEvent, keys: List[str]) -> Dict[str, Any]:
    payload = event.to_payload()
    return {key: payload.get(key) for key in keys}


class CalendarToolbox:
    """Executes model tool calls against one request's calendar client."""

    def __init__(self, client: GoogleCalendarClient):
        self.client = client
        self._handlers: Dict[CalendarOperation, Callable[[Any], Dict[str, Any]]] = {
            CalendarOperation.CREATE_EVENT: self.create_event,
            CalendarOperation.UPDATE_EVENT: self.update_event,
            CalendarOperation.DELETE_EVENT: self.delete_event,
            CalendarOperation.LIST_EVENTS: self.list_events,
        }

    @staticmethod
    def tool_specs() -> List[Dict[str, Any]]:
        """Function-tool definitions handed to the chat model's bind_tools."""
        specs = []
        for operation in CalendarOperation:
            spec = convert_to_openai_tool(TOOL_ARGS_SCHEMAS[operation])
            spec["function"]["name"] = operation.value
            spec["function"]["description"] = TOOL_DESCRIPTIONS[operation]
            specs.append(spec)
        return specs

    async def execute(self, name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Run one tool call.

        Args:
            name: Tool name chosen by the model
            arguments: Raw arguments produced by the model

        Returns:
            The tool result, or {"success": False, "error": ...} on any failure
        """
        try:
            operation = CalendarOperation(name)
            args = TOOL_ARGS_SCHEMAS[operation].model_validate(arguments or {})
            # The Google client blocks; keep it off the event loop
            return await asyncio.to_thread(self._handlers[operation], args)
        except Exception as e:
            error = ToolExecutionError(name, e)
            logger.warning(f"Tool {name} failed: {error.message}")
            return error.to_result()

    def create_event(self, args: EventMutationRequest) -> Dict[str, Any]:
        event = self.client.create_event(args)
        return {
            "success": True,
            "event": _pick(event, ["id", "summary", "start", "end", "location", "meetLink", "htmlLink"]),
        }

    def update_event(self, args: UpdateEventArgs) -> Dict[str, Any]:
        patch = EventPatch.model_validate(args.model_dump(exclude_unset=True, exclude={"eventId"}))
        event = self.client.update_event(args.eventId, patch)
        return {
            "success": True,
            "event": _pick(event, ["id", "summary", "start", "end", "meetLink"]),
        }

    def delete_event(self, args: DeleteEventArgs) -> Dict[str, Any]:
        self.client.delete_event(args.eventId)
        return {"success": True, "deletedId": args.eventId}

    def list_events(self, args: ListEventsArgs) -> Dict[str, Any]:
        days_ahead = args.daysAhead
        if days_ahead is None:
            days_ahead = CALENDAR_SETTINGS.DEFAULT_DAYS_AHEAD
        events = self.client.list_events(
            query=args.query,
            max_results=ASSISTANT_SETTINGS.LIST_MAX_RESULTS,
            days_ahead=days_ahead,
        )
        preview = ASSISTANT_SETTINGS.LIST_DESCRIPTION_PREVIEW_CHARS
        results = []
        for event in events:
            summary = _pick(event, ["id", "summary", "start", "end", "location", "meetLink"])
            summary["description"] = event.description[:preview] if event.description else None
            results.append(summary)
        return {"events": results}
