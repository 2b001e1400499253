"""
Calendar Assistant Workflow

Streams a single assistant response: the chat model decides which calendar
tools to call, each call is executed in the order emitted and fed back to the
model, and the text plus tool results are yielded as they are produced.
"""

import json
import logging
import uuid
from datetime import datetime
from typing import Any, AsyncIterator, List, Optional

import pytz
from langchain.chat_models import init_chat_model
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

from quickal.assistant.dto import ChatMessage, StreamEvent
from quickal.assistant.prompts import build_system_prompt
from quickal.assistant.tools import CalendarToolbox
from quickal.calendar.utils.datetime_utils import utc_now
from quickal.constants import ASSISTANT_SETTINGS, CALENDAR_TIMEZONE

logger = logging.getLogger(__name__)


def create_chat_model():
    """Create the chat model configured for the assistant."""
    return init_chat_model(
        model=ASSISTANT_SETTINGS.MODEL,
        model_provider=ASSISTANT_SETTINGS.PROVIDER,
        api_key=ASSISTANT_SETTINGS.API_KEY or None,
        temperature=ASSISTANT_SETTINGS.TEMPERATURE,
    )


def to_langchain_messages(messages: List[ChatMessage]) -> List[BaseMessage]:
    """Convert caller history to LangChain messages, skipping turns without text."""
    converted: List[BaseMessage] = []
    for message in messages:
        text = message.text()
        if not text:
            continue
        if message.role == "assistant":
            converted.append(AIMessage(content=text))
        elif message.role == "system":
            converted.append(SystemMessage(content=text))
        else:
            converted.append(HumanMessage(content=text))
    return converted


def _chunk_text(chunk: Any) -> str:
    content = getattr(chunk, "content", "")
    if isinstance(content, str):
        return content
    # Providers such as Anthropic/Gemini stream lists of content blocks
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class CalendarAssistant:
    """Tool-calling calendar assistant, stateless across requests."""

    def __init__(
        self,
        model,
        toolbox: CalendarToolbox,
        max_steps: int = ASSISTANT_SETTINGS.MAX_STEPS,
        timezone: pytz.BaseTzInfo = CALENDAR_TIMEZONE,
    ):
        """
        Initialize the assistant for one request.

        Args:
            model: LangChain chat model supporting bind_tools and astream
            toolbox: Calendar tools bound to the caller's calendar client
            max_steps: Maximum number of model turns per response
            timezone: Reference timezone written into the system prompt
        """
        self.model = model
        self.toolbox = toolbox
        self.max_steps = max_steps
        self.timezone = timezone

    async def stream(
        self,
        messages: List[ChatMessage],
        now: Optional[datetime] = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Produce the assistant response for the supplied conversation.

        Args:
            messages: Full prior conversation supplied by the caller
            now: Reference instant for relative dates; defaults to the current time

        Yields:
            text-delta, tool-call and tool-result events, then a final finish event
        """
        history: List[BaseMessage] = [
            SystemMessage(content=build_system_prompt(now or utc_now(), self.timezone))
        ]
        history.extend(to_langchain_messages(messages))

        bound_model = self.model.bind_tools(self.toolbox.tool_specs())

        steps = 0
        while steps < self.max_steps:
            steps += 1
            gathered = None
            async for chunk in bound_model.astream(history):
                text = _chunk_text(chunk)
                if text:
                    yield StreamEvent("text-delta", {"delta": text})
                gathered = chunk if gathered is None else gathered + chunk

            if gathered is None:
                break

            if getattr(gathered, "invalid_tool_calls", None):
                logger.warning(f"Model emitted malformed tool calls: {gathered.invalid_tool_calls}")

            tool_calls = []
            for call in gathered.tool_calls or []:
                tool_calls.append({**call, "id": call.get("id") or f"call_{uuid.uuid4().hex}"})

            history.append(AIMessage(content=gathered.content, tool_calls=tool_calls))
            if not tool_calls:
                break

            for call in tool_calls:
                yield StreamEvent("tool-call", {
                    "toolCallId": call["id"],
                    "toolName": call["name"],
                    "input": call["args"],
                })
                output = await self.toolbox.execute(call["name"], call["args"])
                history.append(ToolMessage(
                    content=json.dumps(output, default=str),
                    tool_call_id=call["id"],
                ))
                yield StreamEvent("tool-result", {
                    "toolCallId": call["id"],
                    "toolName": call["name"],
                    "output": output,
                })
        else:
            logger.warning(f"Assistant stopped after reaching {self.max_steps} steps")

        yield StreamEvent("finish", {"steps": steps})
