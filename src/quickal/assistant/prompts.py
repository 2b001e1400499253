"""
Calendar Assistant Prompts

This module contains the system prompt used by the calendar assistant.
The reference instant is always passed in explicitly so the prompt can be
rebuilt for any fixed date.
"""

from datetime import datetime

import pytz

from quickal.calendar.utils.datetime_utils import describe_reference_now
from quickal.constants import APP_SETTINGS, CALENDAR_TIMEZONE

CALENDAR_ASSISTANT_PROMPT = """You are the assistant of {app_name}, a smart calendar app.
You help the user manage their Google Calendar using natural language (Spanish or English).

Today: {date}. Time: {time}. Zone: {timezone}.

Rules:
- Extract all the information you can from the user's message.
- If the date or the time is missing, ask for it instead of guessing.
- Use ISO 8601 for dates and times. When the user says "tomorrow", "on Monday", "next Monday", etc., compute the date from today's date above.
- Only set addMeet: true when the user asks for a video call or Google Meet.
- To update or delete an event you need its id: call listEvents first if you do not have it.
- Be concise. Confirm every action with a brief summary.
- If the user only greets you, reply briefly and ask how you can help.
- Reply in the language the user writes in."""


def build_system_prompt(now: datetime, timezone: pytz.BaseTzInfo = CALENDAR_TIMEZONE) -> str:
    """
    Build the assistant system prompt for a given reference instant.

    Args:
        now: Current instant (naive values are treated as UTC)
        timezone: Reference timezone shown to the model

    Returns:
        Prompt text with today's date, the local time and the zone name
    """
    date_text, time_text = describe_reference_now(now, timezone)
    return CALENDAR_ASSISTANT_PROMPT.format(
        app_name=APP_SETTINGS.APP_NAME,
        date=date_text,
        time=time_text,
        timezone=timezone.zone,
    )
