"""
Request-scoped dependencies shared by the calendar and assistant routes.
"""

from datetime import datetime

from fastapi import Depends

from quickal.assistant.workflow import create_chat_model
from quickal.auth import Session, require_session
from quickal.calendar.calendar_client import GoogleCalendarClient
from quickal.calendar.utils.datetime_utils import utc_now


def get_calendar_client(session: Session = Depends(require_session)) -> GoogleCalendarClient:
    return GoogleCalendarClient(session)


def get_chat_model():
    return create_chat_model()


def get_reference_time() -> datetime:
    return utc_now()
