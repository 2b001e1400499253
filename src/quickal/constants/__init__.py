"""
Quickal Constants
"""

import pytz

from quickal.config import settings


class APP_SETTINGS:
    """Application metadata"""
    APP_NAME = "Quickal"
    VERSION = "0.1.0"
    DESCRIPTION = "Google Calendar manager with a natural-language scheduling assistant"


class CALENDAR_SETTINGS:
    """Calendar settings"""
    PRIMARY_CALENDAR_ID = "primary"
    DEFAULT_MAX_RESULTS = 50
    DEFAULT_DAYS_AHEAD = 30
    CONFERENCE_SOLUTION_TYPE = "hangoutsMeet"
    CONFERENCE_REQUEST_PREFIX = "meet"
    VIDEO_ENTRY_POINT_TYPE = "video"


class GOOGLE_CALENDAR_SETTINGS:
    """Google Calendar settings"""
    SCOPES = ["https://www.googleapis.com/auth/calendar"]
    API_VERSION = "v3"


class ASSISTANT_SETTINGS:
    """LLM configuration for the calendar assistant"""
    API_KEY: str = settings.ASSISTANT_LLM_API_KEY
    PROVIDER: str = settings.ASSISTANT_LLM_PROVIDER or "openai"
    MODEL: str = settings.ASSISTANT_LLM_MODEL
    TEMPERATURE: float = settings.ASSISTANT_TEMPERATURE
    MAX_STEPS: int = settings.ASSISTANT_MAX_STEPS
    MAX_DURATION_SECONDS: float = settings.ASSISTANT_MAX_DURATION_SECONDS

    # listEvents tool defaults
    LIST_MAX_RESULTS: int = 20
    LIST_DESCRIPTION_PREVIEW_CHARS: int = 100


# Reference timezone
CALENDAR_TIMEZONE = pytz.timezone(settings.CALENDAR_TIMEZONE)
