"""
Google Calendar Client
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from quickal.auth import Session
from quickal.calendar.dto import CalendarEvent, EventMutationRequest, EventPatch
from quickal.calendar.utils.datetime_utils import lookahead_window, zoned_event_time
from quickal.config import settings
from quickal.constants import CALENDAR_SETTINGS, GOOGLE_CALENDAR_SETTINGS
from quickal.errors import AuthError, NotFoundError, UpstreamError

# Set up logging
logger = logging.getLogger(__name__)


class GoogleCalendarClient:
    """
    Event repository backed by the user's primary Google Calendar.

    One instance is built per request from the caller's session. Every
    method is a blocking network call; Google errors are translated into
    AuthError, NotFoundError or UpstreamError.
    """

    def __init__(
        self,
        session: Optional[Session],
        service: Any = None,
        timezone_name: str = settings.CALENDAR_TIMEZONE,
    ):
        """
        Initialize the Google Calendar client.

        Args:
            session: Caller session holding the Google access token
            service: Pre-built Calendar v3 service; built from the session when omitted
            timezone_name: Reference zone attached to written start/end times
        """
        if session is None or not session.access_token:
            raise AuthError()

        self.session = session
        self.timezone_name = timezone_name
        self.calendar_id = CALENDAR_SETTINGS.PRIMARY_CALENDAR_ID
        self.service = service if service is not None else self._build_service()

    def _build_service(self):
        creds = Credentials(
            token=self.session.access_token,
            scopes=GOOGLE_CALENDAR_SETTINGS.SCOPES,
        )
        return build(
            "calendar",
            GOOGLE_CALENDAR_SETTINGS.API_VERSION,
            credentials=creds,
            cache_discovery=False,
        )

    def _execute(self, request, operation: str) -> Any:
        try:
            return request.execute()
        except HttpError as e:
            raise self._translate_http_error(e, operation) from e
        except RefreshError as e:
            logger.error(f"Google credentials rejected during {operation}: {e}")
            raise AuthError(f"Google credentials rejected: {e}") from e

    @staticmethod
    def _translate_http_error(error: HttpError, operation: str) -> Exception:
        status = getattr(error.resp, "status", None)
        try:
            status = int(status) if status is not None else None
        except (TypeError, ValueError):
            status = None
        reason = getattr(error, "reason", None) or str(error)

        logger.error("Google Calendar %s failed (status=%s): %s", operation, status, reason)

        if status in (404, 410):
            return NotFoundError(reason, status)
        if status == 401:
            return AuthError(reason)
        return UpstreamError(reason, status)

    @staticmethod
    def _conference_create_request() -> Dict[str, Any]:
        # Fresh id per call; Google deduplicates conference creation on it
        request_id = f"{CALENDAR_SETTINGS.CONFERENCE_REQUEST_PREFIX}-{uuid.uuid4().hex}"
        return {
            "requestId": request_id,
            "conferenceSolutionKey": {"type": CALENDAR_SETTINGS.CONFERENCE_SOLUTION_TYPE},
        }

    def list_events(
        self,
        query: Optional[str] = None,
        max_results: int = CALENDAR_SETTINGS.DEFAULT_MAX_RESULTS,
        days_ahead: int = CALENDAR_SETTINGS.DEFAULT_DAYS_AHEAD,
        now: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        """
        Retrieve upcoming events, recurring events expanded to single instances.

        Args:
            query: Optional free-text filter
            max_results: Maximum number of events returned
            days_ahead: Size of the lookahead window in days
            now: Window start; defaults to the current time

        Returns:
            Events starting in [now, now + days_ahead], ordered by start time
        """
        if max_results <= 0:
            raise ValueError("max_results must be a positive integer")
        if days_ahead <= 0:
            raise ValueError("days_ahead must be a positive integer")

        time_min, time_max = lookahead_window(days_ahead, now)

        params = {
            "calendarId": self.calendar_id,
            "timeMin": time_min,
            "timeMax": time_max,
            "maxResults": max_results,
            "singleEvents": True,
            "orderBy": "startTime",
        }
        if query:
            params["q"] = query

        events_result = self._execute(self.service.events().list(**params), "list")
        return [CalendarEvent.from_google(event) for event in events_result.get("items", [])]

    def create_event(self, request: EventMutationRequest) -> CalendarEvent:
        """
        Create an event anchored to the reference time zone.

        Args:
            request: Event fields; addMeet attaches a Google Meet creation request

        Returns:
            The created event, including any assigned Meet link and permalink
        """
        event_body: Dict[str, Any] = {
            "summary": request.summary,
            "start": zoned_event_time(request.startDateTime, self.timezone_name),
            "end": zoned_event_time(request.endDateTime, self.timezone_name),
        }
        if request.description is not None:
            event_body["description"] = request.description
        if request.location is not None:
            event_body["location"] = request.location
        if request.attendees:
            event_body["attendees"] = [{"email": email} for email in request.attendees]

        params: Dict[str, Any] = {"calendarId": self.calendar_id, "body": event_body}

        if request.addMeet:
            event_body["conferenceData"] = {"createRequest": self._conference_create_request()}
            params["conferenceDataVersion"] = 1

        created = self._execute(self.service.events().insert(**params), "create")
        logger.info(f"Created event {created.get('id')} (meet={bool(request.addMeet)})")
        return CalendarEvent.from_google(created)

    def _get_raw(self, event_id: str) -> Dict[str, Any]:
        return self._execute(
            self.service.events().get(calendarId=self.calendar_id, eventId=event_id),
            "get",
        )

    def get_event(self, event_id: str) -> CalendarEvent:
        return CalendarEvent.from_google(self._get_raw(event_id))

    def update_event(self, event_id: str, patch: EventPatch) -> CalendarEvent:
        """
        Apply a partial update by fetching the stored event and writing it back merged.

        The Calendar API update call replaces the whole resource, so only
        fields present in the patch are overlaid on the stored representation.

        Args:
            event_id: Id of the event to update
            patch: Fields to change

        Returns:
            The updated event
        """
        existing = self._get_raw(event_id)
        fields = patch.supplied_fields()

        event_body = dict(existing)
        for key in ("summary", "description", "location"):
            if key in fields:
                event_body[key] = fields[key]

        if fields.get("startDateTime"):
            event_body["start"] = zoned_event_time(fields["startDateTime"], self.timezone_name)
        if fields.get("endDateTime"):
            event_body["end"] = zoned_event_time(fields["endDateTime"], self.timezone_name)
        if fields.get("attendees"):
            event_body["attendees"] = [{"email": email} for email in fields["attendees"]]

        params: Dict[str, Any] = {
            "calendarId": self.calendar_id,
            "eventId": event_id,
            "body": event_body,
        }

        # Never attach a second conference to an event that already has one
        if fields.get("addMeet") and not existing.get("conferenceData"):
            event_body["conferenceData"] = {"createRequest": self._conference_create_request()}
            params["conferenceDataVersion"] = 1

        updated = self._execute(self.service.events().update(**params), "update")
        logger.info(f"Updated event {event_id} fields={sorted(fields)}")
        return CalendarEvent.from_google(updated)

    def delete_event(self, event_id: str) -> None:
        self._execute(
            self.service.events().delete(calendarId=self.calendar_id, eventId=event_id),
            "delete",
        )
        logger.info(f"Deleted event {event_id}")
