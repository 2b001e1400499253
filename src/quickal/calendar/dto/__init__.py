"""
Calendar Data Models

CalendarEvent mirrors the Google Calendar event resource closely enough to be
returned to clients as-is (camelCase keys), while EventMutationRequest and
EventPatch are the transient inputs consumed once by the adapter.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from quickal.constants import CALENDAR_SETTINGS


class EventTime(BaseModel):
    """Start or end of an event: a zoned timestamp or an all-day date."""
    model_config = ConfigDict(populate_by_name=True)

    date_time: Optional[str] = Field(default=None, alias="dateTime")
    date: Optional[str] = None
    time_zone: Optional[str] = Field(default=None, alias="timeZone")


class EntryPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entry_point_type: Optional[str] = Field(default=None, alias="entryPointType")
    uri: Optional[str] = None
    label: Optional[str] = None


class ConferenceData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conference_id: Optional[str] = Field(default=None, alias="conferenceId")
    entry_points: List[EntryPoint] = Field(default_factory=list, alias="entryPoints")


class CalendarEvent(BaseModel):
    """A single Google Calendar event as seen by Quickal."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    summary: str
    description: Optional[str] = None
    location: Optional[str] = None
    start: Optional[EventTime] = None
    end: Optional[EventTime] = None
    attendees: List[str] = Field(default_factory=list)
    conference_data: Optional[ConferenceData] = Field(default=None, alias="conferenceData")
    html_link: Optional[str] = Field(default=None, alias="htmlLink")
    status: Optional[str] = "confirmed"

    @computed_field(alias="meetLink")
    @property
    def meet_link(self) -> Optional[str]:
        """Join URL of the first video entry point, if any."""
        if not self.conference_data:
            return None
        for entry_point in self.conference_data.entry_points:
            if entry_point.entry_point_type == CALENDAR_SETTINGS.VIDEO_ENTRY_POINT_TYPE:
                return entry_point.uri
        return None

    @classmethod
    def from_google(cls, google_event: Dict[str, Any]) -> "CalendarEvent":
        """
        Convert a raw Google Calendar event resource.

        Args:
            google_event: Event dict as returned by the Calendar v3 API

        Returns:
            CalendarEvent with attendees flattened to their email addresses
        """
        attendees = []
        for attendee in google_event.get("attendees") or []:
            email = attendee.get("email")
            if email:
                attendees.append(email)

        conference_data = google_event.get("conferenceData")

        return cls(
            id=google_event.get("id", ""),
            summary=google_event.get("summary") or "Untitled Event",
            description=google_event.get("description"),
            location=google_event.get("location"),
            start=EventTime.model_validate(google_event["start"]) if google_event.get("start") else None,
            end=EventTime.model_validate(google_event["end"]) if google_event.get("end") else None,
            attendees=attendees,
            conference_data=ConferenceData.model_validate(conference_data) if conference_data else None,
            html_link=google_event.get("htmlLink"),
            status=google_event.get("status", "confirmed"),
        )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class EventMutationRequest(BaseModel):
    """
    Fields for a new event.

    Field names are the wire names used by both the HTTP form body and the
    createEvent tool, so the same model validates either source.
    """
    summary: str = Field(description="Event title")
    description: Optional[str] = Field(default=None, description="Event description")
    location: Optional[str] = Field(default=None, description="Event location")
    startDateTime: str = Field(description="Start in ISO 8601")
    endDateTime: str = Field(description="End in ISO 8601")
    addMeet: Optional[bool] = Field(default=None, description="Add Google Meet call")
    attendees: Optional[List[str]] = Field(default=None, description="Attendee emails")


class EventPatch(BaseModel):
    """Partial update; only fields present in the input are applied."""
    summary: Optional[str] = Field(default=None, description="New title")
    description: Optional[str] = Field(default=None, description="New description")
    location: Optional[str] = Field(default=None, description="New location")
    startDateTime: Optional[str] = Field(default=None, description="New start ISO 8601")
    endDateTime: Optional[str] = Field(default=None, description="New end ISO 8601")
    addMeet: Optional[bool] = Field(default=None, description="Add Google Meet")
    attendees: Optional[List[str]] = Field(default=None, description="Updated emails")

    def supplied_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)
