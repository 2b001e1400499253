"""Shared fixtures: an in-memory Google Calendar service and a scripted chat model."""

from __future__ import annotations

import asyncio
import copy
import json
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

import httplib2
import httpx
import pytest
from googleapiclient.errors import HttpError
from langchain_core.messages import AIMessageChunk
from langchain_core.messages.tool import tool_call_chunk

from quickal.auth import Session
from quickal.calendar.calendar_client import GoogleCalendarClient
from quickal.main import create_app
from quickal.routes.deps import get_calendar_client, get_chat_model, get_reference_time

AUTH_HEADERS = {"Authorization": "Bearer test-access-token"}


# ---------------------------------------------------------------------------
# Fake Google Calendar v3 service
# ---------------------------------------------------------------------------


def make_http_error(status: int, message: str) -> HttpError:
    resp = httplib2.Response({"status": status})
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content)


class _PendingRequest:
    def __init__(self, run: Callable[[], Any]):
        self._run = run

    def execute(self) -> Any:
        return self._run()


def _start_key(event: dict) -> datetime:
    start = event.get("start", {})
    value = start.get("dateTime") or f"{start.get('date')}T00:00:00+00:00"
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class FakeEventsResource:
    """Mimics ``service.events()`` backed by a dict of stored events."""

    def __init__(self, service: FakeCalendarService):
        self._service = service

    def _request(self, method: str, params: dict, run: Callable[[], Any]) -> _PendingRequest:
        def execute():
            self._service.calls.append((method, copy.deepcopy(params)))
            if self._service.fail_next is not None:
                error, self._service.fail_next = self._service.fail_next, None
                raise error
            return run()

        return _PendingRequest(execute)

    def list(self, **params):
        def run():
            time_min = datetime.fromisoformat(params["timeMin"])
            time_max = datetime.fromisoformat(params["timeMax"])
            items = [
                copy.deepcopy(event)
                for event in self._service.store.values()
                if time_min <= _start_key(event) <= time_max
            ]
            if params.get("q"):
                items = [e for e in items if params["q"].lower() in e.get("summary", "").lower()]
            items.sort(key=_start_key)
            return {"items": items[: params.get("maxResults", 250)]}

        return self._request("list", params, run)

    def get(self, **params):
        def run():
            event = self._service.store.get(params["eventId"])
            if event is None:
                raise make_http_error(404, "Not Found")
            return copy.deepcopy(event)

        return self._request("get", params, run)

    def insert(self, **params):
        def run():
            event = copy.deepcopy(params["body"])
            event["id"] = f"evt-{len(self._service.store) + 1}"
            event["htmlLink"] = f"https://calendar.google.com/event?eid={event['id']}"
            event["status"] = "confirmed"
            self._service.provision_conference(event, params.get("conferenceDataVersion", 0))
            self._service.store[event["id"]] = event
            return copy.deepcopy(event)

        return self._request("insert", params, run)

    def update(self, **params):
        def run():
            event_id = params["eventId"]
            stored = self._service.store.get(event_id)
            if stored is None:
                raise make_http_error(404, "Not Found")
            event = copy.deepcopy(params["body"])
            event["id"] = event_id
            version = params.get("conferenceDataVersion", 0)
            if version == 1:
                self._service.provision_conference(event, version)
            elif stored.get("conferenceData"):
                event["conferenceData"] = stored["conferenceData"]
            self._service.store[event_id] = event
            return copy.deepcopy(event)

        return self._request("update", params, run)

    def delete(self, **params):
        def run():
            if self._service.store.pop(params["eventId"], None) is None:
                raise make_http_error(410, "Resource has been deleted")
            return ""

        return self._request("delete", params, run)


class FakeCalendarService:
    """In-memory stand-in for the object returned by ``googleapiclient.discovery.build``."""

    def __init__(self):
        self.store: dict[str, dict] = {}
        self.calls: list[tuple[str, dict]] = []
        self.fail_next: Exception | None = None

    def events(self) -> FakeEventsResource:
        return FakeEventsResource(self)

    def calls_for(self, method: str) -> list[dict]:
        return [params for name, params in self.calls if name == method]

    def add_event(self, event_id: str, **fields) -> dict:
        event = {"id": event_id, "status": "confirmed", **fields}
        self.store[event_id] = event
        return event

    @staticmethod
    def provision_conference(event: dict, version: int) -> None:
        create_request = (event.get("conferenceData") or {}).get("createRequest")
        if version != 1 or not create_request:
            return
        code = uuid.uuid4().hex[:10]
        event["conferenceData"] = {
            "conferenceId": code,
            "createRequest": {**create_request, "status": {"statusCode": "success"}},
            "entryPoints": [
                {"entryPointType": "video", "uri": f"https://meet.google.com/{code}", "label": code},
                {"entryPointType": "more", "uri": "https://tel.meet/more"},
            ],
        }


@pytest.fixture
def calendar_service() -> FakeCalendarService:
    return FakeCalendarService()


@pytest.fixture
def calendar_client(calendar_service: FakeCalendarService) -> GoogleCalendarClient:
    return GoogleCalendarClient(
        Session(access_token="test-access-token"),
        service=calendar_service,
        timezone_name="Europe/Madrid",
    )


# ---------------------------------------------------------------------------
# Scripted chat model
# ---------------------------------------------------------------------------


def text_turn(text: str) -> list[AIMessageChunk]:
    """A model turn that only streams text, word by word."""
    words = text.split(" ")
    return [
        AIMessageChunk(content=word if i == len(words) - 1 else f"{word} ")
        for i, word in enumerate(words)
    ]


def tool_turn(*calls: tuple[str, dict], text: str = "") -> list[AIMessageChunk]:
    """A model turn that emits one or more tool calls, optionally preceded by text."""
    chunks = text_turn(text) if text else []
    for index, (name, args) in enumerate(calls):
        chunks.append(
            AIMessageChunk(
                content="",
                tool_call_chunks=[
                    tool_call_chunk(
                        name=name,
                        args=json.dumps(args),
                        id=f"call_{index}_{name}",
                        index=index,
                    )
                ],
            )
        )
    return chunks


class ScriptedChatModel:
    """Replays pre-recorded turns and records every conversation it receives."""

    def __init__(self, turns: list[list[AIMessageChunk]] | None = None, delay: float = 0.0):
        self.turns = list(turns or [])
        self.delay = delay
        self.calls: list[list[Any]] = []
        self.bound_tools: list[dict] | None = None

    def bind_tools(self, tools, **kwargs):
        self.bound_tools = tools
        return self

    async def astream(self, messages, **kwargs):
        self.calls.append(list(messages))
        if self.delay:
            await asyncio.sleep(self.delay)
        turn = self.turns.pop(0) if self.turns else text_turn("Anything else?")
        for chunk in turn:
            yield chunk


# ---------------------------------------------------------------------------
# HTTP app
# ---------------------------------------------------------------------------


@pytest.fixture
def chat_model() -> ScriptedChatModel:
    return ScriptedChatModel()


@pytest.fixture
def app(calendar_client, chat_model):
    application = create_app()
    application.dependency_overrides[get_calendar_client] = lambda: calendar_client
    application.dependency_overrides[get_chat_model] = lambda: chat_model
    application.dependency_overrides[get_reference_time] = lambda: datetime.fromisoformat(
        "2024-06-10T08:00:00+00:00"
    )
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def http_client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


def parse_sse(body: str) -> list[tuple[str, dict]]:
    events = []
    for block in body.strip().split("\n\n"):
        event_type, data = None, {}
        for line in block.splitlines():
            if line.startswith("event: "):
                event_type = line[len("event: "):]
            elif line.startswith("data: "):
                data = json.loads(line[len("data: "):])
        if event_type:
            events.append((event_type, data))
    return events
