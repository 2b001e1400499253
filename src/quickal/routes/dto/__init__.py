"""
Routes Data Transfer Objects (DTOs)

This module contains all Pydantic models used by API routes:
- Response envelopes for the calendar endpoints
- Request model for the assistant endpoint
- Health check response models
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from quickal.assistant.dto import ChatMessage


class EventListResponse(BaseModel):
    """Response model for listing events."""
    events: List[Dict[str, Any]]


class EventResponse(BaseModel):
    """Response model for a created or updated event."""
    event: Dict[str, Any]


class DeleteResponse(BaseModel):
    success: bool


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing calendar endpoint."""
    error: str


class ChatRequest(BaseModel):
    """Request model for the assistant endpoint."""
    messages: List[ChatMessage]


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: Optional[str] = None
    components: Optional[Dict[str, str]] = None
