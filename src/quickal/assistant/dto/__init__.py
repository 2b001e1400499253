"""
Assistant Data Transfer Objects (DTOs)

This module contains the data models used by the calendar assistant:
- Incoming chat messages (plain content or UI-style text parts)
- Stream events forwarded to the caller as Server-Sent Events
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel


class MessagePart(BaseModel):
    type: str
    text: Optional[str] = None


class ChatMessage(BaseModel):
    """One turn of the conversation history supplied by the caller."""
    role: Literal["user", "assistant", "system"]
    content: Optional[str] = None
    parts: Optional[List[MessagePart]] = None

    def text(self) -> str:
        if self.content is not None:
            return self.content
        return "".join(part.text or "" for part in self.parts or [] if part.type == "text")


@dataclass
class StreamEvent:
    """A single event of the assistant response stream."""
    type: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_sse(self) -> str:
        return f"event: {self.type}\ndata: {json.dumps(self.data, default=str)}\n\n"
