"""
Calendar error taxonomy shared by the adapter, the HTTP handlers and the
assistant tools.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError


class CalendarError(Exception):
    """Base class for every calendar failure surfaced by Quickal."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(CalendarError):
    """No valid session; surfaced as 401 before any remote call."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class UpstreamError(CalendarError):
    """Google Calendar rejected or failed a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(UpstreamError):
    """The targeted event id does not resolve upstream."""

    def __init__(self, message: str = "Event not found", status_code: Optional[int] = 404):
        super().__init__(message, status_code)


def _summarize_validation_error(operation: str, error: ValidationError) -> str:
    """One line per invalid field, e.g. 'summary: Field required'."""
    problems = []
    for detail in error.errors(include_url=False):
        field = ".".join(str(part) for part in detail["loc"]) or "arguments"
        problems.append(f"{field}: {detail['msg']}")
    return f"Invalid arguments for {operation}: " + "; ".join(problems)


class ToolExecutionError(CalendarError):
    """
    A conversational tool invocation failed.

    Never raised to the caller of the assistant: it is folded into the
    model-visible tool result so the assistant can narrate the failure.
    """

    def __init__(self, operation: str, cause: BaseException):
        if isinstance(cause, ValidationError):
            message = _summarize_validation_error(operation, cause)
        else:
            message = getattr(cause, "message", None) or str(cause) or cause.__class__.__name__
        super().__init__(message)
        self.operation = operation
        self.cause = cause

    def to_result(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}
