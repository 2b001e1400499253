"""
Request-scoped session extracted from the identity provider's bearer token.

Quickal never issues or refreshes tokens; it only forwards the caller's
access token to Google for the lifetime of one request.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from quickal.errors import AuthError

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Session:
    access_token: str

    def __repr__(self) -> str:
        return "Session(access_token=***)"


def require_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Session:
    """Resolve the caller's session or fail with AuthError (401)."""
    if credentials is None or not credentials.credentials.strip():
        raise AuthError()
    return Session(access_token=credentials.credentials.strip())
