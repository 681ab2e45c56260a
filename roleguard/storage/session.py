"""
Session-backed credential storage.

Credentials live under one key of the request session, which requires
Starlette's SessionMiddleware (or anything else populating
scope["session"]). Without a session nothing is loaded or saved.
"""

from __future__ import annotations

from typing import Any

from roleguard.config import get_settings
from roleguard.storage.base import CredentialStore, Credentials


def _get_session(request: Any) -> dict[str, Any] | None:
    return request.scope.get("session")


class SessionCredentialStore(CredentialStore):
    """Store credentials in the request session."""
    
    def __init__(self, session_key: str | None = None):
        self.session_key = session_key or get_settings().session_key
    
    async def retrieve(self, request: Any) -> tuple[bool, list[str] | None]:
        session = _get_session(request)
        if session is None:
            return False, None
        
        data = session.get(self.session_key)
        credentials = Credentials.model_validate(data) if data else Credentials()
        return credentials.logged_in, credentials.roles
    
    async def save(self, request: Any, logged_in: bool, roles: list[str]) -> None:
        session = _get_session(request)
        if session is None:
            return
        
        credentials = Credentials(logged_in=logged_in, roles=list(roles))
        session[self.session_key] = credentials.model_dump()
