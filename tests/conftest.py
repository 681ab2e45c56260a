"""Shared fixtures for the roleguard tests."""

from __future__ import annotations

from typing import Any

import pytest
from starlette.requests import Request

from roleguard.auth.principal import Principal, PrincipalContext


def make_request(
    path: str = "/",
    session: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    scheme: str = "http",
) -> Request:
    """A bare Starlette request, without any app around it."""
    raw_headers = [(b"host", b"testserver")]
    for key, value in (headers or {}).items():
        raw_headers.append((key.lower().encode(), value.encode()))
    
    scope: dict[str, Any] = {
        "type": "http",
        "method": "GET",
        "scheme": scheme,
        "path": path,
        "query_string": b"",
        "headers": raw_headers,
    }
    if session is not None:
        scope["session"] = session
    return Request(scope)


class SaveRecorder:
    """save() hook that remembers what it was asked to persist."""
    
    def __init__(self):
        self.calls: list[tuple[bool, list[str]]] = []
    
    async def __call__(self, request, logged_in, roles):
        self.calls.append((logged_in, list(roles)))


@pytest.fixture
def request_():
    return make_request()


@pytest.fixture
def saved():
    return SaveRecorder()


@pytest.fixture
def make_principal(request_, saved):
    """Build principals bound to a recording save hook."""
    
    def factory(
        roles=(),
        logged_in: bool = True,
        super_admin=("superadmin",),
        initialize=lambda request: None,
    ) -> Principal:
        return Principal(
            logged_in,
            list(roles),
            PrincipalContext(
                request=request_,
                super_admin=super_admin,
                save=saved,
                initialize=initialize,
            ),
        )
    
    return factory
