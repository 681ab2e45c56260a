"""
Per-route protection for FastAPI.

Just use: `principal: Principal = Depends(require("admin"))`

Design:
- `require()` returns a FastAPI dependency resolving to the Principal
  the middleware attached to the request
- Denials raise Unauthenticated / Unauthorized; install_access_control()
  maps them to the configured callbacks (401 / 403 otherwise)
- These work with or without global protection
"""

from __future__ import annotations

from typing import Any, Callable

from fastapi import HTTPException, Request

from roleguard.auth.gates import Gate, GateSequence, Outcome, require_login, require_roles, secure
from roleguard.auth.principal import Principal
from roleguard.config import get_settings
from roleguard.core.errors import PrincipalMissing


class Unauthenticated(HTTPException):
    """The route needs a logged-in principal."""
    
    def __init__(self):
        super().__init__(status_code=401, detail="Authentication required")


class Unauthorized(HTTPException):
    """The principal does not match the route's role requirement."""
    
    def __init__(self):
        super().__init__(status_code=403, detail="Forbidden")


def _req_key(request: Request) -> str:
    # Recorded by the guard chain; app state covers requests it never saw
    config = getattr(request.state, "access_control", None)
    if config is None:
        app = request.scope.get("app")
        config = getattr(getattr(app, "state", None), "access_control", None)
    return config.req_key if config is not None else get_settings().req_key


def find_principal(request: Request) -> Principal | None:
    """The principal attached to the request, if any."""
    return getattr(request.state, _req_key(request), None)


def get_principal(request: Request) -> Principal:
    """
    The principal attached to the request.
    
    Usage:
        async def route(principal: Principal = Depends(get_principal)): ...
    
    Raises:
        PrincipalMissing: if no credentials were loaded for the request
    """
    principal = find_principal(request)
    if principal is None:
        raise PrincipalMissing(f"No principal attached to request for {request.url.path}")
    return principal


# =============================================================================
# Main Interface
# =============================================================================


def require(requirement: Any) -> Callable:
    """
    Protect a route.
    
    Usage:
        @app.get("/account", dependencies=[Depends(require(True))])
        @app.get("/admin", dependencies=[Depends(require("admin"))])
        @app.get("/moderation", dependencies=[Depends(require([["admin", "moderator"]]))])
    
    Args:
        requirement: True for login only, a role expression for roles,
            anything falsy for no check
    """
    return _create_dependency(secure(requirement))


def require_auth() -> Callable:
    """Just require a logged-in principal."""
    return _create_dependency(require_login())


def require_role(requirement: Any) -> Callable:
    """Require a role expression, whatever the login state."""
    return _create_dependency(require_roles(requirement))


# =============================================================================
# Internal: Create the FastAPI Dependency
# =============================================================================


def _create_dependency(gate: Gate | GateSequence) -> Callable:
    """Create a FastAPI dependency from a gate."""
    
    async def dependency(request: Request) -> Principal | None:
        principal = find_principal(request)
        outcome = gate.check(principal)
        if outcome is Outcome.UNAUTHENTICATED:
            raise Unauthenticated()
        if outcome is Outcome.UNAUTHORIZED:
            raise Unauthorized()
        return principal
    
    return dependency
