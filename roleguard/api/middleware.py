"""
Starlette / FastAPI integration.

    app = FastAPI()
    install_access_control(
        app,
        secured_paths=[re.compile(r"^/admin")],
        required_roles="admin",
    )
    app.add_middleware(SessionMiddleware, secret_key="...")  # outermost

The session middleware has to wrap the access control middleware when
the default session-backed store is used, so add it afterwards.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from roleguard.auth.dependencies import Unauthenticated, Unauthorized
from roleguard.auth.gates import Outcome
from roleguard.auth.guard import GuardChain, GuardConfig, respond


class AccessControlMiddleware(BaseHTTPMiddleware):
    """Run every request through a guard chain."""
    
    def __init__(self, app: ASGIApp, config: GuardConfig | None = None, **options: Any):
        super().__init__(app)
        self.chain = GuardChain(config or GuardConfig.create(**options))
    
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        return await self.chain(request, call_next)


def install_access_control(app: FastAPI, config: GuardConfig | None = None, **options: Any) -> GuardConfig:
    """
    Add global protection and route denials to the configured callbacks.
    
    Returns the resolved configuration, also stored on
    app.state.access_control.
    """
    config = config or GuardConfig.create(**options)
    app.state.access_control = config
    app.add_middleware(AccessControlMiddleware, config=config)
    
    async def on_unauthenticated(request: Request, exc: Unauthenticated) -> Response:
        return await respond(config, request, Outcome.UNAUTHENTICATED)
    
    async def on_unauthorized(request: Request, exc: Unauthorized) -> Response:
        return await respond(config, request, Outcome.UNAUTHORIZED)
    
    app.add_exception_handler(Unauthenticated, on_unauthenticated)
    app.add_exception_handler(Unauthorized, on_unauthorized)
    return config
