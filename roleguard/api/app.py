"""
Sample FastAPI application protected by roleguard.

Credentials live in a signed cookie session. Visit /add/admin to log in
with the admin role, /remove/admin to drop it, and the /test-* routes to
see the gates at work.

Run with: uvicorn roleguard.api.app:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from roleguard.api.middleware import install_access_control
from roleguard.auth import Principal, get_principal, require
from roleguard.config import get_settings

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    logger.info(f"roleguard sample starting in {settings.environment} mode")
    
    yield
    
    logger.info("roleguard sample shutting down")


# =============================================================================
# App Setup
# =============================================================================


def create_app() -> FastAPI:
    settings = get_settings()
    
    app = FastAPI(
        title="roleguard sample",
        description="Role based access control demo",
        version="0.1.0",
        lifespan=lifespan,
    )
    
    install_access_control(app)
    # Added last so that it wraps access control
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)
    
    # =========================================================================
    # Credentials
    # =========================================================================
    
    @app.get("/add/{credential}")
    async def add_credential(credential: str, principal: Principal = Depends(get_principal)):
        """Grant a role, logging in if needed."""
        await principal.grant(credential)
        if not principal.is_logged_in():
            await principal.login()
        return RedirectResponse("/", status_code=302)
    
    @app.get("/remove/{credential}")
    async def remove_credential(credential: str, principal: Principal = Depends(get_principal)):
        """Revoke a role, logging out once none are left."""
        await principal.revoke(credential)
        if not principal.get_roles():
            await principal.logout()
        return RedirectResponse("/", status_code=302)
    
    @app.get("/logout")
    async def logout(principal: Principal = Depends(get_principal)):
        await principal.logout()
        return RedirectResponse("/", status_code=302)
    
    @app.get("/login", response_class=PlainTextResponse)
    async def login_form():
        return "Visit /add/<role> to log in"
    
    # =========================================================================
    # Access tests
    # =========================================================================
    
    @app.get("/test-public", response_class=PlainTextResponse, dependencies=[Depends(require(False))])
    async def test_public():
        return "yes"
    
    @app.get("/test-private", response_class=PlainTextResponse, dependencies=[Depends(require(True))])
    async def test_private():
        return "yes"
    
    @app.get("/test-admin", response_class=PlainTextResponse, dependencies=[Depends(require("admin"))])
    async def test_admin():
        return "yes"
    
    @app.get("/test-moderator", response_class=PlainTextResponse, dependencies=[Depends(require(["moderator"]))])
    async def test_moderator():
        return "yes"
    
    # =========================================================================
    # Home
    # =========================================================================
    
    @app.get("/")
    async def home(principal: Principal = Depends(get_principal)):
        return {
            "title": "Sample for roleguard",
            "logged_in": principal.is_logged_in(),
            "roles": principal.get_roles(),
            "super_admin": principal.is_super_admin(),
        }
    
    return app


app = create_app()
