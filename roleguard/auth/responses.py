"""
Default responses for denied requests.

Hosts usually replace these through the unauthorized / unauthenticated
options; they exist so that the middleware works out of the box.
"""

from __future__ import annotations

from html import escape

from fastapi import Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response


def forbidden(request: Request) -> Response:
    """Called when the principal does not match the required roles."""
    return PlainTextResponse("Forbidden", status_code=403)


def login_url(request: Request, login_path: str) -> str:
    """Make login_path absolute unless it already is."""
    if "://" in login_path:
        return login_path
    host = request.headers.get("host") or request.url.netloc
    return f"{request.url.scheme}://{host}{login_path}"


def redirect_to_login(request: Request, login_path: str = "/login") -> Response:
    """Called when the principal is not logged in."""
    url = login_url(request, login_path)
    return HTMLResponse(
        f'<p>Redirecting to <a href="{escape(url)}">{escape(url)}</a></p>',
        status_code=302,
        headers={"Location": url},
    )
