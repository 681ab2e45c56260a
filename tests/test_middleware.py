"""
End-to-end tests through FastAPI.

Uses TestClient, so requests go through the real middleware stack.
"""

import pytest
from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from roleguard.api.app import create_app
from roleguard.api.middleware import AccessControlMiddleware, install_access_control
from roleguard.auth import Principal, get_principal, require, require_auth, require_role
from roleguard.core.errors import InvalidPrincipalContext, PrincipalMissing


def header_retrieve(request):
    raw = request.headers.get("x-roles")
    if raw is None:
        return False, None
    return request.headers.get("x-logged-in") == "1", [r for r in raw.split(",") if r]


def noop_save(request, logged_in, roles):
    pass


def build_app(**options) -> FastAPI:
    options.setdefault("retrieve", header_retrieve)
    options.setdefault("save", noop_save)
    
    app = FastAPI()
    install_access_control(app, **options)
    
    @app.get("/admin", response_class=PlainTextResponse)
    async def admin():
        return "admin"
    
    @app.get("/public", response_class=PlainTextResponse)
    async def public():
        return "public"
    
    @app.get("/account", response_class=PlainTextResponse, dependencies=[Depends(require_auth())])
    async def account():
        return "account"
    
    @app.get("/moderation", response_class=PlainTextResponse, dependencies=[Depends(require_role([["admin", "moderator"]]))])
    async def moderation():
        return "moderation"
    
    @app.get("/whoami")
    async def whoami(principal: Principal = Depends(get_principal)):
        return {"roles": principal.get_roles()}
    
    return app


# =============================================================================
# Global protection
# =============================================================================


class TestGlobalProtection:
    @pytest.fixture
    def client(self):
        app = build_app(secured_paths=["/admin"], required_roles="admin", super_admin=["root"])
        return TestClient(app)

    def test_super_admin_without_role(self, client):
        response = client.get("/admin", headers={"x-roles": "root"})
        assert response.status_code == 200
        assert response.text == "admin"

    def test_role_holder(self, client):
        assert client.get("/admin", headers={"x-roles": "admin"}).status_code == 200

    def test_guest_is_forbidden(self, client):
        response = client.get("/admin", headers={"x-roles": "guest"})
        assert response.status_code == 403
        assert response.text == "Forbidden"

    def test_public_path_bypasses_roles(self, client):
        assert client.get("/public", headers={"x-roles": "guest"}).status_code == 200

    def test_no_credentials_skips_global_checks(self, client):
        assert client.get("/admin").status_code == 200

    def test_principal_missing_is_distinct(self, client):
        with pytest.raises(PrincipalMissing):
            client.get("/whoami")

    def test_principal_reaches_route(self, client):
        assert client.get("/whoami", headers={"x-roles": "a,b"}).json() == {"roles": ["a", "b"]}


class TestLoginGate:
    def test_redirects_to_login(self):
        client = TestClient(build_app(secured_paths=["/admin"], required_logged_in=True, required_roles="admin"))
        response = client.get("/admin", headers={"x-roles": "admin"}, follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "http://testserver/login"

    def test_absolute_login_path(self):
        client = TestClient(build_app(
            secured_paths=["/admin"],
            required_logged_in=True,
            login_path="https://auth.example.com/login",
        ))
        response = client.get("/admin", headers={"x-roles": ""}, follow_redirects=False)
        assert response.headers["location"] == "https://auth.example.com/login"

    def test_role_gate_not_run_after_login_failure(self):
        calls = []
        client = TestClient(build_app(
            secured_paths=["/admin"],
            required_logged_in=True,
            required_roles="admin",
            unauthenticated=lambda request: PlainTextResponse(calls.append("unauthenticated") or "login", 401),
            unauthorized=lambda request: PlainTextResponse(calls.append("unauthorized") or "no", 403),
        ))
        response = client.get("/admin", headers={"x-roles": "guest"})
        
        assert response.status_code == 401
        assert calls == ["unauthenticated"]

    def test_invalid_context_propagates(self):
        client = TestClient(build_app(initialize="nope"))
        with pytest.raises(InvalidPrincipalContext):
            client.get("/public", headers={"x-roles": "a"})


# =============================================================================
# Per-route protection
# =============================================================================


class TestRouteDependencies:
    @pytest.fixture
    def client(self):
        return TestClient(build_app())

    def test_require_auth(self, client):
        assert client.get("/account", headers={"x-roles": "", "x-logged-in": "1"}).status_code == 200
        response = client.get("/account", headers={"x-roles": ""}, follow_redirects=False)
        assert response.status_code == 302

    def test_require_role(self, client):
        assert client.get("/moderation", headers={"x-roles": "moderator"}).status_code == 200
        assert client.get("/moderation", headers={"x-roles": "superadmin"}).status_code == 200
        assert client.get("/moderation", headers={"x-roles": "guest"}).status_code == 403

    def test_custom_callbacks_are_used(self):
        async def unauthorized(request):
            return PlainTextResponse("go away", 418)

        client = TestClient(build_app(unauthorized=unauthorized))
        response = client.get("/moderation", headers={"x-roles": "guest"})
        assert response.status_code == 418
        assert response.text == "go away"

    def test_bare_middleware_with_custom_req_key(self):
        app = FastAPI()
        app.add_middleware(
            AccessControlMiddleware,
            retrieve=header_retrieve,
            save=noop_save,
            req_key="principal",
        )

        @app.get("/guests", dependencies=[Depends(require("guest"))])
        async def guests(principal: Principal = Depends(get_principal)):
            return {"roles": principal.get_roles()}

        client = TestClient(app)
        assert client.get("/guests", headers={"x-roles": "guest"}).json() == {"roles": ["guest"]}
        assert client.get("/guests", headers={"x-roles": "other"}).status_code == 403

    def test_without_install(self):
        app = FastAPI()

        @app.get("/open", dependencies=[Depends(require(False))])
        async def open_route():
            return "ok"

        @app.get("/closed", dependencies=[Depends(require("admin"))])
        async def closed():
            return "ok"

        client = TestClient(app)
        assert client.get("/open").status_code == 200
        with pytest.raises(PrincipalMissing):
            client.get("/closed")


# =============================================================================
# Sample app (session-backed)
# =============================================================================


class TestSampleApp:
    @pytest.fixture
    def client(self):
        return TestClient(create_app())

    def test_anonymous(self, client):
        assert client.get("/").json()["logged_in"] is False
        assert client.get("/test-public").text == "yes"
        
        response = client.get("/test-private", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "http://testserver/login"

    def test_add_and_remove_credentials(self, client):
        client.get("/add/admin", follow_redirects=False)
        
        home = client.get("/").json()
        assert home["logged_in"] is True
        assert home["roles"] == ["admin"]
        assert client.get("/test-private").text == "yes"
        assert client.get("/test-admin").text == "yes"
        assert client.get("/test-moderator").status_code == 403
        
        client.get("/remove/admin", follow_redirects=False)
        home = client.get("/").json()
        assert home["logged_in"] is False
        assert home["roles"] == []

    def test_super_admin(self, client):
        client.get("/add/superadmin", follow_redirects=False)
        
        assert client.get("/").json()["super_admin"] is True
        assert client.get("/test-moderator").text == "yes"

    def test_logout(self, client):
        client.get("/add/moderator", follow_redirects=False)
        client.get("/logout", follow_redirects=False)
        
        home = client.get("/").json()
        assert home == {"title": "Sample for roleguard", "logged_in": False, "roles": [], "super_admin": False}
