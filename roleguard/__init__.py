"""
roleguard - role based access control for request pipelines.

    from roleguard import install_access_control, require

    install_access_control(app, secured_paths=["/admin"], required_roles="admin")

    @app.get("/moderation", dependencies=[Depends(require([["admin", "moderator"]]))])
    async def moderation(): ...
"""

from roleguard.api.middleware import AccessControlMiddleware, install_access_control
from roleguard.auth import (
    GuardChain,
    GuardConfig,
    GuardResult,
    Outcome,
    Principal,
    PrincipalContext,
    Unauthenticated,
    Unauthorized,
    get_principal,
    require,
    require_auth,
    require_login,
    require_role,
    require_roles,
    secure,
)
from roleguard.config import Settings, get_settings
from roleguard.core import (
    AccessControlError,
    InvalidPrincipalContext,
    InvalidRoleExpression,
    PrincipalMissing,
    parse_expression,
    evaluate,
    match_path,
)
from roleguard.storage import CredentialStore, Credentials, SessionCredentialStore

__version__ = "0.1.0"

__all__ = [
    "AccessControlMiddleware",
    "install_access_control",
    "GuardChain",
    "GuardConfig",
    "GuardResult",
    "Outcome",
    "Principal",
    "PrincipalContext",
    "Unauthenticated",
    "Unauthorized",
    "get_principal",
    "require",
    "require_auth",
    "require_login",
    "require_role",
    "require_roles",
    "secure",
    "Settings",
    "get_settings",
    "AccessControlError",
    "InvalidPrincipalContext",
    "InvalidRoleExpression",
    "PrincipalMissing",
    "parse_expression",
    "evaluate",
    "match_path",
    "CredentialStore",
    "Credentials",
    "SessionCredentialStore",
]
