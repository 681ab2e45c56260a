"""
Authorization - principals, gates, and the guard chain.

Design principles:
1. One Principal per request, attached by the guard chain
2. Role requirements are plain nested lists (AND / OR alternate by depth)
3. Super-admin roles satisfy everything
4. Global protection by path, per-route protection by dependency
"""

from roleguard.auth.principal import Principal, PrincipalContext
from roleguard.auth.gates import (
    Gate,
    GateSequence,
    Outcome,
    require_login,
    require_roles,
    secure,
)
from roleguard.auth.guard import GuardChain, GuardConfig, GuardResult
from roleguard.auth.responses import forbidden, redirect_to_login
from roleguard.auth.dependencies import (
    Unauthenticated,
    Unauthorized,
    find_principal,
    get_principal,
    require,
    require_auth,
    require_role,
)

__all__ = [
    # Principal
    "Principal",
    "PrincipalContext",
    # Gates
    "Gate",
    "GateSequence",
    "Outcome",
    "require_login",
    "require_roles",
    "secure",
    # Chain
    "GuardChain",
    "GuardConfig",
    "GuardResult",
    # Default responses
    "forbidden",
    "redirect_to_login",
    # FastAPI dependencies
    "Unauthenticated",
    "Unauthorized",
    "find_principal",
    "get_principal",
    "require",
    "require_auth",
    "require_role",
]
