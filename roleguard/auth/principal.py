"""
Principal - the "who is this and what may they do" for each request.

One Principal is built per request from the retrieved credentials and
attached to the request. Route handlers use it to check roles and to
change the session's credentials:

    principal = get_principal(request)
    if not principal.is_logged_in():
        await principal.login()
    await principal.grant("editor")
    if principal.has(["editor", ["owner", "admin"]]):
        ...

Every mutation ends by persisting through the injected save hook.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Collection

from roleguard.core.errors import InvalidPrincipalContext
from roleguard.core.expressions import evaluate, parse_expression
from roleguard.core.utils import flatten_roles, merge_unique, resolve

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrincipalContext:
    """
    Everything a principal is bound to.
    
    Attributes:
        request: The request the principal belongs to
        super_admin: Roles that satisfy any requirement (may be empty, not None)
        save: save(request, logged_in, roles), sync or async
        initialize: initialize(request) -> roles | None, sync or async
    """
    
    request: Any
    super_admin: Collection[str] | None
    save: Callable[..., Any] | None
    initialize: Callable[..., Any] | None
    
    def missing(self) -> list[str]:
        """Names of the fields a principal cannot work without."""
        missing = []
        if self.request is None:
            missing.append("request")
        if self.super_admin is None:
            missing.append("super_admin")
        if not callable(self.save):
            missing.append("save")
        if not callable(self.initialize):
            missing.append("initialize")
        return missing


class Principal:
    """
    Login state and roles of one session, for the duration of a request.
    
    Roles are unique; their order carries no meaning.
    """
    
    def __init__(self, logged_in: bool, roles: Collection[str], context: PrincipalContext | None):
        missing = context.missing() if context is not None else ["context"]
        if missing:
            raise InvalidPrincipalContext(missing)
        
        self.context = context
        self._logged_in = bool(logged_in)
        self._roles: list[str] = merge_unique(roles)
    
    def __repr__(self) -> str:
        return f"Principal(logged_in={self._logged_in!r}, roles={self._roles!r})"
    
    # =========================================================================
    # Accessors
    # =========================================================================
    
    def is_logged_in(self) -> bool:
        return self._logged_in
    
    def get_roles(self) -> list[str]:
        """All roles, as a copy."""
        return list(self._roles)
    
    def is_super_admin(self) -> bool:
        """Does the principal hold at least one super-admin role?"""
        return any(role in self._roles for role in self.context.super_admin)
    
    def has(self, requirement: Any) -> bool:
        """
        Check a role requirement.
        
        Usage:
            principal.has("admin")                   # admin
            principal.has(["admin", "editor"])       # admin AND editor
            principal.has(["a", ["b", "c"]])         # a AND (b OR c)
        
        Super-admins satisfy every requirement, including empty ones.
        """
        if self.is_super_admin():
            return True
        return evaluate(parse_expression(requirement), self._roles)
    
    # =========================================================================
    # Mutations (each one saves)
    # =========================================================================
    
    async def save(self) -> None:
        """Persist the current credentials."""
        await resolve(self.context.save(self.context.request, self._logged_in, self.get_roles()))
    
    async def grant(self, roles: Any) -> None:
        """Add role(s); nested collections are flattened, duplicates ignored."""
        self._roles = merge_unique(self._roles, flatten_roles(roles))
        await self.save()
    
    async def revoke(self, roles: Any) -> None:
        """Remove role(s); roles the principal does not have are ignored."""
        removed = set(flatten_roles(roles))
        self._roles = [role for role in self._roles if role not in removed]
        await self.save()
    
    async def revoke_all(self) -> None:
        """Remove every role."""
        self._roles = []
        await self.save()
    
    async def login(self) -> None:
        """
        Log in, then let the initialize hook load roles.
        
        A returned list replaces the current roles; None keeps them.
        """
        self._logged_in = True
        roles = await resolve(self.context.initialize(self.context.request))
        if roles is not None:
            self._roles = merge_unique(flatten_roles(roles))
        logger.info(f"Principal logged in with roles {self._roles}")
        await self.save()
    
    async def logout(self) -> None:
        """Log out, clearing all roles."""
        self._logged_in = False
        self._roles = []
        logger.info("Principal logged out")
        await self.save()
