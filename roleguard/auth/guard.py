"""
Guard chain - the per-request access control pipeline.

For each request:
1. Ignored path?           -> allow, credentials are not even loaded
2. retrieve(request)       -> build a Principal and attach it to the request
                              (no roles loaded -> no principal, keep going)
3. Principal + secured path -> login gate, then role gate
4. Otherwise               -> allow

Exactly one of continue / unauthenticated / unauthorized happens per
request. The configuration is resolved once per chain and never
changed afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Iterable

from fastapi import Request

from roleguard.auth.gates import GateSequence, Outcome, require_roles, secure
from roleguard.auth.principal import Principal, PrincipalContext
from roleguard.auth.responses import forbidden, redirect_to_login
from roleguard.config import Settings, get_settings
from roleguard.core.errors import InvalidPrincipalContext
from roleguard.core.expressions import RoleExpression, is_empty, parse_expression
from roleguard.core.paths import PathRule, match_path
from roleguard.core.utils import merge_unique, resolve
from roleguard.storage.base import CredentialStore
from roleguard.storage.session import SessionCredentialStore

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class GuardConfig:
    """
    Resolved configuration of one guard chain.
    
    Build it with GuardConfig.create(); the constructor takes every
    field already resolved.
    """
    
    ignored_paths: tuple[PathRule, ...]
    secured_paths: tuple[PathRule, ...]
    required_logged_in: bool
    required_roles: RoleExpression
    super_admin: tuple[str, ...]
    retrieve: Callable[..., Any]
    save: Callable[..., Any]
    initialize: Callable[..., Any]
    unauthorized: Callable[..., Any]
    unauthenticated: Callable[..., Any]
    login_path: str
    req_key: str
    
    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        *,
        ignored_paths: Iterable[PathRule] | None = None,
        secured_paths: Iterable[PathRule] | None = None,
        required_logged_in: bool | None = None,
        required_roles: Any = None,
        super_admin: Iterable[str] | None = None,
        store: CredentialStore | None = None,
        retrieve: Callable[..., Any] | None = None,
        save: Callable[..., Any] | None = None,
        initialize: Callable[..., Any] | None = None,
        unauthorized: Callable[..., Any] | None = None,
        unauthenticated: Callable[..., Any] | None = None,
        login_path: str | None = None,
        req_key: str | None = None,
    ) -> GuardConfig:
        """
        Merge options with the defaults.
        
        ignored_paths, secured_paths and super_admin are merged with the
        defaults (duplicates dropped, defaults first). Every other option
        replaces its default when given. Hooks given one by one win over
        the hooks of store.
        """
        settings = settings or get_settings()
        store = store or SessionCredentialStore(settings.session_key)
        login_path = login_path if login_path is not None else settings.login_path
        
        return cls(
            ignored_paths=tuple(merge_unique(settings.ignored_paths, ignored_paths)),
            secured_paths=tuple(merge_unique(settings.secured_paths, secured_paths)),
            required_logged_in=(
                settings.required_logged_in if required_logged_in is None else required_logged_in
            ),
            required_roles=parse_expression([] if is_empty(required_roles) else required_roles),
            super_admin=tuple(merge_unique(settings.super_admin, super_admin)),
            retrieve=retrieve or store.retrieve,
            save=save or store.save,
            initialize=initialize or store.initialize,
            unauthorized=unauthorized or forbidden,
            unauthenticated=unauthenticated or partial(redirect_to_login, login_path=login_path),
            login_path=login_path,
            req_key=req_key or settings.req_key,
        )


async def respond(config: GuardConfig, request: Request, outcome: Outcome) -> Any:
    """Response for a denied outcome, from the configured callbacks."""
    if outcome is Outcome.UNAUTHENTICATED:
        return await resolve(config.unauthenticated(request))
    return await resolve(config.unauthorized(request))


# =============================================================================
# Chain
# =============================================================================


@dataclass
class GuardResult:
    """Decision for one request."""
    
    outcome: Outcome
    principal: Principal | None = None
    error: Exception | None = None
    bypassed: bool = False
    
    @property
    def allowed(self) -> bool:
        return self.outcome is Outcome.ALLOW


class GuardChain:
    """
    Access control for every request going through a pipeline.
    
    Usage:
        chain = GuardChain(GuardConfig.create(secured_paths=["/admin"], required_roles="admin"))
        response = await chain(request, call_next)
    """
    
    def __init__(self, config: GuardConfig | None = None):
        self.config = config or GuardConfig.create()
        self.protection: GateSequence = secure(self.config.required_logged_in).then(
            require_roles(self.config.required_roles)
        )
    
    def is_ignored(self, path: str) -> bool:
        return match_path(path, self.config.ignored_paths)
    
    def is_secured(self, path: str) -> bool:
        return match_path(path, self.config.secured_paths)
    
    async def attach_principal(self, request: Request) -> Principal | None:
        """
        Load credentials and attach a Principal to request.state.
        
        Returns None (and attaches nothing) when retrieve yields no roles.
        
        Raises:
            InvalidPrincipalContext: if the configured hooks are unusable
        """
        logged_in, roles = await resolve(self.config.retrieve(request))
        if roles is None:
            logger.debug(f"No credentials for {request.url.path}, no principal attached")
            return None
        
        principal = Principal(
            logged_in,
            roles,
            PrincipalContext(
                request=request,
                super_admin=self.config.super_admin,
                save=self.config.save,
                initialize=self.config.initialize,
            ),
        )
        setattr(request.state, self.config.req_key, principal)
        return principal
    
    async def evaluate(self, request: Request) -> GuardResult:
        """Run the chain without producing a response."""
        path = request.url.path
        request.state.access_control = self.config
        
        if self.is_ignored(path):
            logger.debug(f"Ignored path {path}")
            return GuardResult(Outcome.ALLOW, bypassed=True)
        
        try:
            principal = await self.attach_principal(request)
        except InvalidPrincipalContext as e:
            return GuardResult(Outcome.ERROR, error=e)
        
        if principal is None or not self.is_secured(path):
            return GuardResult(Outcome.ALLOW, principal=principal)
        
        outcome = self.protection.check(principal)
        if outcome is not Outcome.ALLOW:
            logger.debug(f"Denied {path}: {outcome.value}")
        return GuardResult(outcome, principal=principal)
    
    async def respond(self, request: Request, outcome: Outcome) -> Any:
        return await respond(self.config, request, outcome)
    
    async def __call__(self, request: Request, call_next: Callable[..., Any]) -> Any:
        """
        Run the chain, then continue or deny.
        
        Raises:
            InvalidPrincipalContext: propagated to the host
        """
        result = await self.evaluate(request)
        
        if result.outcome is Outcome.ERROR:
            raise result.error
        if result.allowed:
            return await call_next(request)
        return await self.respond(request, result.outcome)
