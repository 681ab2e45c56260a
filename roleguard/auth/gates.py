"""
Gates - single pass/fail checks against a principal.

    secure(False) / secure([])   -> always passes
    secure(True)                 -> must be logged in
    secure("admin")              -> must have the role expression

A failed login gate yields UNAUTHENTICATED, a failed role gate
UNAUTHORIZED. Gates compose with then(): the second gate only runs when
the first one passes, so a failed login check never looks at roles.

Gates only decide. Turning a decision into a response is the job of
the guard chain (global protection) or the FastAPI dependencies
(per-route protection).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from roleguard.core.errors import PrincipalMissing
from roleguard.core.expressions import RoleExpression, is_empty, parse_expression

if TYPE_CHECKING:
    from roleguard.auth.principal import Principal

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    """Result of running a request through a gate or the guard chain."""
    
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    ERROR = "error"


class GateKind(str, Enum):
    OPEN = "open"
    LOGIN = "login"
    ROLES = "roles"


class Gate:
    """
    A single check with its failure outcome.
    
    Build gates with secure(), require_login() or require_roles().
    """
    
    def __init__(self, kind: GateKind, expression: RoleExpression | None = None):
        self.kind = kind
        self.expression = expression
    
    def __repr__(self) -> str:
        if self.kind is GateKind.ROLES:
            return f"Gate({self.kind.value}, {self.expression!r})"
        return f"Gate({self.kind.value})"
    
    def check(self, principal: Principal | None) -> Outcome:
        """
        Decide for a principal.
        
        Raises:
            PrincipalMissing: if a login or role gate gets no principal
        """
        if self.kind is GateKind.OPEN:
            return Outcome.ALLOW
        
        if principal is None:
            raise PrincipalMissing(f"{self.kind.value} gate needs a principal on the request")
        
        if self.kind is GateKind.LOGIN:
            outcome = Outcome.ALLOW if principal.is_logged_in() else Outcome.UNAUTHENTICATED
        else:
            outcome = Outcome.ALLOW if principal.has(self.expression) else Outcome.UNAUTHORIZED
        
        logger.debug(f"{self!r} -> {outcome.value}")
        return outcome
    
    def then(self, other: Gate | GateSequence) -> GateSequence:
        """Run other only if this gate passes."""
        return GateSequence((self,)).then(other)


class GateSequence:
    """Gates run in order; the first failure wins."""
    
    def __init__(self, gates: tuple[Gate, ...]):
        self.gates = gates
    
    def __repr__(self) -> str:
        return " -> ".join(repr(gate) for gate in self.gates)
    
    def check(self, principal: Principal | None) -> Outcome:
        for gate in self.gates:
            outcome = gate.check(principal)
            if outcome is not Outcome.ALLOW:
                return outcome
        return Outcome.ALLOW
    
    def then(self, other: Gate | GateSequence) -> GateSequence:
        extra = other.gates if isinstance(other, GateSequence) else (other,)
        return GateSequence(self.gates + extra)


# =============================================================================
# Constructors
# =============================================================================


def require_login() -> Gate:
    """Gate that passes only logged-in principals."""
    return Gate(GateKind.LOGIN)


def require_roles(requirement: Any) -> Gate:
    """
    Gate that passes principals matching a role expression.
    
    An empty requirement gives an open gate.
    """
    if is_empty(requirement):
        return Gate(GateKind.OPEN)
    return Gate(GateKind.ROLES, parse_expression(requirement))


def secure(requirement: Any) -> Gate:
    """
    Gate for any requirement.
    
    Args:
        requirement: True for login only, a role expression for roles,
            anything falsy (or an empty list) for no check at all
    """
    if requirement is True:
        return require_login()
    return require_roles(requirement)
