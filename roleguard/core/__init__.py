"""Core access control logic: role expressions, path matching, errors."""

from roleguard.core.errors import (
    AccessControlError,
    InvalidPrincipalContext,
    InvalidRoleExpression,
    PrincipalMissing,
)
from roleguard.core.expressions import (
    Atom,
    Group,
    Mode,
    RoleExpression,
    evaluate,
    parse_expression,
)
from roleguard.core.paths import PathPattern, PathRule, match_path

__all__ = [
    "AccessControlError",
    "InvalidPrincipalContext",
    "InvalidRoleExpression",
    "PrincipalMissing",
    "Atom",
    "Group",
    "Mode",
    "RoleExpression",
    "evaluate",
    "parse_expression",
    "PathPattern",
    "PathRule",
    "match_path",
]
