"""
Role expressions - nested boolean requirements over roles.

Callers write plain strings and nested lists:

    "admin"                          -> admin
    ["admin", "editor"]              -> admin AND editor
    ["admin", ["editor", "owner"]]   -> admin AND (editor OR owner)
    [["a", ["b", "c"]]]              -> a OR (b AND c)

The mode of a group is never written by the caller. It is derived from
nesting depth: the top level is ALL, the next level ANY, and so on.
Parsing turns the raw input into Atom / Group once, evaluation walks
the parsed tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Union

from roleguard.core.errors import InvalidRoleExpression


class Mode(str, Enum):
    """How a group combines its children."""
    
    ALL = "all"   # conjunctive
    ANY = "any"   # disjunctive
    
    @property
    def flipped(self) -> Mode:
        return Mode.ANY if self is Mode.ALL else Mode.ALL


@dataclass(frozen=True)
class Atom:
    """A single required role."""
    
    role: str


@dataclass(frozen=True)
class Group:
    """An ordered group of sub-expressions combined by mode."""
    
    mode: Mode
    children: tuple[RoleExpression, ...] = ()


RoleExpression = Union[Atom, Group]


def parse_expression(raw: Any, mode: Mode = Mode.ALL) -> RoleExpression:
    """
    Parse a raw requirement into a RoleExpression.
    
    Args:
        raw: A role string, or a (nested) list/tuple of them. Already
            parsed expressions are returned untouched.
        mode: Mode for a list found at this depth.
    
    Raises:
        InvalidRoleExpression: for leaves that are not strings
    """
    if isinstance(raw, (Atom, Group)):
        return raw
    if isinstance(raw, str):
        return Atom(raw)
    if isinstance(raw, (list, tuple)):
        return Group(
            mode=mode,
            children=tuple(parse_expression(child, mode.flipped) for child in raw),
        )
    raise InvalidRoleExpression(
        f"Role expressions are built from strings and lists, got {type(raw).__name__}"
    )


def evaluate(expr: RoleExpression, roles: Collection[str]) -> bool:
    """
    Evaluate a parsed expression against a set of roles.
    
    Groups short-circuit: ALL stops at the first false child, ANY at the
    first true one. An empty ALL group is true, an empty ANY group false.
    Role comparison is exact and case-sensitive.
    """
    if isinstance(expr, Atom):
        return expr.role in roles
    
    if expr.mode is Mode.ALL:
        for child in expr.children:
            if not evaluate(child, roles):
                return False  # false AND ... = false
        return True
    
    for child in expr.children:
        if evaluate(child, roles):
            return True  # true OR ... = true
    return False


def is_empty(raw: Any) -> bool:
    """True for requirements that ask for nothing (falsy, empty list, empty ALL group)."""
    if isinstance(raw, Group):
        return raw.mode is Mode.ALL and not raw.children
    return not raw
