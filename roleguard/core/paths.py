"""
Path matching for ignored and secured paths.

A rule is either:
- a literal string, matched exactly
- a compiled regular expression, matched with search() anywhere in the path
- any object exposing matches(path) -> bool

A list of rules matches when any of its rules does.
"""

from __future__ import annotations

import re
from typing import Iterable, Protocol, Union, runtime_checkable


@runtime_checkable
class PathPattern(Protocol):
    """Anything that can decide on its own whether it matches a path."""
    
    def matches(self, path: str) -> bool:
        ...


PathRule = Union[str, re.Pattern, PathPattern]


def rule_matches(rule: PathRule, path: str) -> bool:
    """Check a single rule against a path."""
    if isinstance(rule, str):
        return path == rule
    if isinstance(rule, re.Pattern):
        return rule.search(path) is not None
    if isinstance(rule, PathPattern):
        return bool(rule.matches(path))
    raise TypeError(f"Unsupported path rule: {rule!r}")


def match_path(path: str, rules: Iterable[PathRule]) -> bool:
    """Check if a path is matched against any rule of a list."""
    return any(rule_matches(rule, path) for rule in rules)
