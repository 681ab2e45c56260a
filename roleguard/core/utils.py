"""
Shared utility functions for roleguard.

This module contains common utilities used across the codebase.
"""

from __future__ import annotations

import inspect
from typing import Any, Iterable


def merge_unique(*sequences: Iterable[Any] | None) -> list[Any]:
    """
    Merge sequences into a new list, dropping duplicates.
    
    First-seen order is kept, so defaults listed first stay first.
    None entries are skipped.
    """
    result: list[Any] = []
    for sequence in sequences:
        if not sequence:
            continue
        for item in sequence:
            if item not in result:
                result.append(item)
    return result


def flatten_roles(roles: Any) -> list[str]:
    """
    Flatten a role or an arbitrarily nested collection of roles.
    
    Args:
        roles: "admin", ["admin", "editor"], ["a", ["b", ["c"]]] ...
        
    Returns:
        Roles in the order they appear, e.g. ["a", "b", "c"]
    """
    if isinstance(roles, (list, tuple, set, frozenset)):
        flat: list[str] = []
        for role in roles:
            flat.extend(flatten_roles(role))
        return flat
    return [roles]


async def resolve(value: Any) -> Any:
    """Await value if it is awaitable, so hooks may be sync or async."""
    if inspect.isawaitable(value):
        return await value
    return value
