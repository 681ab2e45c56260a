"""
Credential storage abstraction.

The guard chain never knows where credentials live. It only needs
three hooks, all keyed on the request:

- retrieve(request)                  -> (logged_in, roles | None)
- save(request, logged_in, roles)    -> None
- initialize(request)                -> roles | None   (called on login)

A CredentialStore bundles the three. Hosts may also pass plain
functions (sync or async) instead of a store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """What is persisted for one session."""
    
    logged_in: bool = False
    roles: list[str] = Field(default_factory=list)


class CredentialStore(ABC):
    """
    Storage for a session's login state and roles.
    
    Default Implementation: the request session (see session.py)
    """
    
    @abstractmethod
    async def retrieve(self, request: Any) -> tuple[bool, list[str] | None]:
        """
        Load credentials for the request.
        
        Return roles=None when credentials cannot be loaded at all;
        no principal is built for the request in that case.
        """
        pass
    
    @abstractmethod
    async def save(self, request: Any, logged_in: bool, roles: list[str]) -> None:
        """Persist credentials for the request."""
        pass
    
    async def initialize(self, request: Any) -> list[str] | None:
        """
        Look up the roles a user gets when logging in.
        
        Returning None keeps the roles the principal already has.
        """
        return None
