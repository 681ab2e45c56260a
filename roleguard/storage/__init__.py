"""
Credential storage.

- CredentialStore → abstract retrieve / save / initialize hooks
- SessionCredentialStore → request session (default)
"""

from roleguard.storage.base import CredentialStore, Credentials
from roleguard.storage.session import SessionCredentialStore

__all__ = [
    "CredentialStore",
    "Credentials",
    "SessionCredentialStore",
]
