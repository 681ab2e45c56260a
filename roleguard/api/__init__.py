"""HTTP integration: middleware and the sample application."""

from roleguard.api.middleware import AccessControlMiddleware, install_access_control

__all__ = [
    "AccessControlMiddleware",
    "install_access_control",
]
