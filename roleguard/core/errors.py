"""
Error hierarchy for the access control core.

Unauthenticated and unauthorized outcomes are NOT errors: they are
decisions, and live in roleguard.auth.gates.
"""


class AccessControlError(Exception):
    """Base class for access control failures."""
    pass


class InvalidPrincipalContext(AccessControlError):
    """Raised when a principal is built without a usable context."""
    
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Invalid principal context, missing: {', '.join(missing)}")


class PrincipalMissing(AccessControlError):
    """Raised when code needs a principal but none was attached to the request."""
    pass


class InvalidRoleExpression(AccessControlError, TypeError):
    """Raised when a role expression contains something other than roles and lists."""
    pass
