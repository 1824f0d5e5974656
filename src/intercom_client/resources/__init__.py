"""Resource clients for the Intercom API.

Each module provides an accessor class bound to a shared RequestHandler
that maps method calls onto requests for one API resource.
"""

from .users import InvariantViolationError, UserResourceClient, resolve_identity_path

__all__ = [
    "InvariantViolationError",
    "UserResourceClient",
    "resolve_identity_path",
]
