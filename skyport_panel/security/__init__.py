"""
Security subsystem for the Skyport panel.

- Identity tokens (signed JWTs carrying username + admin flag)
- AdminGate authorization predicate for every node route
"""

from skyport_panel.security.auth import AuthManager, Identity, TokenPayload
from skyport_panel.security.gate import AdminGate

__all__ = [
    "AdminGate",
    "AuthManager",
    "Identity",
    "TokenPayload",
]
