"""Admin gate — the single authorization check in front of the node API."""

from typing import Optional

from skyport_panel.security.auth import Identity


class AdminGate:
    """Allows a call only for an identity flagged ``admin``."""

    def is_authorized(self, identity: Optional[Identity]) -> bool:
        return identity is not None and identity.admin is True
