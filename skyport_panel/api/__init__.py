"""HTTP surface of the panel."""

from skyport_panel.api.app import create_app

__all__ = ["create_app"]
