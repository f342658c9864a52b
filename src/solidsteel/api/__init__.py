"""REST API for the Solid Steel site."""

from solidsteel.api.app import create_app

__all__ = ["create_app"]
