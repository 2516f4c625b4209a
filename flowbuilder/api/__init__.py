"""HTTP API for workflow structure."""

from flowbuilder.api.app import create_app

__all__ = ["create_app"]
