"""Service mode: serve a built documentation model over HTTP."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
