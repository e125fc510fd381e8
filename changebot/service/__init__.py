"""HTTP service mode for changebot."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
